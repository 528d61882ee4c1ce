"""Core modules for querying, paginating and selecting encounters."""

from .models import (
    DEFAULT_MIN_DURATION,
    EmptyState,
    EncounterPreview,
    EncountersOverview,
    FetchState,
    SearchFilter,
)
from .query import MAX_SEARCH_LENGTH, Query, assemble
from .pagination import PAGE_SIZE
from .controller import QueryInputs, ReactiveQueryController
from .selection import SelectionManager
from .view_sync import NavigationState, ViewSynchronizer
from .interface_relay import InterfaceChangeRelay, get_interface_relay
from .encounter_store import EncounterStore
from .settings import AppSettings

__all__ = [
    "DEFAULT_MIN_DURATION",
    "EmptyState",
    "EncounterPreview",
    "EncountersOverview",
    "FetchState",
    "SearchFilter",
    "MAX_SEARCH_LENGTH",
    "Query",
    "assemble",
    "PAGE_SIZE",
    "QueryInputs",
    "ReactiveQueryController",
    "SelectionManager",
    "NavigationState",
    "ViewSynchronizer",
    "InterfaceChangeRelay",
    "get_interface_relay",
    "EncounterStore",
    "AppSettings",
]
