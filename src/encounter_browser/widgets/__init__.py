"""UI widgets for the encounter browser."""

from .encounter_table import EncounterTableModel, EncounterTableWidget, PaginationBar
from .filter_panel import FilterPanel
from .interface_banner import InterfaceChangedBanner

__all__ = [
    "EncounterTableModel",
    "EncounterTableWidget",
    "PaginationBar",
    "FilterPanel",
    "InterfaceChangedBanner",
]
