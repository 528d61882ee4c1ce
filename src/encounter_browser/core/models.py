"""
Data models for the encounter browser.

These dataclasses provide type-safe representations of:
- Encounter previews returned by the backend
- One page of results plus the filtered total
- The user-editable search filter
- Fetch and empty-state enumerations
"""

from dataclasses import dataclass, field, replace
from typing import Optional
from enum import Enum


# Sentinel for SearchFilter.min_duration meaning "use the settings default"
DEFAULT_MIN_DURATION = -1


class FetchState(Enum):
    """Reactive query controller state."""

    IDLE = "idle"
    FETCHING = "fetching"


class EmptyState(Enum):
    """Reason the encounter list is empty."""

    NO_MATCHES = "no_matches"
    NO_RECORDS = "no_records"

    @property
    def message(self) -> str:
        if self is EmptyState.NO_MATCHES:
            return "No encounters found."
        return "No encounters recorded."

    @property
    def hint(self) -> str:
        if self is EmptyState.NO_RECORDS:
            return "Meter should be turned on at start of fight"
        return ""


@dataclass(frozen=True, slots=True)
class EncounterPreview:
    """
    Summary of one recorded encounter.

    Frozen: a preview belongs to the fetch result that produced it.
    `names` and `classes` are parallel sequences.
    """

    id: int
    boss_name: str
    names: tuple[str, ...]
    classes: tuple[int, ...]
    fight_start: int  # epoch milliseconds
    duration: int  # milliseconds
    cleared: Optional[bool] = None
    favorite: Optional[bool] = None

    def __post_init__(self):
        if len(self.names) != len(self.classes):
            raise ValueError(
                f"Encounter {self.id}: {len(self.names)} names "
                f"but {len(self.classes)} classes"
            )

    @property
    def duration_text(self) -> str:
        """Return duration as m:ss."""
        minutes, seconds = divmod(self.duration // 1000, 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def participants(self) -> list[tuple[str, int]]:
        """Return (name, class_id) pairs in party order."""
        return list(zip(self.names, self.classes))


@dataclass(frozen=True, slots=True)
class EncountersOverview:
    """One page of encounters plus the total matching the filter."""

    encounters: tuple[EncounterPreview, ...] = ()
    total_encounters: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.encounters


@dataclass
class SearchFilter:
    """
    Structured filter edited by the user.

    Mutable: the filter panel edits it in place. All fields are combined
    with AND when a query is assembled.
    """

    min_duration: int = DEFAULT_MIN_DURATION
    bosses: set[str] = field(default_factory=set)
    classes: set[int] = field(default_factory=set)
    cleared_only: bool = False
    favorites_only: bool = False

    def copy(self) -> "SearchFilter":
        """Return a copy that shares no mutable state with this filter."""
        return replace(self, bosses=set(self.bosses), classes=set(self.classes))

    @property
    def is_active(self) -> bool:
        """Check if any field differs from the default."""
        return self != SearchFilter()
