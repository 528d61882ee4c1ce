"""
View synchronizer.

Derives everything the encounter list renders from the controller's latest
overview, and turns page-boundary navigation into input changes.
"""

from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from . import pagination
from .controller import QueryInputs, ReactiveQueryController
from .models import EmptyState, EncounterPreview, EncountersOverview
from ..utils.logging_config import get_logger

logger = get_logger("view_sync")


@dataclass(frozen=True)
class NavigationState:
    """Which pagination buttons are usable."""

    can_first: bool
    can_previous: bool
    can_next: bool
    can_last: bool


class ViewSynchronizer(QObject):
    """
    Read side of the encounter list plus first/previous/next/last.

    Emits:
    - view_changed: after every accepted overview
    - scroll_to_row_requested: row to bring into view after a navigation
    """

    view_changed = Signal()
    scroll_to_row_requested = Signal(int)

    def __init__(self, controller: ReactiveQueryController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._inputs = controller.inputs
        # Sequence issued by the last navigation, scrolled to once applied
        self._scroll_seq: Optional[int] = None

        self._controller.overview_changed.connect(self._on_overview_changed)

    @property
    def inputs(self) -> QueryInputs:
        return self._inputs

    @property
    def overview(self) -> EncountersOverview:
        return self._controller.overview

    @property
    def rows(self) -> tuple[EncounterPreview, ...]:
        """Encounters of the current page in backend order."""
        return self.overview.encounters

    @property
    def page(self) -> int:
        return self._inputs.page

    @property
    def total_encounters(self) -> int:
        return self.overview.total_encounters

    @property
    def total_pages(self) -> int:
        return pagination.total_pages(self.total_encounters, self._controller.page_size)

    def summary(self) -> str:
        return pagination.summary(
            self.page, self._controller.page_size, self.total_encounters
        )

    def page_label(self) -> str:
        return f"Page {self.page} of {self.total_pages}"

    def empty_state(self) -> Optional[EmptyState]:
        """None when there are rows to show."""
        if self.rows:
            return None
        if self._inputs.search_text:
            return EmptyState.NO_MATCHES
        return EmptyState.NO_RECORDS

    def navigation_state(self) -> NavigationState:
        page = self.page
        can_previous = pagination.has_previous(page)
        can_next = pagination.has_next(
            page, self._controller.page_size, self.total_encounters
        )
        return NavigationState(
            can_first=can_previous,
            can_previous=can_previous,
            can_next=can_next,
            can_last=page < self.total_pages,
        )

    def first(self) -> bool:
        return self._go_to(1)

    def previous(self) -> bool:
        if not pagination.has_previous(self.page):
            return False
        return self._go_to(self.page - 1)

    def next(self) -> bool:
        if not pagination.has_next(
            self.page, self._controller.page_size, self.total_encounters
        ):
            return False
        return self._go_to(self.page + 1)

    def last(self) -> bool:
        return self._go_to(self.total_pages)

    def _go_to(self, page: int) -> bool:
        if page == self.page:
            return False
        logger.debug(f"Navigating from page {self.page} to {page}")
        self._inputs.set_page(page)
        self._scroll_seq = self._controller.latest_sequence
        return True

    @Slot(object)
    def _on_overview_changed(self, overview: EncountersOverview) -> None:
        scroll_seq, self._scroll_seq = self._scroll_seq, None
        if (
            scroll_seq is not None
            and scroll_seq == self._controller.applied_sequence
            and overview.encounters
        ):
            self.scroll_to_row_requested.emit(0)
        self.view_changed.emit()
