"""
Reactive query controller.

QueryInputs is the observable store for everything the canonical query
depends on. ReactiveQueryController watches it, issues one fetch per change
and applies results in issue order:

    input mutation -> inputs_changed -> assemble Query -> fetch(seq, query)
    -> fetch_completed(seq, overview) -> apply only if seq is the latest

Earlier requests are never cancelled at the transport; their responses are
dropped on arrival when a newer sequence number has been issued.
"""

from dataclasses import replace
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal, Slot, QMutex, QMutexLocker

from .models import EncountersOverview, FetchState, SearchFilter
from .pagination import PAGE_SIZE, clamp_page
from .query import Query, assemble
from ..utils.logging_config import get_logger

logger = get_logger("controller")


class QueryInputs(QObject):
    """
    Observable store for search text, filter and page.

    Every mutation that changes state emits inputs_changed exactly once with
    the frozenset of field names it touched. Mutations that change nothing
    emit nothing.
    """

    inputs_changed = Signal(object)  # frozenset[str]

    def __init__(self, parent=None):
        super().__init__(parent)
        self._search_text = ""
        self._filter = SearchFilter()
        self._page = 1
        self._back_navigation = False

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def search_filter(self) -> SearchFilter:
        """Copy of the current filter; edit through set_filter/update_filter."""
        return self._filter.copy()

    @property
    def page(self) -> int:
        return self._page

    def mark_back_navigation(self) -> None:
        """
        Keep the current page on the next empty -> non-empty search change.

        The flag is one-shot: it is consumed the first time it is read.
        """
        self._back_navigation = True

    def _consume_back_navigation(self) -> bool:
        flag = self._back_navigation
        self._back_navigation = False
        return flag

    def set_search_text(self, text: str) -> None:
        """
        Update the free-text search.

        Starting a search (length 0 -> >0) jumps back to page 1 in the same
        update, unless a back navigation was marked.
        """
        if text == self._search_text:
            return

        changed = {"search"}
        if not self._search_text and text:
            if self._consume_back_navigation():
                logger.debug(f"Back navigation: keeping page {self._page}")
            elif self._page != 1:
                self._page = 1
                changed.add("page")

        self._search_text = text
        self.inputs_changed.emit(frozenset(changed))

    def set_filter(self, search_filter: SearchFilter) -> None:
        """Replace the filter with a private copy of search_filter."""
        new_filter = search_filter.copy()
        if new_filter == self._filter:
            return
        self._filter = new_filter
        self.inputs_changed.emit(frozenset({"filter"}))

    def update_filter(self, **fields) -> None:
        """Change individual filter fields, e.g. update_filter(cleared_only=True)."""
        self.set_filter(replace(self._filter.copy(), **fields))

    def set_page(self, page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page == self._page:
            return
        self._page = page
        self.inputs_changed.emit(frozenset({"page"}))


class ReactiveQueryController(QObject):
    """
    Issues backend fetches for the inputs in WATCHED_INPUTS.

    The fetcher is any QObject exposing fetch(seq, query) together with
    fetch_completed(int, object) and fetch_failed(int, str) signals.

    Emits:
    - query_issued: (seq, Query) for every fetch started
    - overview_changed: latest accepted EncountersOverview
    - state_changed: FetchState transitions
    - fetch_failed: error message of a failed latest request
    """

    WATCHED_INPUTS = frozenset({"search", "filter", "page"})

    query_issued = Signal(int, object)
    overview_changed = Signal(object)
    state_changed = Signal(object)
    fetch_failed = Signal(str)

    def __init__(
        self,
        inputs: QueryInputs,
        fetcher: QObject,
        default_min_duration: Callable[[], int] = lambda: 0,
        page_size: int = PAGE_SIZE,
        parent=None,
    ):
        """
        Initialize the controller.

        Args:
            inputs: Store to watch
            fetcher: Transport running the backend call
            default_min_duration: Settings lookup used for the filter sentinel
            page_size: Rows per page
            parent: Qt parent object
        """
        super().__init__(parent)

        self._inputs = inputs
        self._fetcher = fetcher
        self._default_min_duration = default_min_duration
        self._page_size = page_size

        self._seq_mutex = QMutex()
        self._latest_seq = 0
        self._applied_seq = 0

        self._state = FetchState.IDLE
        self._overview = EncountersOverview()
        self._current_query: Optional[Query] = None

        self._inputs.inputs_changed.connect(self._on_inputs_changed)
        self._fetcher.fetch_completed.connect(self._on_fetch_completed)
        self._fetcher.fetch_failed.connect(self._on_fetch_failed)

    @property
    def inputs(self) -> QueryInputs:
        return self._inputs

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def overview(self) -> EncountersOverview:
        return self._overview

    @property
    def current_query(self) -> Optional[Query]:
        """Query of the latest issued request."""
        return self._current_query

    @property
    def latest_sequence(self) -> int:
        with QMutexLocker(self._seq_mutex):
            return self._latest_seq

    @property
    def applied_sequence(self) -> int:
        """Sequence number of the overview currently shown."""
        return self._applied_seq

    def build_query(self) -> Query:
        """Assemble the canonical query for the current inputs."""
        return assemble(
            self._inputs.search_text,
            self._inputs.search_filter,
            self._inputs.page,
            self._page_size,
            self._default_min_duration(),
        )

    def refresh(self) -> int:
        """Re-issue the current query, e.g. after the backend data changed."""
        return self._issue()

    @Slot(object)
    def _on_inputs_changed(self, fields: frozenset) -> None:
        if not fields & self.WATCHED_INPUTS:
            return
        self._issue()

    def _next_sequence(self) -> int:
        with QMutexLocker(self._seq_mutex):
            self._latest_seq += 1
            return self._latest_seq

    def _is_latest(self, seq: int) -> bool:
        with QMutexLocker(self._seq_mutex):
            return seq == self._latest_seq

    def _issue(self) -> int:
        query = self.build_query()
        seq = self._next_sequence()
        self._current_query = query

        logger.debug(
            f"Issuing fetch #{seq}: page={query.page} search={query.search!r}"
        )
        self._set_state(FetchState.FETCHING)
        self.query_issued.emit(seq, query)
        self._fetcher.fetch(seq, query)
        return seq

    @Slot(int, object)
    def _on_fetch_completed(self, seq: int, overview: EncountersOverview) -> None:
        if not self._is_latest(seq):
            logger.debug(f"Discarding stale response #{seq}")
            return

        page = self._inputs.page
        if overview.is_empty:
            clamped = clamp_page(page, overview.total_encounters, self._page_size)
            if clamped != page:
                logger.info(
                    f"Page {page} out of range for {overview.total_encounters} "
                    f"encounters, moving to page {clamped}"
                )
                # set_page issues the re-fetch
                self._inputs.set_page(clamped)
                return

        self._overview = overview
        self._applied_seq = seq
        self._set_state(FetchState.IDLE)
        self.overview_changed.emit(overview)

        logger.debug(
            f"Applied response #{seq}: {len(overview.encounters)} rows, "
            f"{overview.total_encounters} total"
        )

    @Slot(int, str)
    def _on_fetch_failed(self, seq: int, message: str) -> None:
        if not self._is_latest(seq):
            logger.debug(f"Discarding stale failure #{seq}: {message}")
            return

        logger.warning(f"Fetch #{seq} failed: {message}")
        self._set_state(FetchState.IDLE)
        self.fetch_failed.emit(message)

    def _set_state(self, state: FetchState) -> None:
        if state == self._state:
            return
        self._state = state
        self.state_changed.emit(state)
