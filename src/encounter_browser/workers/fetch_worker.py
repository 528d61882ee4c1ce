"""
Background fetch of encounter previews.

Each request runs in its own QThread so a slow backend call never blocks the
UI. Results are reported through Qt signals (queued across threads) tagged
with the request sequence number; deciding whether a result is still wanted
is the controller's job.
"""

from typing import Callable

from PySide6.QtCore import QObject, QThread, Signal, Slot

from ..core.models import EncountersOverview
from ..core.query import Query
from ..utils.logging_config import get_logger

logger = get_logger("fetch_worker")

# Backend call: Query -> EncountersOverview
LoadFunction = Callable[[Query], EncountersOverview]


class FetchWorker(QThread):
    """
    Worker thread running a single backend query.

    Emits exactly one of fetch_completed / fetch_failed.
    """

    fetch_completed = Signal(int, object)  # seq, EncountersOverview
    fetch_failed = Signal(int, str)  # seq, error message

    def __init__(self, seq: int, query: Query, load: LoadFunction, parent=None):
        super().__init__(parent)
        self._seq = seq
        self._query = query
        self._load = load

    @property
    def seq(self) -> int:
        return self._seq

    def run(self) -> None:
        """Worker thread entry point."""
        try:
            overview = self._load(self._query)
        except Exception as e:
            logger.exception(f"Fetch #{self._seq} failed")
            self.fetch_failed.emit(self._seq, str(e) or e.__class__.__name__)
            return

        self.fetch_completed.emit(self._seq, overview)


class QueryFetcher(QObject):
    """
    Transport interface used by ReactiveQueryController.

    Subclasses start the request in fetch() and later emit fetch_completed
    or fetch_failed with the same sequence number.
    """

    fetch_completed = Signal(int, object)
    fetch_failed = Signal(int, str)

    def fetch(self, seq: int, query: Query) -> None:
        raise NotImplementedError


class ThreadedFetcher(QueryFetcher):
    """
    Runs every fetch in a fresh FetchWorker.

    In-flight workers are not cancelled when a newer request starts; they
    finish and report, and stale reports are ignored downstream.
    """

    def __init__(self, load: LoadFunction, parent=None):
        super().__init__(parent)
        self._load = load
        self._workers: dict[int, FetchWorker] = {}

    @property
    def in_flight(self) -> int:
        return len(self._workers)

    def fetch(self, seq: int, query: Query) -> None:
        worker = FetchWorker(seq, query, self._load, self)
        # Signal-to-signal: delivered on this object's thread
        worker.fetch_completed.connect(self.fetch_completed)
        worker.fetch_failed.connect(self.fetch_failed)
        worker.finished.connect(self._on_worker_finished)

        self._workers[seq] = worker
        worker.start()

    @Slot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if isinstance(worker, FetchWorker):
            self._workers.pop(worker.seq, None)
            worker.deleteLater()

    def shutdown(self, timeout_ms: int = 5000) -> None:
        """Wait for running workers before the application exits."""
        for seq, worker in list(self._workers.items()):
            if not worker.wait(timeout_ms):
                logger.warning(f"Fetch #{seq} still running at shutdown")
        self._workers.clear()
