import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer

from encounter_browser.core.encounter_store import EncounterStore
from encounter_browser.core.models import SearchFilter
from encounter_browser.core.query import assemble
from encounter_browser.workers.fetch_worker import FetchWorker, ThreadedFetcher


class TestFetchWorker(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self):
        self.store = EncounterStore()
        for i in range(12):
            self.store.insert_encounter("Kakul", [("Nyx", 102)], 1000 + i, 300_000)
        self.query = assemble("", SearchFilter(), 2, 10, 0)

    def tearDown(self):
        self.store.close()

    def test_run_reports_overview(self):
        completed = []
        failed = []
        worker = FetchWorker(7, self.query, self.store.load_query)
        worker.fetch_completed.connect(lambda seq, overview: completed.append((seq, overview)))
        worker.fetch_failed.connect(lambda seq, message: failed.append((seq, message)))

        worker.run()

        self.assertEqual(failed, [])
        self.assertEqual(len(completed), 1)
        seq, overview = completed[0]
        self.assertEqual(seq, 7)
        self.assertEqual(overview.total_encounters, 12)
        self.assertEqual(len(overview.encounters), 2)

    def test_run_reports_failure(self):
        def broken(query):
            raise RuntimeError("database is locked")

        completed = []
        failed = []
        worker = FetchWorker(3, self.query, broken)
        worker.fetch_completed.connect(lambda seq, overview: completed.append(seq))
        worker.fetch_failed.connect(lambda seq, message: failed.append((seq, message)))

        worker.run()

        self.assertEqual(completed, [])
        self.assertEqual(failed, [(3, "database is locked")])

    def test_threaded_fetcher_delivers_result(self):
        fetcher = ThreadedFetcher(self.store.load_query)
        results = []
        loop = QEventLoop()

        def on_completed(seq, overview):
            results.append((seq, overview))
            loop.quit()

        fetcher.fetch_completed.connect(on_completed)
        QTimer.singleShot(5000, loop.quit)

        fetcher.fetch(1, self.query)
        loop.exec()
        fetcher.shutdown()

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0][0], 1)
        self.assertEqual(results[0][1].total_encounters, 12)


if __name__ == "__main__":
    unittest.main()
