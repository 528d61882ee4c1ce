import unittest
import sys
import logging
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from encounter_browser.utils.logging_config import (
    LOG_FILE_NAME,
    LOGGER_NAME,
    get_logger,
    parse_log_level,
    setup_logging,
)


class TestParseLogLevel(unittest.TestCase):
    def test_names(self):
        self.assertEqual(parse_log_level("debug"), logging.DEBUG)
        self.assertEqual(parse_log_level(" Warning "), logging.WARNING)
        self.assertEqual(parse_log_level("ERROR"), logging.ERROR)

    def test_numbers_pass_through(self):
        self.assertEqual(parse_log_level(logging.INFO), logging.INFO)

    def test_unknown_name(self):
        with self.assertRaises(ValueError):
            parse_log_level("verbose")


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.log_dir = Path(self.tmp.name) / "logs"

    def tearDown(self):
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        self.tmp.cleanup()

    def test_handlers_and_levels(self):
        logger = setup_logging("warning", log_dir=self.log_dir)

        self.assertTrue((self.log_dir / LOG_FILE_NAME).exists())
        self.assertEqual(len(logger.handlers), 2)

        file_handler = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)][0]
        console_handler = [h for h in logger.handlers if h is not file_handler][0]
        self.assertEqual(file_handler.level, logging.DEBUG)
        self.assertEqual(console_handler.level, logging.WARNING)

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(log_dir=self.log_dir)
        logger = setup_logging("DEBUG", log_dir=self.log_dir)
        self.assertEqual(len(logger.handlers), 2)

    def test_child_records_reach_file_with_thread_name(self):
        setup_logging("ERROR", log_dir=self.log_dir)

        get_logger("controller").debug("Discarding stale response #4")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()

        text = (self.log_dir / LOG_FILE_NAME).read_text(encoding="utf-8")
        self.assertIn("encounter_browser.controller", text)
        self.assertIn("MainThread", text)
        self.assertIn("Discarding stale response #4", text)

    def test_invalid_level_rejected(self):
        with self.assertRaises(ValueError):
            setup_logging("loud", log_dir=self.log_dir)


if __name__ == "__main__":
    unittest.main()
