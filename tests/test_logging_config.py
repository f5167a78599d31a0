"""
Unit tests for logging_config.py and errors.py
"""

import logging
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from errors import DataLoadFailure, DegenerateInput
from logging_config import NOISY_LOGGERS, level_from_name, setup_logging


class TestSetupLogging(unittest.TestCase):
    """Test suite for the root logger setup."""

    def setUp(self):
        self.root = logging.getLogger()
        self.saved = (self.root.level, list(self.root.handlers))
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers = self.saved[1]
        self.root.setLevel(self.saved[0])
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_repeated_setup_keeps_one_handler(self):
        """Streamlit reruns the script; handlers must not pile up."""
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        self.assertEqual(len(self.root.handlers), 1)
        self.assertEqual(self.root.level, logging.DEBUG)

    def test_file_handler(self):
        log_file = self.test_dir / "app.log"
        setup_logging(logging.INFO, log_file=str(log_file))
        logging.getLogger("datasets").info("loaded 29 records")
        for handler in self.root.handlers:
            handler.flush()
        self.assertIn("datasets - INFO - loaded 29 records", log_file.read_text(encoding="utf-8"))

    def test_file_survives_reruns(self):
        log_file = self.test_dir / "app.log"
        setup_logging(logging.INFO, log_file=str(log_file))
        logging.getLogger("app").info("first run")
        setup_logging(logging.INFO, log_file=str(log_file))
        logging.getLogger("app").info("second run")
        for handler in self.root.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        self.assertIn("first run", text)
        self.assertIn("second run", text)
        self.assertEqual(len(self.root.handlers), 2)

    def test_noisy_libraries_stay_at_warning(self):
        setup_logging(logging.DEBUG)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)
        self.assertFalse(logging.getLogger("urllib3").isEnabledFor(logging.INFO))
        self.assertTrue(logging.getLogger("datasets").isEnabledFor(logging.DEBUG))

    def test_level_from_name(self):
        self.assertEqual(level_from_name("debug"), logging.DEBUG)
        self.assertEqual(level_from_name("WARNING"), logging.WARNING)
        self.assertEqual(level_from_name("chatty"), logging.INFO)
        self.assertEqual(level_from_name(""), logging.INFO)


class TestErrors(unittest.TestCase):

    def test_data_load_failure_message(self):
        err = DataLoadFailure("paralympics.csv", "file not found")
        self.assertEqual(str(err), "dataset unavailable: paralympics.csv (file not found)")
        self.assertEqual(err.reason, "file not found")

    def test_degenerate_input_is_a_value_error(self):
        self.assertTrue(issubclass(DegenerateInput, ValueError))


if __name__ == "__main__":
    unittest.main()
