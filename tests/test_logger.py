"""Tests for the colored logging setup."""

import io
import logging
import unittest

from colorama import Style

from sitewatch.logger import ColorFormatter, setup_logging


class TestSetupLogging(unittest.TestCase):
    """Verify handler installation and message format."""

    def setUp(self):
        root = logging.getLogger()
        self._saved = (list(root.handlers), root.level)

    def tearDown(self):
        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)
        handlers, level = self._saved
        for h in handlers:
            root.addHandler(h)
        root.setLevel(level)

    def test_single_handler_installed(self):
        """setup_logging replaces any existing root handlers."""
        setup_logging("INFO", stream=io.StringIO())
        setup_logging("INFO", stream=io.StringIO())
        self.assertEqual(len(logging.getLogger().handlers), 1)

    def test_message_format(self):
        """Lines carry the level, the logger name and the message."""
        stream = io.StringIO()
        setup_logging("debug", stream=stream)
        logging.getLogger("sitewatch.test").warning("page done url=x")
        line = stream.getvalue()
        self.assertIn("[ WARNING ] sitewatch.test : page done url=x", line)
        self.assertTrue(line.rstrip("\n").endswith(Style.RESET_ALL))

    def test_level_filters(self):
        """Records below the configured level are dropped."""
        stream = io.StringIO()
        setup_logging(logging.WARNING, stream=stream)
        logging.getLogger("sitewatch.test").info("hidden")
        self.assertEqual(stream.getvalue(), "")

    def test_unknown_level_rejected(self):
        """An unknown level name raises ValueError."""
        with self.assertRaises(ValueError):
            setup_logging("LOUD", stream=io.StringIO())


class TestColorFormatter(unittest.TestCase):
    """Verify formatting of levels without a style."""

    def test_custom_level_left_plain(self):
        """Levels without a style mapping are not colored."""
        record = logging.LogRecord("x", 25, __file__, 1, "note", None, None)
        text = ColorFormatter(fmt="%(message)s").format(record)
        self.assertEqual(text, "note")


if __name__ == "__main__":
    unittest.main()
