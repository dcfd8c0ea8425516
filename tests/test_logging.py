import io
import logging
import unittest
from unittest import mock

from voice_tools.platform.logging import COLORS, ColorFormatter, create_logger, dynamic_print


class FakeTTYStream(io.StringIO):
    def isatty(self):
        return True


class TestDynamicPrint(unittest.TestCase):

    def test_persist_writes_newline(self):
        """dynamic_print should append a newline when persist=True."""
        stream = FakeTTYStream()
        with mock.patch("voice_tools.platform.logging._get_terminal_width", return_value=10):
            dynamic_print("Hello", stream=stream, persist=True)
        output = stream.getvalue()
        self.assertTrue(output.endswith("\n"))
        self.assertIn("Hello", output)

    def test_non_tty_falls_back_to_plain_line(self):
        stream = io.StringIO()
        dynamic_print("Plain message", stream=stream)
        self.assertEqual(stream.getvalue(), "Plain message\n")

    def test_truncates_long_messages(self):
        stream = FakeTTYStream()
        with mock.patch("voice_tools.platform.logging._get_terminal_width", return_value=10):
            dynamic_print("This is a very long message", stream=stream)
        self.assertIn("This is...", stream.getvalue())

    def test_collapses_multiline_messages(self):
        stream = io.StringIO()
        dynamic_print("one\ntwo", stream=stream)
        self.assertEqual(stream.getvalue(), "one two\n")


class TestLoggers(unittest.TestCase):

    def test_create_logger_nests_names_under_package(self):
        self.assertEqual(create_logger("stt").name, "voice_tools.stt")
        self.assertEqual(create_logger("voice_tools.audio").name, "voice_tools.audio")

    def test_color_formatter(self):
        record = logging.LogRecord("voice_tools", logging.ERROR, __file__, 1, "boom", None, None)
        colored = ColorFormatter(use_color=True).format(record)
        plain = ColorFormatter(use_color=False).format(record)
        self.assertEqual(plain, "boom")
        self.assertTrue(colored.startswith(COLORS["red"]))
        self.assertTrue(colored.endswith(COLORS["reset"]))


def test_package_logger_writes_to_configured_stream(log_stream):
    create_logger("voice_tools.tests").warning("careful")
    assert "careful" in log_stream.getvalue()


if __name__ == "__main__":
    unittest.main()
