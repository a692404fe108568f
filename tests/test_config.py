"""Responsibility: Unit tests for environment-driven config helpers and the tool/log utilities."""

import logging
import os
import unittest
from unittest.mock import patch


class ConfigEnvIntTests(unittest.TestCase):
    def test_returns_default_when_var_missing(self) -> None:
        from ffcapture.config import env_int

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("_FFCAPTURE_TEST_INT", None)
            self.assertEqual(env_int("_FFCAPTURE_TEST_INT", 300), 300)

    def test_returns_default_on_invalid_value(self) -> None:
        from ffcapture.config import env_int

        with patch.dict(os.environ, {"_FFCAPTURE_TEST_INT": "lots"}):
            self.assertEqual(env_int("_FFCAPTURE_TEST_INT", 300), 300)


class ConfigEnvFloatTests(unittest.TestCase):
    def test_returns_parsed_value(self) -> None:
        from ffcapture.config import env_float

        with patch.dict(os.environ, {"_FFCAPTURE_TEST_FLOAT": "2.5"}):
            self.assertAlmostEqual(env_float("_FFCAPTURE_TEST_FLOAT", 10.0), 2.5)

    def test_returns_default_on_invalid_value(self) -> None:
        from ffcapture.config import env_float

        with patch.dict(os.environ, {"_FFCAPTURE_TEST_FLOAT": "soon"}):
            self.assertAlmostEqual(env_float("_FFCAPTURE_TEST_FLOAT", 10.0), 10.0)


class ConfigEnvBoolTests(unittest.TestCase):
    def test_truthy_and_falsy_values(self) -> None:
        from ffcapture.config import env_bool

        for value in ("1", "true", "YES", "on"):
            with patch.dict(os.environ, {"_FFCAPTURE_TEST_BOOL": value}):
                self.assertTrue(env_bool("_FFCAPTURE_TEST_BOOL", False))
        for value in ("0", "false", "No", "off"):
            with patch.dict(os.environ, {"_FFCAPTURE_TEST_BOOL": value}):
                self.assertFalse(env_bool("_FFCAPTURE_TEST_BOOL", True))

    def test_unknown_value_keeps_default(self) -> None:
        from ffcapture.config import env_bool

        with patch.dict(os.environ, {"_FFCAPTURE_TEST_BOOL": "maybe"}):
            self.assertTrue(env_bool("_FFCAPTURE_TEST_BOOL", True))


class ConfigEnvStrTests(unittest.TestCase):
    def test_blank_value_is_treated_as_unset(self) -> None:
        from ffcapture.config import env_str

        with patch.dict(os.environ, {"_FFCAPTURE_TEST_STR": "   "}):
            self.assertIsNone(env_str("_FFCAPTURE_TEST_STR"))

    def test_value_is_stripped(self) -> None:
        from ffcapture.config import env_str

        with patch.dict(os.environ, {"_FFCAPTURE_TEST_STR": " /opt/ffmpeg "}):
            self.assertEqual(env_str("_FFCAPTURE_TEST_STR"), "/opt/ffmpeg")


class StopTimeoutConstantTests(unittest.TestCase):
    def test_stop_timeout_is_five_seconds(self) -> None:
        from ffcapture.config import STOP_TIMEOUT_SECONDS

        self.assertEqual(STOP_TIMEOUT_SECONDS, 5.0)


class ToolingTests(unittest.TestCase):
    def test_has_tool_uses_which(self) -> None:
        from ffcapture.tooling import has_tool

        has_tool.cache_clear()
        with patch("ffcapture.tooling.shutil.which", return_value="/usr/bin/wf-recorder") as which_mock:
            self.assertTrue(has_tool("wf-recorder"))
            self.assertTrue(has_tool("wf-recorder"))
        which_mock.assert_called_once_with("wf-recorder")
        has_tool.cache_clear()

    def test_path_exists_false_for_missing_path(self) -> None:
        from ffcapture.tooling import path_exists

        self.assertFalse(path_exists("/definitely/not/here/jack-1000"))


class LoggerTests(unittest.TestCase):
    def test_logger_is_named_and_has_single_handler(self) -> None:
        from ffcapture.logging_utils import LOGGER, setup_logger

        self.assertEqual(LOGGER.name, "ffcapture")
        again = setup_logger()
        self.assertIs(again, LOGGER)
        self.assertEqual(len(LOGGER.handlers), 1)
        self.assertIsInstance(LOGGER.handlers[0], (logging.FileHandler, logging.NullHandler))


if __name__ == "__main__":
    unittest.main()
