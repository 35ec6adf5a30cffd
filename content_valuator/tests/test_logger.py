"""Logging setup tests"""

import logging
import os
import tempfile

from content_valuator.utils.logger import PACKAGE_LOGGER, get_logger, setup_logging


class TestSetupLogging:
    """setup_logging() with a throwaway dictConfig file."""

    def setup_method(self):
        self.package_logger = logging.getLogger(PACKAGE_LOGGER)
        self.saved_level = self.package_logger.level

    def teardown_method(self):
        self.package_logger.setLevel(self.saved_level)

    def _write_config(self, tmpdir: str) -> str:
        path = os.path.join(tmpdir, "logging.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write("version: 1\ndisable_existing_loggers: false\n")
        return path

    def test_explicit_level(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            setup_logging(self._write_config(tmpdir), level="debug")
        assert self.package_logger.level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("CONTENT_VALUATOR_LOG_LEVEL", "ERROR")
        with tempfile.TemporaryDirectory() as tmpdir:
            setup_logging(self._write_config(tmpdir))
        assert self.package_logger.level == logging.ERROR

    def test_module_logger_is_child_of_package(self):
        logger = get_logger("content_valuator.pricing.pricing_engine")
        assert logger.name.startswith(PACKAGE_LOGGER + ".")
        assert logger.parent.name in (PACKAGE_LOGGER, "content_valuator.pricing")
