# tests/test_settings.py
"""
Settings Tests - Unit Tests for Configuration and Input Validation

This module contains unit tests for the Pydantic settings model and the
validation helpers it relies on, plus sanitizing of user-typed text.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- commission_builder.config.settings (Settings)
- commission_builder.shared.validators (validation helpers)
- commission_builder.shared.logging_conf (setup_logging)
- pydantic (ValidationError)
- pytest (testing framework)
"""
import logging  # Inspect the configured root logger
from logging.handlers import RotatingFileHandler  # Expected file handler type

import pytest  # Testing framework for writing and running tests

from pathlib import Path  # Expected path values

from pydantic import ValidationError  # Raised for invalid settings

from commission_builder.config.settings import Settings
from commission_builder.shared.logging_conf import setup_logging
from commission_builder.shared.validators import (
    is_url,
    sanitize_user_input,
    validate_log_level,
    validate_source,
)


class TestSettings:
    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.catalog_sources == []
        assert config.http_timeout_seconds == 10
        assert config.export_path == Path("./exports") / "commission-summary.pdf"
        assert config.log_level == "INFO"

    def test_sources_and_level(self):
        config = Settings(_env_file=None, CATALOG_SOURCE=" https://example.com/config.json ",
                          THEME_SOURCE="", LOG_LEVEL="debug")
        assert config.catalog_sources == ["https://example.com/config.json"]
        assert config.theme_source is None
        assert config.log_level == "DEBUG"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("SINGLE_TYPE_ID", "emotes")
        monkeypatch.setenv("STATE_FILE", "/tmp/state.json")
        config = Settings(_env_file=None)
        assert config.single_type_id == "emotes"
        assert config.state_file == Path("/tmp/state.json")

    @pytest.mark.parametrize("overrides", [
        {"LOG_LEVEL": "LOUD"},
        {"HTTP_TIMEOUT_SECONDS": 0},
        {"CATALOG_SOURCE": "ftp://example.com/config.json"},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)


class TestValidators:
    def test_is_url(self):
        assert is_url("https://example.com/a.json")
        assert not is_url("config/a.json")

    @pytest.mark.parametrize("source, valid", [
        ("config.json", True),
        ("./data/config.json", True),
        ("http://example.com/config.json", True),
        ("https://", False),
        ("ftp://example.com/config.json", False),
        ("   ", False),
        ("", False),
    ])
    def test_validate_source(self, source, valid):
        assert validate_source(source) is valid

    def test_log_level(self):
        assert validate_log_level("warning")
        assert not validate_log_level("verbose")
        assert not validate_log_level("")

    def test_sanitize_user_input(self):
        assert sanitize_user_input(None) == ""
        assert sanitize_user_input("  hi\tthere\n\x1b") == "  hi\tthere\n"
        assert sanitize_user_input("abcdef", max_length=3) == "abc"


class TestSetupLogging:
    def test_file_logging_in_log_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMMISSION_LOG_STDOUT", "false")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(level="debug", log_dir=tmp_path / "logs")

            handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
            assert len(handlers) == 1
            assert root.level == logging.DEBUG
            assert logging.getLogger("urllib3").level == logging.INFO
            assert (tmp_path / "logs" / "commission_builder.log").exists()
        finally:
            for handler in root.handlers[:]:
                handler.close()
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
