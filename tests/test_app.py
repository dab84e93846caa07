# tests/test_app.py
"""
Application Entry Point Tests

This module contains tests for the composition root: building a wizard from
settings and the exit codes of the command line entry point.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- commission_builder.app (build_wizard, main)
- commission_builder.config.settings (Settings pointed at temp directories)
- unittest.mock (patch for settings and logging setup)
- pytest (testing framework)
"""
import json  # Write a stored session

import pytest  # Testing framework for writing and running tests

from unittest.mock import patch  # Replace global settings and logging setup

from commission_builder import app
from commission_builder.adapters.persistence.file_store import STORAGE_KEY
from commission_builder.config.settings import Settings
from commission_builder.domain.models import Step


@pytest.fixture
def config(tmp_path):
    return Settings(
        _env_file=None,
        STATE_FILE=str(tmp_path / "data" / "session_state.json"),
        EXPORT_DIR=str(tmp_path / "exports"),
    )


def store_session(config, **record):
    config.state_file.parent.mkdir(parents=True, exist_ok=True)
    config.state_file.write_text(json.dumps({STORAGE_KEY: record}), encoding="utf-8")


class TestBuildWizard:
    def test_builds_with_default_catalog(self, config):
        wizard = app.build_wizard(config)
        assert wizard.catalog.source == "default"
        assert wizard.step == Step.TYPE
        wizard.close()

    def test_restores_session(self, config):
        store_session(config, step="details", selected_type_id="character", selected_sub_id="bust")
        wizard = app.build_wizard(config)
        assert wizard.step == Step.DETAILS
        assert wizard.breakdown.total == 20
        wizard.close()


class TestMain:
    def test_prints_summary(self, config, capsys):
        with patch.object(app, "settings", config), patch.object(app, "setup_logging"):
            assert app.main([]) == 0
        out = capsys.readouterr().out
        assert "Step: Pick a commission type" in out
        assert "Estimated total: $0.00" in out

    def test_export_requires_tos(self, config):
        with patch.object(app, "settings", config), patch.object(app, "setup_logging"):
            assert app.main(["--export"]) == 1
        assert not config.export_path.exists()

    def test_export(self, config):
        store_session(config, step="tos", selected_type_id="character", selected_sub_id="bust",
                      tos_accepted=True)
        with patch.object(app, "settings", config), patch.object(app, "setup_logging"):
            assert app.main(["--export"]) == 0
        assert config.export_path.read_bytes().startswith(b"%PDF")
