"""
Tests for configuration loading.
"""
import importlib
import logging

import config


def test_import_does_not_log_before_logging_is_configured(caplog):
    caplog.set_level(logging.INFO)
    importlib.reload(config)
    assert not any("Loading environment" in r.getMessage() for r in caplog.records)


def test_values_come_from_environment(monkeypatch):
    monkeypatch.setenv("DOCS_MANIFEST_FILE", "pages.jsonl")
    monkeypatch.setenv("DOCS_PUBLISH_MAX_RETRIES", "7")
    try:
        importlib.reload(config)
        assert config.MANIFEST_FILE == "pages.jsonl"
        assert config.MAX_RETRIES == 7
    finally:
        monkeypatch.undo()
        importlib.reload(config)
