import io
import json
import logging

import pytest
from pydantic import ValidationError

from config.settings import RoleEngineSettings, get_settings
from src.core.logging_config import RoleEngineJsonFormatter, setup_logging


def test_settings_defaults(monkeypatch):
    for name in ("CORE_COUNT", "PERIPHERAL_COUNT", "CATALOG_PATH", "RESULTS_PATH", "LOG_LEVEL"):
        monkeypatch.delenv(f"ROLE_ENGINE_{name}", raising=False)
    settings = RoleEngineSettings()
    assert settings.core_count == 4
    assert settings.peripheral_count == 3
    assert settings.catalog_path == "assets/roles.yml"

def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ROLE_ENGINE_CORE_COUNT", "5")
    monkeypatch.setenv("ROLE_ENGINE_LOG_LEVEL", "DEBUG")
    settings = RoleEngineSettings()
    assert settings.core_count == 5
    assert settings.log_level == "DEBUG"

def test_settings_reject_negative_counts():
    with pytest.raises(ValidationError):
        RoleEngineSettings(peripheral_count=-1)

def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()

@pytest.fixture
def clean_root_logger():
    """Runs a test with no JSON handler on the root logger, then restores the previous one."""
    root_logger = logging.getLogger()
    original_level = root_logger.level
    existing = [h for h in root_logger.handlers if isinstance(h.formatter, RoleEngineJsonFormatter)]
    for handler in existing:
        root_logger.removeHandler(handler)
    yield root_logger
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, RoleEngineJsonFormatter):
            root_logger.removeHandler(handler)
    for handler in existing:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)

def test_setup_logging_adds_json_handler_once(clean_root_logger):
    first = setup_logging("debug", stream=io.StringIO())
    second = setup_logging("warning")
    json_handlers = [h for h in clean_root_logger.handlers if isinstance(h.formatter, RoleEngineJsonFormatter)]
    assert json_handlers == [first]
    assert second is first
    assert clean_root_logger.level == logging.WARNING

def test_log_records_are_json_with_context(clean_root_logger):
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)
    logging.getLogger("src.routers.roles").info(
        "Breakdown computed: 10 roles", extra={"user_id": "24601", "selected_role_id": "innovator"},
    )
    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["message"] == "Breakdown computed: 10 roles"
    assert record["level"] == "INFO"
    assert record["logger"] == "src.routers.roles"
    assert record["service"] == "role-breakdown-engine"
    assert record["user_id"] == "24601"
    assert record["selected_role_id"] == "innovator"
    assert "role_id" not in record
    assert record["timestamp"].endswith("+00:00")
