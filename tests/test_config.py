import importlib

import pytest

from config import get_settings_module
from src.attendance_engine.attendance_engine import main


@pytest.mark.parametrize(
    "env, module",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("testing", "config.testing"),
        ("test", "config.testing"),
        ("development", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == module


def test_default_settings_module(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    assert get_settings_module() == "config.development"


@pytest.mark.parametrize("module", ["config.development", "config.testing", "config.production"])
def test_settings_modules_expose_required_keys(module):
    settings = importlib.import_module(module)

    assert {"host", "port", "user", "password", "database"} <= set(settings.DB_CONFIG)
    assert isinstance(settings.DEBUG, bool)
    assert isinstance(settings.AUTO_INIT_DB, bool)
    assert settings.LOG_LEVEL
    assert "%(message)s" in settings.LOG_FORMAT


def test_bootstrap_wires_container_without_schema_in_testing(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    calls = {}

    def fake_build_container(*, db_config, notifier=None):
        calls["db_config"] = db_config
        return "container"

    def fail_apply_schema(*args, **kwargs):
        raise AssertionError("schema must not be applied in testing")

    monkeypatch.setattr(main, "build_container", fake_build_container)
    monkeypatch.setattr(main, "apply_schema", fail_apply_schema)

    assert main.bootstrap() == "container"
    assert calls["db_config"]["database"]
