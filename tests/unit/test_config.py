import pytest

from src.app_shell.config import Settings, validate_startup
from src.rules.loader import default_rules

ENV_VARS = (
    "EDITORIAL_GATE_DATA_DIR",
    "EDITORIAL_GATE_RULES",
    "EDITORIAL_GATE_WEBHOOK_STAGING",
    "EDITORIAL_GATE_WEBHOOK_PRODUCTION",
    "EDITORIAL_GATE_HTTP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()
    assert settings.db_path.endswith("editorial_gate.db")
    assert settings.rules_path.name == "editorial_rules.yaml"
    assert settings.webhook_staging is None
    assert settings.timeout_for(default_rules()) == 15.0


def test_production_falls_back_to_staging(monkeypatch):
    monkeypatch.setenv("EDITORIAL_GATE_WEBHOOK_STAGING", "https://hooks.test/s")
    settings = Settings()
    endpoints = settings.endpoints()
    assert endpoints.url_for("production") == "https://hooks.test/s"


def test_explicit_production(monkeypatch):
    monkeypatch.setenv("EDITORIAL_GATE_WEBHOOK_STAGING", "https://hooks.test/s")
    monkeypatch.setenv("EDITORIAL_GATE_WEBHOOK_PRODUCTION", "https://hooks.test/p")
    assert Settings().endpoints().url_for("production") == "https://hooks.test/p"


def test_missing_endpoint_raises_on_use():
    with pytest.raises(ValueError, match="No publish endpoint"):
        Settings().endpoints().url_for("staging")


def test_timeout_override(monkeypatch):
    monkeypatch.setenv("EDITORIAL_GATE_HTTP_TIMEOUT", "3.5")
    assert Settings().timeout_for(default_rules()) == 3.5


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_bad_timeout(monkeypatch, value):
    monkeypatch.setenv("EDITORIAL_GATE_HTTP_TIMEOUT", value)
    with pytest.raises(ValueError):
        Settings()


def test_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("EDITORIAL_GATE_DATA_DIR", str(tmp_path))
    assert Settings().db_path == str(tmp_path / "editorial_gate.db")


def test_validate_startup_reports_missing_webhook():
    problems = validate_startup(Settings(), default_rules())
    assert any("EDITORIAL_GATE_WEBHOOK_STAGING" in p for p in problems)
