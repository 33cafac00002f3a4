from __future__ import annotations

import pytest

from otel_zipkin_shipper import config as config_module
from otel_zipkin_shipper.config import Settings

_ENV_KEYS = [
    "OTEL_SERVICE_NAME",
    "OTEL_EXPORTER_ZIPKIN_ENDPOINT",
    "OTEL_EXPORTER_ZIPKIN_TIMEOUT",
    "ZIPKIN_HEADERS",
    "EXPORT_BATCH_SIZE",
    "EXPORT_MAX_ATTEMPTS",
    "DRY_RUN",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


def test_defaults():
    s = Settings(_env_file=None)
    assert s.OTEL_SERVICE_NAME == "unknown_service"
    assert s.OTEL_EXPORTER_ZIPKIN_ENDPOINT == "http://localhost:9411/api/v2/spans"
    assert s.OTEL_EXPORTER_ZIPKIN_TIMEOUT == 10
    assert s.ZIPKIN_HEADERS == {}
    assert s.DRY_RUN is True
    assert s.EXPORT_BATCH_SIZE == 512
    assert s.EXPORT_MAX_ATTEMPTS == 3


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("OTEL_SERVICE_NAME", "checkout")
    monkeypatch.setenv("OTEL_EXPORTER_ZIPKIN_ENDPOINT", " https://zipkin.example.com/api/v2/spans ")
    monkeypatch.setenv("DRY_RUN", "false")
    monkeypatch.setenv("EXPORT_BATCH_SIZE", "0")
    s = Settings(_env_file=None)
    assert s.OTEL_SERVICE_NAME == "checkout"
    assert s.OTEL_EXPORTER_ZIPKIN_ENDPOINT == "https://zipkin.example.com/api/v2/spans"
    assert s.DRY_RUN is False
    assert s.EXPORT_BATCH_SIZE == 1


def test_headers_parsed_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("ZIPKIN_HEADERS", "X-Tenant=acme, X-Env = prod ,broken,=nokey")
    s = Settings(_env_file=None)
    assert s.ZIPKIN_HEADERS == {"X-Tenant": "acme", "X-Env": "prod"}


def test_headers_accept_dict():
    s = Settings(_env_file=None, ZIPKIN_HEADERS={" X-A ": 1})
    assert s.ZIPKIN_HEADERS == {"X-A": "1"}


def test_get_settings_is_cached():
    assert config_module.get_settings() is config_module.get_settings()


def test_get_settings_reports_bad_endpoint(monkeypatch):
    monkeypatch.setenv("OTEL_EXPORTER_ZIPKIN_ENDPOINT", "localhost:9411")
    with pytest.raises(RuntimeError, match="OTEL_EXPORTER_ZIPKIN_ENDPOINT"):
        config_module.get_settings()
