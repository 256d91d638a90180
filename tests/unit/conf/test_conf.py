import pytest

from ezid_client.conf.ezid import EZID_DEFAULT_URL, EzidConfig, ezid_config


def test_config_defaults(monkeypatch):
    for name in EzidConfig.model_fields:
        monkeypatch.delenv(name, raising=False)

    config = ezid_config()

    assert config.EZID_URL == EZID_DEFAULT_URL
    assert config.EZID_USER is None
    assert config.EZID_PASSWORD is None
    assert config.EZID_WORKERS is None
    assert config.EZID_CONNECTION_LIMIT == 5
    assert config.EZID_CONNECTION_LIMIT_PER_HOST == 8
    assert config.EZID_TIMEOUT == 60


def test_config_override(monkeypatch):
    monkeypatch.setenv("EZID_URL", "https://ezid-stg.cdlib.org")
    monkeypatch.setenv("EZID_USER", "apitest")
    monkeypatch.setenv("EZID_PASSWORD", "apitest")
    monkeypatch.setenv("EZID_WORKERS", "4")
    monkeypatch.setenv("EZID_TIMEOUT", "2.5")

    config = ezid_config()

    assert config.EZID_URL == "https://ezid-stg.cdlib.org"
    assert config.EZID_USER == "apitest"
    assert config.EZID_PASSWORD == "apitest"
    assert config.EZID_WORKERS == 4
    assert config.EZID_TIMEOUT == 2.5


def test_config_constructor_wins(monkeypatch):
    monkeypatch.setenv("EZID_WORKERS", "4")

    assert EzidConfig(EZID_WORKERS=2).EZID_WORKERS == 2


def test_config_invalid_value(monkeypatch):
    monkeypatch.setenv("EZID_WORKERS", "0")

    with pytest.raises(ValueError):
        ezid_config()
