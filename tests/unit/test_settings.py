from __future__ import annotations

import importlib
from pathlib import Path

import pytest

from kuna_client import settings as settings_mod
from kuna_client.errors import ConfigurationError
from kuna_client.settings import DEFAULT_BASE_URL, ClientConfig, load_config


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ("KUNA_BASE_URL", "KUNA_ACCESS_KEY", "KUNA_SECRET_KEY", "KUNA_HTTP_TIMEOUT_S", "KUNA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = ClientConfig.from_env()
    assert cfg.base_url == DEFAULT_BASE_URL == "https://kuna.io/api/v2"
    assert cfg.access_key is None
    assert cfg.secret_key is None
    assert cfg.timeout_s == 30.0


def test_env_values(clean_env):
    clean_env.setenv("KUNA_BASE_URL", "https://example.test/api/v2")
    clean_env.setenv("KUNA_ACCESS_KEY", "AK")
    clean_env.setenv("KUNA_SECRET_KEY", "SK")
    clean_env.setenv("KUNA_HTTP_TIMEOUT_S", "2.5")
    cfg = ClientConfig.from_env()
    assert cfg.base_url == "https://example.test/api/v2"
    assert (cfg.access_key, cfg.secret_key) == ("AK", "SK")
    assert cfg.timeout_s == 2.5
    assert "SK" not in repr(cfg)


def test_invalid_env_does_not_crash(clean_env):
    clean_env.setenv("KUNA_HTTP_TIMEOUT_S", "not-a-number")
    importlib.reload(settings_mod)
    assert settings_mod.HTTP_TIMEOUT_S == 30.0
    assert settings_mod.ClientConfig.from_env().timeout_s == 30.0


def test_yaml_overrides_env(clean_env, tmp_path: Path):
    clean_env.setenv("KUNA_ACCESS_KEY", "env-ak")
    clean_env.setenv("KUNA_SECRET_KEY", "env-sk")
    path = tmp_path / "kuna.yaml"
    path.write_text("access_key: file-ak\ntimeout_s: 5\nlog_level: DEBUG\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.access_key == "file-ak"
    assert cfg.secret_key == "env-sk"
    assert cfg.timeout_s == 5.0
    assert cfg.log_level == "DEBUG"


def test_yaml_rejects_unknown_keys(clean_env, tmp_path: Path):
    path = tmp_path / "kuna.yaml"
    path.write_text("secret: typo\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_invalid_values_rejected(clean_env, tmp_path: Path):
    with pytest.raises(ConfigurationError):
        ClientConfig(base_url="")
    with pytest.raises(ConfigurationError):
        ClientConfig(timeout_s=0)
    path = tmp_path / "kuna.yaml"
    path.write_text("timeout_s: soon\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_no_path_returns_env_config(clean_env):
    cfg = load_config(None)
    assert (cfg.base_url, cfg.access_key, cfg.secret_key, cfg.timeout_s, cfg.log_level) == (
        DEFAULT_BASE_URL,
        None,
        None,
        30.0,
        "INFO",
    )
