from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from kuna_client.errors import ConfigurationError


DEFAULT_BASE_URL = "https://kuna.io/api/v2"
DEFAULT_HTTP_TIMEOUT_S = 30.0


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


HTTP_TIMEOUT_S = _env_float("KUNA_HTTP_TIMEOUT_S", DEFAULT_HTTP_TIMEOUT_S)


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise ConfigurationError("base_url must not be empty")
        if self.timeout_s <= 0:
            raise ConfigurationError(f"timeout_s must be positive, got {self.timeout_s}")

    def __repr__(self) -> str:
        masked = "***" if self.secret_key else None
        return (
            f"ClientConfig(base_url={self.base_url!r}, access_key={self.access_key!r}, "
            f"secret_key={masked!r}, timeout_s={self.timeout_s!r}, log_level={self.log_level!r})"
        )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=_env_str("KUNA_BASE_URL", DEFAULT_BASE_URL),
            access_key=_env_str("KUNA_ACCESS_KEY"),
            secret_key=_env_str("KUNA_SECRET_KEY"),
            timeout_s=_env_float("KUNA_HTTP_TIMEOUT_S", DEFAULT_HTTP_TIMEOUT_S),
            log_level=_env_str("KUNA_LOG_LEVEL", "INFO"),
        )


_YAML_KEYS = ("base_url", "access_key", "secret_key", "timeout_s", "log_level")


def load_config(path: str | Path | None = None) -> ClientConfig:
    """Load settings from a YAML file, with environment values filling gaps.

    Keys in the file win over the environment. Unknown keys are rejected so
    typos do not silently fall back to defaults.
    """
    cfg = ClientConfig.from_env()
    if path is None:
        return cfg

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")
    unknown = sorted(set(raw) - set(_YAML_KEYS))
    if unknown:
        raise ConfigurationError(f"{path}: unknown keys {unknown}")

    overrides: Dict[str, Any] = {k: v for k, v in raw.items() if v is not None}
    if "timeout_s" in overrides:
        try:
            overrides["timeout_s"] = float(overrides["timeout_s"])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{path}: timeout_s must be a number") from exc
    for key in ("base_url", "access_key", "secret_key", "log_level"):
        if key in overrides:
            overrides[key] = str(overrides[key])
    return replace(cfg, **overrides)
