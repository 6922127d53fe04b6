"""Configuration helpers for the groundcover provider client."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_MAX_RETRIES = 5
DEFAULT_MIN_RETRY_WAIT = 1.0
DEFAULT_MAX_RETRY_WAIT = 10.0

ENV_API_URL = "GROUNDCOVER_API_URL"
ENV_API_KEY = "GROUNDCOVER_API_KEY"
ENV_BACKEND_ID = "GROUNDCOVER_BACKEND_ID"
ENV_ORG_NAME = "GROUNDCOVER_ORG_NAME"
ENV_TIMEOUT_MS = "GROUNDCOVER_TIMEOUT_MS"
ENV_MAX_RETRIES = "GROUNDCOVER_MAX_RETRIES"


@dataclass(slots=True)
class ProviderConfig:
    base_url: str
    api_key: str
    backend_id: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    min_retry_wait: float = DEFAULT_MIN_RETRY_WAIT
    max_retry_wait: float = DEFAULT_MAX_RETRY_WAIT
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProviderConfig":
        env = os.environ if environ is None else environ

        base_url = _require(env, ENV_API_URL)
        api_key = _require(env, ENV_API_KEY)
        backend_id = _trim_or_none(env.get(ENV_BACKEND_ID)) or _trim_or_none(env.get(ENV_ORG_NAME))
        if backend_id is None:
            raise ConfigurationError(f"{ENV_BACKEND_ID} is not set")

        timeout_ms = _parse_positive_int(env.get(ENV_TIMEOUT_MS))
        max_retries = _parse_non_negative_int(env.get(ENV_MAX_RETRIES))
        return cls(
            base_url=base_url,
            api_key=api_key,
            backend_id=backend_id,
            timeout_seconds=(timeout_ms / 1000.0) if timeout_ms else DEFAULT_TIMEOUT_SECONDS,
            max_retries=DEFAULT_MAX_RETRIES if max_retries is None else max_retries,
        )

    @classmethod
    def from_file(cls, config_path: str | Path) -> "ProviderConfig":
        path = Path(config_path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = yaml.safe_load(handle)
        except (OSError, yaml.YAMLError) as error:
            raise ConfigurationError(f"unable to load provider config {path}: {error}") from error

        if not isinstance(payload, dict):
            raise ConfigurationError(f"provider config {path} must be a mapping")

        timeout_ms = _parse_positive_int(payload.get("timeoutMs"))
        max_retries = _parse_non_negative_int(payload.get("maxRetries"))

        headers: dict[str, str] = {}
        raw_headers = payload.get("headers")
        if isinstance(raw_headers, dict):
            for key, value in raw_headers.items():
                if isinstance(key, str) and isinstance(value, str) and key.strip() and value.strip():
                    headers[key] = value

        return cls(
            base_url=_require(payload, "apiUrl"),
            api_key=_require(payload, "apiKey"),
            backend_id=_require(payload, "backendId"),
            timeout_seconds=(timeout_ms / 1000.0) if timeout_ms else DEFAULT_TIMEOUT_SECONDS,
            max_retries=DEFAULT_MAX_RETRIES if max_retries is None else max_retries,
            headers=headers,
        )

    def validate(self) -> None:
        if not (self.base_url or "").strip():
            raise ConfigurationError(f"API URL is required (set {ENV_API_URL})")
        if not (self.api_key or "").strip():
            raise ConfigurationError(f"API key is required (set {ENV_API_KEY})")
        if not (self.backend_id or "").strip():
            raise ConfigurationError(f"backend id is required (set {ENV_BACKEND_ID})")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be > 0")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.min_retry_wait < 0 or self.max_retry_wait < self.min_retry_wait:
            raise ConfigurationError("retry waits must satisfy 0 <= min_retry_wait <= max_retry_wait")


def _require(source: Mapping[str, Any], key: str) -> str:
    value = _trim_or_none(source.get(key))
    if value is None:
        raise ConfigurationError(f"{key} is not set")
    return value


def _trim_or_none(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if trimmed else None


def _parse_positive_int(value: Any) -> int | None:
    parsed = _parse_non_negative_int(value)
    return parsed if parsed else None


def _parse_non_negative_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return None
        return parsed if parsed >= 0 else None
    return None
