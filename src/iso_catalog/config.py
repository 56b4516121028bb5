"""Settings loading: YAML file plus environment overrides."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, Optional
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

logger = logging.getLogger(__name__)

API_BASE_ENV_VAR = "ISO_CATALOG_API_BASE"

# User-level config file, used when no explicit path is given
USER_CONFIG_PATH = Path.home() / ".config" / "iso_catalog" / "config.yaml"


def normalize_api_base_url(value: str | None) -> str | None:
    """Reduce a user-supplied API base to ``scheme://host[:port][/path]``.

    A missing scheme defaults to https; query, fragment and trailing slashes
    are dropped. Returns None when nothing usable remains.

    >>> normalize_api_base_url("hive.local:8080/api/")
    'https://hive.local:8080/api'
    """
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None

    lowered = trimmed.lower()
    if not (lowered.startswith("http://") or lowered.startswith("https://")):
        trimmed = f"https://{trimmed}"

    try:
        parts = urlsplit(trimmed)
        port = parts.port
    except ValueError:
        return None

    hostname = parts.hostname
    if not hostname:
        return None
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None:
        host = f"{host}:{port}"

    path = parts.path.rstrip("/")
    return f"{parts.scheme.lower()}://{host}{path}"


class CatalogSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    api_base_url: Optional[str] = None
    output_format: Literal["json", "yaml", "csv", "html"] = "json"

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _sanitize_api_base(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("api_base_url must be a string")
        normalized = normalize_api_base_url(value)
        if normalized is None and value.strip():
            raise ValueError(f"api_base_url is not a usable URL: {value!r}")
        return normalized


def _read_settings_file(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings must be a YAML mapping")
    return data


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CatalogSettings:
    """
    Build CatalogSettings from (in increasing precedence):
      1. built-in defaults
      2. *path*, or ~/.config/iso_catalog/config.yaml when *path* is None and it exists
      3. the ISO_CATALOG_API_BASE environment variable
    Raises ValueError on unreadable or invalid settings.
    """
    env = os.environ if environ is None else environ
    source: Path | None = Path(path) if path is not None else None
    if source is None and USER_CONFIG_PATH.is_file():
        source = USER_CONFIG_PATH

    data: dict[str, Any] = {}
    if source is not None:
        data = _read_settings_file(source)
        logger.debug("Loaded settings from %s", source)

    env_base = (env.get(API_BASE_ENV_VAR) or "").strip()
    if env_base:
        data["api_base_url"] = env_base
        logger.debug("API base overridden by %s", API_BASE_ENV_VAR)

    try:
        return CatalogSettings.model_validate(data)
    except ValidationError as exc:
        label = str(source) if source is not None else "settings"
        raise ValueError(f"{label}: {exc}") from exc
