"""
Application settings (Pydantic).

Settings are loaded from `src/agrospace/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `AGROSPACE_CONFIG_PATH`
- environment variables (e.g., `AGROSPACE_FIELDS_PATH`, `AGROSPACE_LOG_LEVEL`)
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from agrospace.core.env import load_dotenv_if_present

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `agrospace.config`."""
    text = resources.files("agrospace.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "AgroSpace"
    log_level: str = "INFO"


class DataSettings(BaseModel):
    fields_path: str = "data/coord/fields.kml"
    centroids_path: str = "data/coord/centroids.kml"
    kml_namespace: str = KML_NAMESPACE


class ApiSettings(BaseModel):
    title: str = "AgroSpace API"
    cors_origins: list[str] = Field(default_factory=list)
    cors_allow_origin_regex: str | None = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    data: DataSettings = Field(default_factory=DataSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is kept small on purpose.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("AGROSPACE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    fields_path = os.getenv("AGROSPACE_FIELDS_PATH")
    if fields_path:
        data.setdefault("data", {})["fields_path"] = fields_path

    centroids_path = os.getenv("AGROSPACE_CENTROIDS_PATH")
    if centroids_path:
        data.setdefault("data", {})["centroids_path"] = centroids_path

    cors_origins = os.getenv("AGROSPACE_CORS_ORIGINS")
    if cors_origins:
        data.setdefault("api", {})["cors_origins"] = [s.strip() for s in cors_origins.split(",") if s.strip()]

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("AGROSPACE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
