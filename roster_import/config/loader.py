from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_CLASS_KEYWORDS,
    DEFAULT_HEADER_SCAN_ROWS,
    DEFAULT_IC_YEAR_PREFIXES,
    ImportConfig,
    IngestConfig,
    StoreConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config (default config/import.yml)
- Validate against config_schema.json shipped next to this module
- Apply defaults for every optional key
- Let ROSTER_STORE_PATH override store.path (set directly or via .env)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "STORE_PATH_ENV",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/import.yml")
STORE_PATH_ENV = "ROSTER_STORE_PATH"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_ingest_config(data: dict[str, Any]) -> IngestConfig:
    placeholders = data.get("placeholders") or {}
    keywords = data.get("class_keywords")
    prefixes = data.get("ic_year_prefixes")
    return IngestConfig(
        header_scan_rows=data.get("header_scan_rows", DEFAULT_HEADER_SCAN_ROWS),
        class_keywords=tuple(k.upper().strip() for k in keywords) if keywords else DEFAULT_CLASS_KEYWORDS,
        ic_year_prefixes=dict(prefixes) if prefixes is not None else dict(DEFAULT_IC_YEAR_PREFIXES),
        placeholder_gender=placeholders.get("gender", "-"),
        placeholder_house=placeholders.get("house", "-"),
        audit_skipped_rows=bool(data.get("audit_skipped_rows", False)),
    )


def default_config(source_directory: str = "./data", store_path: str = "./store/rak_skeme.json") -> ImportConfig:
    """Configuration with every default applied, for library use without YAML."""
    return ImportConfig(
        source_directory=source_directory,
        store=StoreConfig(path=os.getenv(STORE_PATH_ENV) or store_path),
        ingest=IngestConfig(),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    store_raw = data["store"]
    store = StoreConfig(
        path=os.getenv(STORE_PATH_ENV) or store_raw["path"],  # 環境変数優先
        key=store_raw.get("key", "rak_skeme"),
    )
    return ImportConfig(
        source_directory=data["source_directory"],
        store=store,
        ingest=_build_ingest_config(data),
    )
