from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from roster_import.config.loader import SCHEMA_PATH

"""Config schema contract test (config/import.yml)."""


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_full_example(schema):
    config = {
        "source_directory": "./data",
        "store": {"path": "./store/rak_skeme.json", "key": "rak_skeme"},
        "header_scan_rows": 15,
        "class_keywords": ["NILAM", "INTAN"],
        "ic_year_prefixes": {"15": "4", "14": "5", "13": "6"},
        "placeholders": {"gender": "-", "house": "-"},
        "audit_skipped_rows": True,
    }
    jsonschema.validate(config, schema)


def test_config_schema_minimal_valid_config(schema):
    jsonschema.validate({"source_directory": "./data", "store": {"path": "s.json"}}, schema)


def test_config_schema_validates_from_sample_yaml(schema, sample_config_yaml: str):
    jsonschema.validate(yaml.safe_load(sample_config_yaml), schema)


def test_config_schema_shipped_example_is_valid(schema):
    example = SCHEMA_PATH.parents[2] / "config" / "import.yml"
    jsonschema.validate(yaml.safe_load(example.read_text(encoding="utf-8")), schema)


@pytest.mark.parametrize(
    "config",
    [
        {"store": {"path": "s.json"}},
        {"source_directory": "./data"},
        {"source_directory": "./data", "store": {}},
        {"source_directory": "./data", "store": {"path": "s.json"}, "extra_field": 1},
        {"source_directory": "./data", "store": {"path": "s.json"}, "header_scan_rows": -1},
        {"source_directory": "./data", "store": {"path": "s.json"}, "ic_year_prefixes": {"2015": "4"}},
        {"source_directory": "./data", "store": {"path": "s.json"}, "placeholders": {"colour": "x"}},
    ],
)
def test_config_schema_rejects_invalid(schema, config):
    with pytest.raises(ValidationError):
        jsonschema.validate(config, schema)
