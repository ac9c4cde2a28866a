"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    AVAILABLE_THEMES,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_MIN_CHARS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_THEME,
    MAX_PAGE_SIZE,
    SETTINGS_SCHEMA_ID,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "listkit/settings.schema.json",
    "type": "object",
    "required": ["schema", "ui", "list"],
    "properties": {
        "schema": {"const": SETTINGS_SCHEMA_ID},
        "ui": {
            "type": "object",
            "properties": {
                "theme": {"type": "string", "enum": list(AVAILABLE_THEMES)},
            },
            "additionalProperties": True,
        },
        "list": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1, "maximum": MAX_PAGE_SIZE},
                "debounce_ms": {"type": "integer", "minimum": 0},
                "min_chars": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": SETTINGS_SCHEMA_ID,
    "ui": {
        "theme": DEFAULT_THEME,
    },
    "list": {
        "page_size": DEFAULT_PAGE_SIZE,
        "debounce_ms": DEFAULT_DEBOUNCE_MS,
        "min_chars": DEFAULT_MIN_CHARS,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_NESTED_SECTIONS = ("ui", "list")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
