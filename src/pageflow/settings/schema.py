"""Schema helpers for incremental loader settings."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..config import DEFAULT_ITEMS_PER_PAGE, DEFAULT_MAX_WORKERS, PREFETCH_THRESHOLD_ROWS
from ..errors import SettingsValidationError

LOADER_SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "pageflow/loader-settings.schema.json",
    "type": "object",
    "required": ["schema", "items_per_page"],
    "properties": {
        "schema": {"const": "pageflow/loader@1"},
        "items_per_page": {"type": "integer", "minimum": 1},
        "max_workers": {"type": "integer", "minimum": 1},
        "prefetch_threshold": {"type": "integer", "minimum": 0},
        "publish_events": {"type": "boolean"},
    },
    "additionalProperties": False,
}

DEFAULT_LOADER_SETTINGS: dict[str, Any] = {
    "schema": "pageflow/loader@1",
    "items_per_page": DEFAULT_ITEMS_PER_PAGE,
    "max_workers": DEFAULT_MAX_WORKERS,
    "prefetch_threshold": PREFETCH_THRESHOLD_ROWS,
    "publish_events": True,
}

_validator = Draft202012Validator(LOADER_SETTINGS_SCHEMA)


def merge_with_defaults(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_LOADER_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_LOADER_SETTINGS)
    if data:
        for key, value in data.items():
            if value is None:
                continue
            merged[key] = value
    validate_settings(merged)
    return merged


def validate_settings(data: Mapping[str, Any]) -> None:
    """Validate *data* against the loader settings schema."""

    try:
        _validator.validate(dict(data))
    except ValidationError as exc:
        location = ".".join(str(part) for part in exc.absolute_path) or "<root>"
        raise SettingsValidationError(f"{location}: {exc.message}") from exc


__all__ = [
    "DEFAULT_LOADER_SETTINGS",
    "LOADER_SETTINGS_SCHEMA",
    "merge_with_defaults",
    "validate_settings",
]
