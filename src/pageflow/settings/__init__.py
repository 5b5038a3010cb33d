from .schema import (
    DEFAULT_LOADER_SETTINGS,
    LOADER_SETTINGS_SCHEMA,
    merge_with_defaults,
    validate_settings,
)

__all__ = [
    "DEFAULT_LOADER_SETTINGS",
    "LOADER_SETTINGS_SCHEMA",
    "merge_with_defaults",
    "validate_settings",
]
