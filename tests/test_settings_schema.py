"""Tests for loader settings validation."""

import pytest

from pageflow.errors import ConfigurationError, SettingsValidationError
from pageflow.settings import DEFAULT_LOADER_SETTINGS, merge_with_defaults, validate_settings


def test_defaults_are_valid():
    validate_settings(DEFAULT_LOADER_SETTINGS)
    assert DEFAULT_LOADER_SETTINGS["items_per_page"] == 20


def test_merge_overrides_and_keeps_defaults():
    merged = merge_with_defaults({"items_per_page": 50})

    assert merged["items_per_page"] == 50
    assert merged["max_workers"] == DEFAULT_LOADER_SETTINGS["max_workers"]
    assert merged is not DEFAULT_LOADER_SETTINGS


def test_merge_ignores_none_values():
    merged = merge_with_defaults({"items_per_page": None})
    assert merged["items_per_page"] == 20


def test_merge_with_nothing_returns_defaults():
    assert merge_with_defaults(None) == DEFAULT_LOADER_SETTINGS


@pytest.mark.parametrize(
    "payload",
    [
        {"items_per_page": 0},
        {"items_per_page": "ten"},
        {"max_workers": 0},
        {"prefetch_threshold": -1},
        {"unknown_option": True},
        {"schema": "pageflow/loader@2"},
    ],
)
def test_invalid_settings_rejected(payload):
    with pytest.raises(SettingsValidationError):
        merge_with_defaults(payload)


def test_validation_error_names_the_field():
    with pytest.raises(ConfigurationError, match="items_per_page"):
        merge_with_defaults({"items_per_page": -5})
