"""Tests for the incremental source protocol helpers."""

from unittest.mock import Mock

import pytest

from pageflow.core.cancellation import CancellationToken
from pageflow.core.source import FunctionSource, IncrementalSource, resolve_source
from pageflow.errors import SourceConfigurationError


def test_list_source_satisfies_protocol(list_source):
    assert isinstance(list_source, IncrementalSource)


def test_function_source_forwards_arguments():
    fetch = Mock(return_value=["x"])
    token = CancellationToken.none()
    source = FunctionSource(fetch)

    assert source.get_paged_items(3, 10, token) == ["x"]
    fetch.assert_called_once_with(3, 10, token)


def test_function_source_requires_callable():
    with pytest.raises(SourceConfigurationError):
        FunctionSource("not callable")


def test_resolve_source_returns_instance(list_source):
    assert resolve_source(list_source) is list_source


def test_resolve_source_uses_factory(list_source):
    assert resolve_source(source_factory=lambda: list_source) is list_source


def test_resolve_source_rejects_non_callable_factory():
    with pytest.raises(SourceConfigurationError):
        resolve_source(source_factory=42)


def test_resolve_source_rejects_factory_result_without_fetch():
    with pytest.raises(SourceConfigurationError, match="get_paged_items"):
        resolve_source(source_factory=dict)
