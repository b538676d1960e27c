"""
Tests for version ordering.

Ordering is numeric per dot-separated component, never lexical.
"""

import pytest

from nodecfg.core.errors import InvalidVersionError
from nodecfg.core.versions import compare_versions, version_key


def test_multi_digit_components_compare_numerically():
    assert compare_versions("1.10.0", "1.9.0") == 1
    assert compare_versions("1.9.0", "1.10.0") == -1
    assert compare_versions("10", "9") == 1
    assert compare_versions("2.0.10", "2.0.9") == 1


def test_missing_trailing_components_are_zero():
    assert compare_versions("1.2", "1.2.0") == 0
    assert compare_versions("1", "1.0.0") == 0
    assert compare_versions("1.2", "1.2.1") == -1
    assert version_key("1.2.0") == version_key("1.2")


def test_leading_zeros_are_ignored():
    assert compare_versions("1.02", "1.2") == 0


@pytest.mark.parametrize("bad", ["", "1..2", "1.2-beta", "v1.0", "1.0.", " 1.0", "١.٢"])
def test_malformed_versions_rejected(bad):
    with pytest.raises(InvalidVersionError):
        version_key(bad)


def test_invalid_version_is_value_error():
    """Callers that treat bad input generically can catch ValueError."""
    with pytest.raises(ValueError):
        compare_versions("latest", "1.0")
