"""Tests for version number parsing and ordering."""

import itertools

import pytest

from update_center.errors import MalformedVersionError
from update_center.java import JavaSpecificationVersion
from update_center.versions import VersionNumber, compare_versions


SAMPLES = [
    "1.0-alpha-1",
    "1.0-beta",
    "1.0-beta-2",
    "1.0-beta-10",
    "1.0-rc-1",
    "1.0-SNAPSHOT",
    "1.0",
    "1.0.1",
    "1.1-beta",
    "1.1",
    "1.2",
    "1.10",
    "1.600.1",
    "1.601",
    "2.0",
    "2.0.1",
]


def test_samples_are_listed_in_ascending_order():
    parsed = [VersionNumber(v) for v in SAMPLES]
    assert sorted(reversed(parsed)) == parsed


def test_compare_is_antisymmetric_and_reflexive():
    for a, b in itertools.product(SAMPLES, repeat=2):
        assert compare_versions(a, b) == -compare_versions(b, a)
    for a in SAMPLES:
        assert compare_versions(a, a) == 0


def test_compare_is_transitive():
    parsed = [VersionNumber(v) for v in SAMPLES]
    for a, b, c in itertools.product(parsed, repeat=3):
        if a < b and b < c:
            assert a < c


def test_qualifier_sorts_before_release():
    assert VersionNumber("1.1-beta") < VersionNumber("1.1")
    assert VersionNumber("1.1-beta") > VersionNumber("1.0")
    assert compare_versions("1.1-beta", "1.1") == -1


def test_trailing_zeros_are_padding():
    assert VersionNumber("1.0") == VersionNumber("1.0.0")
    assert hash(VersionNumber("1.0")) == hash(VersionNumber("1.0.0"))
    assert VersionNumber("1") < VersionNumber("1.0.1")
    assert VersionNumber("0.0") == VersionNumber("0")


def test_qualifier_comparison_ignores_case():
    assert VersionNumber("1.0-SNAPSHOT") == VersionNumber("1.0-snapshot")


def test_attributes():
    version = VersionNumber("1.600.1-beta-3")
    assert version.components == (1, 600, 1)
    assert version.qualifier == "beta-3"
    assert version.component_count == 3
    assert version.is_prerelease
    assert str(version) == "1.600.1-beta-3"

    assert not VersionNumber("1.601").is_prerelease
    assert VersionNumber("1.601").component_count == 2
    assert VersionNumber("1.0beta1").qualifier == "beta1"


@pytest.mark.parametrize(
    "text",
    ["", "   ", "abc", "v1.0", "1..2", "1.0-", "1.0-beta-", ".1", "1.0 beta", None, 1.0],
)
def test_malformed_versions_are_rejected(text):
    with pytest.raises(MalformedVersionError):
        VersionNumber(text)


def test_malformed_version_is_a_value_error():
    with pytest.raises(ValueError):
        compare_versions("1.0", "not-a-version")


def test_java_specification_versions():
    assert JavaSpecificationVersion("1.8") == JavaSpecificationVersion("8")
    assert JavaSpecificationVersion("1.8") < JavaSpecificationVersion("11")
    assert JavaSpecificationVersion("17") > JavaSpecificationVersion("11")
    assert str(JavaSpecificationVersion("1.8")) == "8"

    with pytest.raises(ValueError):
        JavaSpecificationVersion("eleven")
    with pytest.raises(ValueError):
        JavaSpecificationVersion("17-ea")
