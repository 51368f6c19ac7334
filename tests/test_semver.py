"""Version parsing, ordering, and requirement matching."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from crate_edit.domain.errors import UnparsableRequirement
from crate_edit.domain.semver import Comparator, Op, Version, VersionReq

numbers = st.integers(min_value=0, max_value=10_000)
release_versions = st.builds(Version, numbers, numbers, numbers)


def _matches(requirement: str, version: str) -> bool:
    return VersionReq.parse(requirement).matches(Version.parse(version))


# Version


@pytest.mark.os_agnostic
def test_when_a_full_version_is_parsed_every_part_is_kept() -> None:
    version = Version.parse("1.2.3-beta.2+build.5")

    assert (version.major, version.minor, version.patch) == (1, 2, 3)
    assert version.pre == ("beta", "2")
    assert version.build == ("build", "5")
    assert version.is_prerelease is True


@pytest.mark.os_agnostic
@pytest.mark.parametrize("text", ["1.2", "01.2.3", "1.2.3-01", "v1.2.3", "1.2.3 ", ""])
def test_when_a_version_is_malformed_it_raises(text: str) -> None:
    with pytest.raises(UnparsableRequirement):
        Version.parse(text)


@pytest.mark.os_agnostic
def test_when_prereleases_are_sorted_they_follow_semver_precedence() -> None:
    ordered = [
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-alpha.beta",
        "1.0.0-beta",
        "1.0.0-beta.2",
        "1.0.0-beta.11",
        "1.0.0-rc.1",
        "1.0.0",
    ]

    assert sorted((Version.parse(text) for text in reversed(ordered))) == [Version.parse(text) for text in ordered]


@pytest.mark.os_agnostic
def test_when_only_build_metadata_differs_versions_are_equal() -> None:
    assert Version.parse("1.0.0+a") == Version.parse("1.0.0+b")
    assert str(Version.parse("1.0.0+a").without_build()) == "1.0.0"


@pytest.mark.os_agnostic
@given(release_versions, release_versions)
def test_release_versions_order_like_their_number_tuples(left: Version, right: Version) -> None:
    as_tuple = (left.major, left.minor, left.patch) < (right.major, right.minor, right.patch)

    assert (left < right) is as_tuple


# Comparator


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("text", "op", "rendered"),
    [
        ("1.2", Op.CARET, "^1.2"),
        ("^1.2.3", Op.CARET, "^1.2.3"),
        ("=1.0.0", Op.EXACT, "=1.0.0"),
        ("~1.2", Op.TILDE, "~1.2"),
        (">= 1.0", Op.GREATER_EQ, ">=1.0"),
        ("<2", Op.LESS, "<2"),
        ("1.*", Op.WILDCARD, "1.*"),
        ("1.2.x", Op.WILDCARD, "1.2.*"),
    ],
)
def test_when_a_comparator_is_parsed_its_operator_is_recognised(text: str, op: Op, rendered: str) -> None:
    comparator = Comparator.parse(text)

    assert comparator.op is op
    assert str(comparator) == rendered


@pytest.mark.os_agnostic
@pytest.mark.parametrize("text", ["1.*.3", "1.2-beta", "1.*-beta", "abc", "=>1.0"])
def test_when_a_comparator_is_malformed_it_raises(text: str) -> None:
    with pytest.raises(UnparsableRequirement):
        Comparator.parse(text)


# VersionReq


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("requirement", "version", "expected"),
    [
        ("^1.2.3", "1.9.9", True),
        ("^1.2.3", "1.2.2", False),
        ("^1.2.3", "2.0.0", False),
        ("^0.2.3", "0.2.9", True),
        ("^0.2.3", "0.3.0", False),
        ("^0.0.3", "0.0.3", True),
        ("^0.0.3", "0.0.4", False),
        ("0", "0.9.0", True),
        ("0.0", "0.0.5", True),
        ("0.0", "0.1.0", False),
        ("~1.2.3", "1.2.9", True),
        ("~1.2.3", "1.3.0", False),
        ("~1", "1.9.0", True),
        ("=1.0.0", "1.0.1", False),
        ("1.*", "1.7.3", True),
        ("1.*", "2.0.0", False),
        (">=1.2, <1.5", "1.4.9", True),
        (">=1.2, <1.5", "1.5.0", False),
        (">1.2", "1.2.9", False),
        (">1.2", "1.3.0", True),
        ("<=1.2", "1.2.7", True),
        ("*", "99.0.0", True),
    ],
)
def test_when_a_requirement_is_matched_it_follows_cargo_rules(requirement: str, version: str, expected: bool) -> None:
    assert _matches(requirement, version) is expected


@pytest.mark.os_agnostic
def test_when_no_comparator_names_the_prerelease_it_does_not_match() -> None:
    assert _matches("1.0", "1.1.0-beta") is False
    assert _matches("*", "1.1.0-beta") is False


@pytest.mark.os_agnostic
def test_when_a_comparator_names_the_same_release_a_prerelease_matches() -> None:
    assert _matches(">=1.1.0-alpha", "1.1.0-beta") is True
    assert _matches("^1.2.3-alpha", "1.2.3") is True


@pytest.mark.os_agnostic
def test_when_a_requirement_is_rendered_spaces_are_normalised() -> None:
    assert str(VersionReq.parse(">= 1.0 ,  < 2")) == ">=1.0, <2"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("text", ["", " ", "1.0,", "*, 1", "1.0 || 2.0"])
def test_when_a_requirement_is_malformed_it_raises(text: str) -> None:
    with pytest.raises(UnparsableRequirement):
        VersionReq.parse(text)


@pytest.mark.os_agnostic
@given(release_versions)
def test_a_caret_requirement_always_matches_its_own_version(version: Version) -> None:
    assert VersionReq.parse(f"^{version}").matches(version)
    assert VersionReq.parse(f"={version}").matches(version)
