"""Feature activation parsing and the dangling-activation rules."""

from __future__ import annotations

import pytest

from crate_edit.domain.features import DependencyStatus, FeatureValue


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("std", FeatureValue(name="std")),
        ("dep:serde", FeatureValue(name="serde", explicit_dep=True)),
        ("serde/derive", FeatureValue(name="serde", dep_feature="derive")),
        ("serde?/derive", FeatureValue(name="serde", dep_feature="derive", weak=True)),
    ],
)
def test_when_an_activation_is_parsed(text: str, expected: FeatureValue) -> None:
    assert FeatureValue.parse(text) == expected


@pytest.mark.os_agnostic
def test_when_a_weak_activation_is_strengthened_the_question_mark_goes() -> None:
    assert FeatureValue.parse("serde?/derive").strengthened() == "serde/derive"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("text", ["serde", "dep:serde", "serde/derive", "serde?/derive"])
def test_when_the_dependency_stays_optional_nothing_is_removed(text: str) -> None:
    assert FeatureValue.parse(text).should_remove("serde", DependencyStatus.OPTIONAL, False) is False


@pytest.mark.os_agnostic
@pytest.mark.parametrize("text", ["serde", "dep:serde", "serde/derive", "serde?/derive"])
def test_when_the_dependency_is_gone_every_activation_dangles(text: str) -> None:
    assert FeatureValue.parse(text).should_remove("serde", DependencyStatus.NONE, False) is True


@pytest.mark.os_agnostic
def test_when_the_dependency_is_still_required_feature_activations_survive() -> None:
    assert FeatureValue.parse("serde/derive").should_remove("serde", DependencyStatus.REQUIRED, False) is False
    assert FeatureValue.parse("serde?/derive").should_remove("serde", DependencyStatus.REQUIRED, False) is False
    assert FeatureValue.parse("dep:serde").should_remove("serde", DependencyStatus.REQUIRED, True) is True


@pytest.mark.os_agnostic
def test_when_an_explicit_activation_exists_a_same_named_feature_is_real() -> None:
    assert FeatureValue.parse("serde").should_remove("serde", DependencyStatus.NONE, True) is False


@pytest.mark.os_agnostic
def test_when_the_activation_names_another_dependency_it_is_kept() -> None:
    assert FeatureValue.parse("rand/std").should_remove("serde", DependencyStatus.NONE, False) is False
