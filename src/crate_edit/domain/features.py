"""Feature activation strings from a manifest's ``[features]`` table.

An activation takes one of three forms::

    "std"           # another feature of this package
    "dep:serde"     # enables the optional dependency serde
    "serde/derive"  # enables a feature of serde; "serde?/derive" is weak
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["DependencyStatus", "FeatureValue"]


class DependencyStatus(Enum):
    """How a dependency is still declared after a removal."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True, slots=True)
class FeatureValue:
    """A parsed activation string.

    Example:
        >>> FeatureValue.parse("serde?/derive")
        FeatureValue(name='serde', dep_feature='derive', explicit_dep=False, weak=True)
        >>> FeatureValue.parse("dep:serde").explicit_dep
        True
    """

    name: str
    dep_feature: str | None = None
    explicit_dep: bool = False
    weak: bool = False

    @classmethod
    def parse(cls, text: str) -> FeatureValue:
        head, sep, tail = text.partition("/")
        if sep:
            weak = head.endswith("?")
            return cls(name=head[:-1] if weak else head, dep_feature=tail, weak=weak)
        if text.startswith("dep:"):
            return cls(name=text[len("dep:") :], explicit_dep=True)
        return cls(name=text)

    @property
    def is_plain_feature(self) -> bool:
        return self.dep_feature is None and not self.explicit_dep

    def activates_dependency(self, dep_key: str) -> bool:
        """True for an explicit ``dep:<dep_key>`` activation."""
        return self.explicit_dep and self.name == dep_key

    def should_remove(self, dep_key: str, status: DependencyStatus, explicit_activation: bool) -> bool:
        """Decide whether this activation dangles once ``dep_key`` changed ``status``.

        A plain feature of the same name survives when an explicit ``dep:``
        activation exists, since then it names a real feature.
        """
        if self.name != dep_key or status is DependencyStatus.OPTIONAL:
            return False
        if self.is_plain_feature:
            return not explicit_activation
        if self.explicit_dep:
            return True
        return status is DependencyStatus.NONE

    def strengthened(self) -> str:
        """Render a weak ``name?/feature`` activation as ``name/feature``."""
        return f"{self.name}/{self.dep_feature}"
