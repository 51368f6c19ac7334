"""Semantic versions and Cargo version requirements.

Purpose
-------
Parse, order, match, and render the version strings found in lockfiles and
registry indices and the requirement strings found in ``Cargo.toml``.

Contents
--------
* ``Version`` – ``major.minor.patch[-pre][+build]`` with SemVer 2.0 ordering.
* ``Op`` – comparator operators, rendered the way Cargo renders them.
* ``Comparator`` – one operator plus a partial version.
* ``VersionReq`` – a comma-separated list of comparators (``*`` is empty).

System Role
-----------
Leaf of the domain layer. The requirement helpers in
:mod:`crate_edit.domain.requirements` build on these types; nothing here
performs I/O.

Matching follows Cargo: a caret requirement admits changes left of the first
non-zero component, a tilde requirement admits patch changes, and a
pre-release version only matches when some comparator names the same
``major.minor.patch`` together with a pre-release.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import total_ordering

from .errors import UnparsableRequirement

__all__ = [
    "Comparator",
    "Op",
    "Version",
    "VersionReq",
]

_IDENT = r"[0-9A-Za-z-]+"
_DOTTED = rf"{_IDENT}(?:\.{_IDENT})*"
_NUMBER = r"[0-9]+"

_RE_VERSION = re.compile(
    rf"(?P<major>{_NUMBER})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})"
    rf"(?:-(?P<pre>{_DOTTED}))?(?:\+(?P<build>{_DOTTED}))?"
)
_RE_COMPARATOR = re.compile(
    rf"(?P<op>>=|<=|=|>|<|~|\^)? *(?P<major>{_NUMBER})"
    rf"(?:\.(?P<minor>{_NUMBER}|[*xX]))?(?:\.(?P<patch>{_NUMBER}|[*xX]))?"
    rf"(?:-(?P<pre>{_DOTTED}))?(?:\+(?P<build>{_DOTTED}))?"
)
_WILDCARDS = frozenset("*xX")


def _numeric(text: str, what: str, source: str) -> int:
    if len(text) > 1 and text.startswith("0"):
        raise UnparsableRequirement(f"invalid leading zero in {what} version number: {source!r}")
    return int(text)


def _prerelease(text: str | None, source: str) -> tuple[str, ...]:
    if not text:
        return ()
    identifiers = tuple(text.split("."))
    for ident in identifiers:
        if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
            raise UnparsableRequirement(f"invalid leading zero in pre-release identifier: {source!r}")
    return identifiers


def _pre_key(pre: tuple[str, ...]) -> tuple[object, ...]:
    """Ordering key for pre-release identifiers; no pre-release sorts last."""
    if not pre:
        return (1,)
    return (0, tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in pre))


@total_ordering
@dataclass(frozen=True, slots=True)
class Version:
    """A semantic version.

    Build metadata is kept for display but ignored by equality and ordering.

    Example:
        >>> Version.parse("1.2.3-beta.2+abc") < Version.parse("1.2.3")
        True
        >>> str(Version.parse("1.2.3+abc").without_build())
        '1.2.3'
    """

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a strict ``major.minor.patch`` version.

        Raises:
            UnparsableRequirement: If ``text`` is not a valid semantic version.
        """
        match = _RE_VERSION.fullmatch(text)
        if match is None:
            raise UnparsableRequirement(f"invalid semantic version: {text!r}")
        return cls(
            major=_numeric(match["major"], "major", text),
            minor=_numeric(match["minor"], "minor", text),
            patch=_numeric(match["patch"], "patch", text),
            pre=_prerelease(match["pre"], text),
            build=tuple(match["build"].split(".")) if match["build"] else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    def without_build(self) -> Version:
        return replace(self, build=())

    def _key(self) -> tuple[object, ...]:
        return (self.major, self.minor, self.patch, _pre_key(self.pre))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


class Op(Enum):
    """Comparator operators; the value is Cargo's rendering of the operator."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = ""


_OPS_BY_TEXT = {op.value: op for op in Op if op is not Op.WILDCARD}


@dataclass(frozen=True, slots=True)
class Comparator:
    """One requirement clause: an operator and a partial version.

    Example:
        >>> str(Comparator.parse("1.2"))
        '^1.2'
        >>> str(Comparator.parse("3.*"))
        '3.*'
        >>> Comparator.parse(">= 1.0").op
        <Op.GREATER_EQ: '>='>
    """

    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Comparator:
        match = _RE_COMPARATOR.fullmatch(text)
        if match is None:
            raise UnparsableRequirement(f"unexpected character in version requirement: {text!r}")
        op_text = match["op"]
        minor_text = match["minor"]
        patch_text = match["patch"]
        minor_wild = minor_text is not None and minor_text in _WILDCARDS
        patch_wild = patch_text is not None and patch_text in _WILDCARDS
        if minor_wild and patch_text is not None and not patch_wild:
            raise UnparsableRequirement(f"unexpected version number after wildcard: {text!r}")
        if (match["pre"] or match["build"]) and (patch_text is None or patch_wild):
            raise UnparsableRequirement(f"pre-release or build metadata needs a full version: {text!r}")

        if op_text is None:
            op = Op.WILDCARD if minor_wild or patch_wild else Op.CARET
        else:
            op = _OPS_BY_TEXT[op_text]
        minor = None if minor_text is None or minor_wild else _numeric(minor_text, "minor", text)
        patch = None if patch_text is None or patch_wild else _numeric(patch_text, "patch", text)
        return cls(
            op=op,
            major=_numeric(match["major"], "major", text),
            minor=minor,
            patch=patch,
            pre=_prerelease(match["pre"], text),
        )

    def matches(self, version: Version) -> bool:
        """Evaluate this clause alone, ignoring the pre-release admission rule."""
        if self.op in (Op.EXACT, Op.WILDCARD):
            return self._matches_exact(version)
        if self.op is Op.GREATER:
            return self._matches_greater(version)
        if self.op is Op.GREATER_EQ:
            return self._matches_exact(version) or self._matches_greater(version)
        if self.op is Op.LESS:
            return self._matches_less(version)
        if self.op is Op.LESS_EQ:
            return self._matches_exact(version) or self._matches_less(version)
        if self.op is Op.TILDE:
            return self._matches_tilde(version)
        return self._matches_caret(version)

    def admits_prerelease_of(self, version: Version) -> bool:
        return (
            bool(self.pre)
            and self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
        )

    def _matches_exact(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return False
        return version.pre == self.pre

    def _matches_greater(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major > self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor > self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch > self.patch
        return _pre_key(version.pre) > _pre_key(self.pre)

    def _matches_less(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major < self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor < self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch < self.patch
        return _pre_key(version.pre) < _pre_key(self.pre)

    def _matches_tilde(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return version.patch > self.patch
        return _pre_key(version.pre) >= _pre_key(self.pre)

    def _matches_caret(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return version.minor >= self.minor
            return version.minor == self.minor
        if self.major > 0:
            if version.minor != self.minor:
                return version.minor > self.minor
            if version.patch != self.patch:
                return version.patch > self.patch
        elif self.minor > 0:
            if version.minor != self.minor:
                return False
            if version.patch != self.patch:
                return version.patch > self.patch
        elif version.minor != self.minor or version.patch != self.patch:
            return False
        return _pre_key(version.pre) >= _pre_key(self.pre)

    def __str__(self) -> str:
        text = f"{self.op.value}{self.major}"
        if self.minor is None:
            return text + ".*" if self.op is Op.WILDCARD else text
        text += f".{self.minor}"
        if self.patch is None:
            return text + ".*" if self.op is Op.WILDCARD else text
        text += f".{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        return text


@dataclass(frozen=True, slots=True)
class VersionReq:
    """A version requirement: every comparator must match.

    Example:
        >>> req = VersionReq.parse(">=1.2, <1.5")
        >>> req.matches(Version.parse("1.4.9"))
        True
        >>> req.matches(Version.parse("1.5.0"))
        False
        >>> str(VersionReq.parse("*"))
        '*'
    """

    comparators: tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> VersionReq:
        """Parse a Cargo requirement string.

        Raises:
            UnparsableRequirement: On empty input, stray characters, or a
                ``*`` that is not the only comparator.
        """
        stripped = text.strip(" ")
        if stripped in _WILDCARDS:
            return cls()
        comparators: list[Comparator] = []
        for part in stripped.split(","):
            clause = part.strip(" ")
            if not clause:
                raise UnparsableRequirement(f"empty comparator in version requirement: {text!r}")
            if clause in _WILDCARDS:
                raise UnparsableRequirement(f"wildcard must be the only comparator: {text!r}")
            comparators.append(Comparator.parse(clause))
        return cls(tuple(comparators))

    def matches(self, version: Version) -> bool:
        if not all(comparator.matches(version) for comparator in self.comparators):
            return False
        if not version.pre:
            return True
        return any(comparator.admits_prerelease_of(version) for comparator in self.comparators)

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(comparator) for comparator in self.comparators)
