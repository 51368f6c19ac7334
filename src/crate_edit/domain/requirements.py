"""Requirement policy helpers used by the upgrade and report layers.

These functions work on the raw strings found in manifests and lockfiles.
Parse failures are handled per call site: ``is_pinned`` and ``matches``
answer ``False``, ``find_locked_version`` answers ``None``, and
``minimal_upgrade`` raises so the caller can fall back to the bare version.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace

from .errors import UnparsableRequirement
from .packages import LockedPackage
from .semver import Comparator, Op, Version, VersionReq

__all__ = [
    "find_locked_version",
    "is_pinned",
    "matches",
    "minimal_upgrade",
    "parse_dependency_spec",
]

_PINNING_OPS = frozenset({Op.EXACT, Op.LESS, Op.LESS_EQ, Op.WILDCARD})
_RANGE_OPS = frozenset({Op.GREATER, Op.GREATER_EQ, Op.LESS, Op.LESS_EQ})
_PACKAGE_NAME = re.compile(r"[A-Za-z0-9_-]+")


def is_pinned(requirement: str) -> bool:
    """Return True when the requirement forbids newer releases.

    Example:
        >>> is_pinned("=1.0.0"), is_pinned("3.*"), is_pinned("<2")
        (True, True, True)
        >>> is_pinned("^1.2"), is_pinned("*"), is_pinned("not a req")
        (False, False, False)
    """
    try:
        req = VersionReq.parse(requirement)
    except UnparsableRequirement:
        return False
    return any(comparator.op in _PINNING_OPS for comparator in req.comparators)


def matches(requirement: str, version: str) -> bool:
    """Return True when ``version`` satisfies ``requirement``.

    Example:
        >>> matches("1", "1.9.0")
        True
        >>> matches("1.2", "2.0.0")
        False
        >>> matches("1.2", "garbage")
        False
    """
    try:
        return VersionReq.parse(requirement).matches(Version.parse(version))
    except UnparsableRequirement:
        return False


def _retarget(comparator: Comparator, target: Version, original: str) -> Comparator:
    if comparator.op in _RANGE_OPS:
        if comparator.matches(target):
            return comparator
        raise UnparsableRequirement(f"cannot upgrade `{comparator}` in `{original}` to {target}")
    minor = target.minor if comparator.minor is not None else None
    patch = target.patch if comparator.patch is not None else None
    if comparator.op is Op.WILDCARD:
        return replace(comparator, major=target.major, minor=minor, patch=patch)
    pre = target.pre if patch is not None else ()
    return replace(comparator, major=target.major, minor=minor, patch=patch, pre=pre)


def minimal_upgrade(old_requirement: str, target: Version | str) -> str | None:
    """Rewrite ``old_requirement`` so it points at ``target``.

    Every comparator keeps the number of components it was written with, so
    ``1.2`` upgraded to ``1.5.0`` becomes ``1.5``. Range comparators are kept
    as long as they still admit the target.

    Args:
        old_requirement: Requirement text as found in the manifest.
        target: Version the requirement must end up pointing at.

    Returns:
        The new requirement text, or ``None`` when nothing needs to change.

    Raises:
        UnparsableRequirement: If either input fails to parse or a range
            comparator excludes ``target``.

    Example:
        >>> minimal_upgrade("1.2", "1.5.0")
        '1.5'
        >>> minimal_upgrade("^0.3.1", "0.4.2")
        '^0.4.2'
        >>> minimal_upgrade("1", "1.9.0") is None
        True
    """
    version = target if isinstance(target, Version) else Version.parse(target)
    req = VersionReq.parse(old_requirement)
    if not req.comparators:
        return None
    upgraded = tuple(_retarget(comparator, version, old_requirement) for comparator in req.comparators)
    if upgraded == req.comparators:
        return None
    text = str(VersionReq(upgraded))
    if text.startswith("^") and not old_requirement.lstrip(" ").startswith("^"):
        text = text[1:]
    return text


def find_locked_version(name: str, old_requirement: str, locked: Iterable[LockedPackage]) -> str | None:
    """Return the first locked version of ``name`` that satisfies ``old_requirement``.

    Build metadata is stripped from the returned version.

    Example:
        >>> pkgs = [LockedPackage("serde", "0.9.1"), LockedPackage("serde", "1.0.3+meta")]
        >>> find_locked_version("serde", "1", pkgs)
        '1.0.3'
        >>> find_locked_version("serde", "2", pkgs) is None
        True
    """
    try:
        req = VersionReq.parse(old_requirement)
    except UnparsableRequirement:
        return None
    for package in locked:
        if package.name != name:
            continue
        try:
            version = Version.parse(package.version)
        except UnparsableRequirement:
            continue
        if req.matches(version):
            return str(version.without_build())
    return None


def parse_dependency_spec(text: str) -> tuple[str, str | None]:
    """Split a ``name[@requirement]`` command-line id.

    Raises:
        UnparsableRequirement: If the name contains characters Cargo rejects or
            the requirement does not parse.

    Example:
        >>> parse_dependency_spec("serde@1.0")
        ('serde', '1.0')
        >>> parse_dependency_spec("rand")
        ('rand', None)
    """
    name, sep, requirement = text.partition("@")
    if not _PACKAGE_NAME.fullmatch(name):
        raise UnparsableRequirement(f"invalid package name `{name}` in `{text}`")
    if not sep:
        return name, None
    VersionReq.parse(requirement)
    return name, requirement
