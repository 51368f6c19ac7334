"""Upgrade version requirements across the selected packages.

Purpose
-------
For every dependency entry, decide a new requirement from the explicit
command-line selection, the pin policy, the locked version, and the latest
registry version, then rewrite the manifest in place.

Contents
--------
* :class:`UpgradeOptions` - the command-line surface of ``upgrade``.
* :class:`UpgradeRun` - accumulator threaded through the package loop.
* :class:`UpgradeServices` - collaborators the engine calls out to.
* :func:`upgrade_dependencies` - the engine itself.

System Role
-----------
Application layer. Requirement arithmetic lives in
:mod:`crate_edit.domain.requirements`; rendering lives in
:mod:`crate_edit.application.report`.

Decision rules run top to bottom and the first one that answers wins:

1. pinned (rename or pinning operator) unless ``--pinned``
2. explicit ``name@req`` selection
3. lockfile mode: minimal upgrade to the locked version
4. latest mode: minimal upgrade to the latest version, or ``compatible``
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..domain.dependency import Dependency, RegistrySource
from ..domain.enums import Reason
from ..domain.errors import (
    CollaboratorFailure,
    DependencyNotFound,
    LockedViolation,
    UnparsableRequirement,
    UnsupportedDependency,
)
from ..domain.packages import LockedPackage, Package
from ..domain.requirements import find_locked_version, is_pinned, matches, minimal_upgrade, parse_dependency_spec
from .ports import FindManifest, LoadLockfile, ManifestDocument, OpenManifest, Registry, ResolveManifests, Shell
from .report import DecisionRecord, render_upgrade_report

logger = logging.getLogger(__name__)

__all__ = [
    "UpgradeOptions",
    "UpgradeRun",
    "UpgradeServices",
    "upgrade_dependencies",
]

PINNED_NOTE = "Re-run with `--pinned` to upgrade pinned version requirements"
COMPATIBLE_NOTE = "Re-run with `--to-lockfile` to upgrade compatible version requirements"


@dataclass(frozen=True, slots=True)
class UpgradeOptions:
    dependencies: Sequence[str] = ()
    manifest_path: Path | None = None
    pkgids: Sequence[str] = ()
    workspace: bool = False
    dry_run: bool = False
    pinned: bool = False
    offline: bool = False
    to_lockfile: bool = False
    exclude: Sequence[str] = ()
    locked: bool = False
    verbose: bool = False


@dataclass(slots=True)
class UpgradeServices:
    """Collaborators for one run; ``registry`` is already bound to its settings."""

    shell: Shell
    open_manifest: OpenManifest
    find_manifest: FindManifest
    resolve_manifests: ResolveManifests
    load_lockfile: LoadLockfile
    registry: Registry


@dataclass(slots=True)
class UpgradeRun:
    """Everything the run accumulates across packages."""

    processed_keys: set[str] = field(default_factory=set)
    updated_registries: set[str] = field(default_factory=set)
    any_modified: bool = False
    pinned_present: bool = False
    compatible_present: bool = False
    records: dict[str, list[DecisionRecord]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class _Entry:
    dependency: Dependency
    old_req: str
    locked: str | None
    latest: str | None


_Decision = tuple[str, Reason | None]
_Rule = Callable[[_Entry, UpgradeOptions, Mapping[str, str | None]], "_Decision | None"]


def _pinned_rule(entry: _Entry, options: UpgradeOptions, selected: Mapping[str, str | None]) -> _Decision | None:
    if options.pinned:
        return None
    if entry.dependency.rename is not None or is_pinned(entry.old_req):
        return entry.old_req, Reason.PINNED
    return None


def _selected_rule(entry: _Entry, options: UpgradeOptions, selected: Mapping[str, str | None]) -> _Decision | None:
    requirement = selected.get(entry.dependency.toml_key)
    return (requirement, None) if requirement is not None else None


def _lockfile_rule(entry: _Entry, options: UpgradeOptions, selected: Mapping[str, str | None]) -> _Decision | None:
    if not options.to_lockfile:
        return None
    if entry.locked is None:
        return entry.old_req, None
    try:
        return minimal_upgrade(entry.old_req, entry.locked) or entry.old_req, None
    except UnparsableRequirement:
        return entry.locked, None


def _latest_rule(entry: _Entry, options: UpgradeOptions, selected: Mapping[str, str | None]) -> _Decision | None:
    if entry.latest is None:
        return entry.old_req, None
    try:
        new_req = minimal_upgrade(entry.old_req, entry.latest) or entry.old_req
    except UnparsableRequirement:
        new_req = entry.latest
    if new_req == entry.old_req and matches(entry.old_req, entry.latest):
        return entry.old_req, Reason.COMPATIBLE
    return new_req, None


RULES: tuple[_Rule, ...] = (_pinned_rule, _selected_rule, _lockfile_rule, _latest_rule)


def _decide(entry: _Entry, options: UpgradeOptions, selected: Mapping[str, str | None]) -> _Decision:
    for rule in RULES:
        decision = rule(entry, options, selected)
        if decision is not None:
            return decision
    return entry.old_req, None


def _latest_version(
    dependency: Dependency, old_req: str, manifest_path: Path, options: UpgradeOptions, services: UpgradeServices, run: UpgradeRun
) -> str | None:
    if not isinstance(dependency.source, RegistrySource):
        return None
    registry_url = None
    if dependency.registry is not None:
        registry_url = services.registry.registry_url(manifest_path, dependency.registry)
        if not options.offline and registry_url not in run.updated_registries:
            run.updated_registries.add(registry_url)
            services.registry.update_index(registry_url)
    try:
        return services.registry.latest_version(
            dependency.name, prerelease="-" in old_req, manifest_path=manifest_path, registry_url=registry_url
        )
    except CollaboratorFailure as exc:
        logger.warning("No latest version available", extra={"dependency": dependency.name, "error": str(exc)})
        return None


def _upgrade_package(
    package: Package,
    options: UpgradeOptions,
    selected: Mapping[str, str | None],
    locked: Sequence[LockedPackage],
    services: UpgradeServices,
    run: UpgradeRun,
) -> tuple[ManifestDocument, bool]:
    shell = services.shell
    manifest = services.open_manifest(package.manifest_path)
    records: list[DecisionRecord] = []
    modified = False
    shell.status("Checking", f"{package.name}'s dependencies")

    for table in manifest.dependency_tables():
        for key, item in table:
            run.processed_keys.add(key)
            if (selected and key not in selected) or key in options.exclude:
                if options.verbose:
                    shell.warn(f"ignoring {key}, excluded by user")
                continue
            try:
                dependency = Dependency.from_toml(key, item)
            except UnsupportedDependency as exc:
                shell.warn(f"ignoring {key}, unsupported entry: {exc}")
                continue
            old_req = dependency.version
            if old_req is None:
                if options.verbose:
                    shell.warn(f"ignoring {key}, source is {dependency.source}")
                continue

            entry = _Entry(
                dependency=dependency,
                old_req=old_req,
                locked=find_locked_version(dependency.name, old_req, locked),
                latest=_latest_version(dependency, old_req, manifest.path, options, services, run),
            )
            new_req, reason = _decide(entry, options, selected)
            if reason is Reason.PINNED:
                run.pinned_present = True
            elif reason is Reason.COMPATIBLE:
                run.compatible_present = True
            if new_req == old_req:
                reason = reason or Reason.UNCHANGED
            else:
                table.set_version(key, new_req)
                modified = True
                run.any_modified = True
                logger.debug("Upgraded requirement", extra={"dependency": key, "old": old_req, "new": new_req})
            records.append(DecisionRecord(key, old_req, entry.locked, entry.latest, new_req, reason))

    if records:
        report = render_upgrade_report(records, verbose=options.verbose)
        shell.write_lines(report.lines)
        if report.note is not None:
            shell.note(report.note)
    run.records[package.name] = records
    return manifest, modified


def _missing_selection_error(unused: Sequence[str]) -> DependencyNotFound:
    if len(unused) == 1:
        return DependencyNotFound(f"dependency {unused[0]} doesn't exist")
    return DependencyNotFound(f"dependencies {', '.join(unused)} don't exist")


def upgrade_dependencies(options: UpgradeOptions, services: UpgradeServices) -> UpgradeRun:
    """Run ``upgrade`` over every resolved package.

    Manifests are written per package once all of its entries are decided,
    never in dry-run or locked mode.

    Raises:
        UnparsableRequirement: If a ``name@req`` argument does not parse.
        CollaboratorFailure: If package resolution or an index refresh fails.
        LockedViolation: If ``--locked`` is set and any requirement would change.
        DependencyNotFound: If a selected dependency was never encountered.
    """
    selected: dict[str, str | None] = dict(parse_dependency_spec(spec) for spec in options.dependencies)

    if not options.offline and not options.to_lockfile:
        root_manifest = services.find_manifest(options.manifest_path)
        services.registry.update_index(services.registry.registry_url(root_manifest, None))

    packages = services.resolve_manifests(options.manifest_path, workspace=options.workspace, pkgids=options.pkgids)
    try:
        locked = services.load_lockfile(packages, locked=options.locked, offline=options.offline)
    except CollaboratorFailure as exc:
        logger.warning("Lockfile unavailable, continuing without locked versions", extra={"error": str(exc)})
        locked = []

    run = UpgradeRun()
    for package in packages:
        manifest, modified = _upgrade_package(package, options, selected, locked, services, run)
        if modified and not options.dry_run and not options.locked:
            manifest.write()

    if run.any_modified:
        if options.locked:
            raise LockedViolation("cannot upgrade due to `--locked`")
        services.load_lockfile(packages, locked=options.locked, offline=options.offline)

    unused = [name for name in selected if name not in run.processed_keys]
    if unused:
        raise _missing_selection_error(unused)

    if run.pinned_present:
        services.shell.note(PINNED_NOTE)
    if run.compatible_present:
        services.shell.note(COMPATIBLE_NOTE)
    if options.dry_run:
        services.shell.warn("aborting upgrade due to dry run")
    return run
