"""``upgrade`` command: rewrite version requirements to newer versions.

Contents:
    * :func:`cli_upgrade` - Upgrade requirements to the latest or locked versions.
"""

from __future__ import annotations

import logging
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from ....application.upgrade import UpgradeOptions, UpgradeServices, upgrade_dependencies
from ....domain.errors import CrateEditError
from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ._shared import handle_command_error, load_settings, manifest_path_option

logger = logging.getLogger(__name__)


@click.command("upgrade", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("dependencies", nargs=-1, metavar="DEP_ID...")
@manifest_path_option
@click.option(
    "-p",
    "--package",
    "pkgids",
    multiple=True,
    default=(),
    metavar="PKGID",
    help="Workspace member to upgrade (repeatable)",
)
@click.option("--workspace", "--all", "workspace", is_flag=True, default=False, help="Upgrade every workspace member")
@click.option("--dry-run", is_flag=True, default=False, help="Show what would change without writing")
@click.option("--pinned", is_flag=True, default=False, help="Also upgrade pinned and renamed requirements")
@click.option("--offline", is_flag=True, default=False, help="Never touch the network")
@click.option("--to-lockfile", is_flag=True, default=False, help="Upgrade only to the versions in Cargo.lock")
@click.option("--exclude", multiple=True, default=(), metavar="NAME", help="Dependency to leave alone (repeatable)")
@click.option("--locked", is_flag=True, default=False, help="Fail instead of changing any requirement")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show every dependency, not only changes")
@click.pass_context
def cli_upgrade(
    ctx: click.Context,
    dependencies: tuple[str, ...],
    manifest_path: Path | None,
    pkgids: tuple[str, ...],
    workspace: bool,
    dry_run: bool,
    pinned: bool,
    offline: bool,
    to_lockfile: bool,
    exclude: tuple[str, ...],
    locked: bool,
    verbose: bool,
) -> None:
    r"""Upgrade dependency version requirements.

    \b
    DEP_ID is `name` or `name@requirement`; without any, every dependency
    is considered. Pinned (`=`, `<`, `<=`, wildcard) and renamed entries are
    left alone unless --pinned is given.
    """
    if workspace and pkgids:
        raise click.UsageError("--workspace and --package cannot be used together")
    cli_ctx = get_cli_context(ctx)
    services = cli_ctx.services

    extra = {"command": "upgrade", "dependencies": list(dependencies), "dry_run": dry_run, "locked": locked}
    with lib_log_rich.runtime.bind(job_id="cli-upgrade", extra=extra):
        try:
            settings = load_settings(cli_ctx)
            options = UpgradeOptions(
                dependencies=dependencies,
                manifest_path=manifest_path,
                pkgids=pkgids,
                workspace=workspace,
                dry_run=dry_run,
                pinned=pinned,
                offline=offline,
                to_lockfile=to_lockfile,
                exclude=(*settings.upgrade.exclude, *exclude),
                locked=locked,
                verbose=verbose or settings.upgrade.verbose,
            )
            run_services = UpgradeServices(
                shell=services.shell,
                open_manifest=services.open_manifest,
                find_manifest=services.find_manifest,
                resolve_manifests=services.resolve_manifests,
                load_lockfile=services.load_lockfile,
                registry=services.open_registry(settings.registry, offline=offline),
            )
            run = upgrade_dependencies(options, run_services)
        except CrateEditError as exc:
            handle_command_error(exc, shell=services.shell, command="upgrade")
        logger.info(
            "Upgrade finished",
            extra={"packages": sorted(run.records), "modified": run.any_modified},
        )


__all__ = ["cli_upgrade"]
