"""``rm`` command: drop dependencies from a manifest table.

Contents:
    * :func:`cli_rm` - Remove dependencies and clean dangling feature activations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import lib_log_rich.runtime
import rich_click as click

from ....application.remove import RemoveRequest, remove_dependencies
from ....domain.enums import DepKind
from ....domain.errors import CrateEditError
from ....domain.packages import Package
from ....domain.tables import DepTable
from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ._shared import handle_command_error, manifest_path_option

if TYPE_CHECKING:
    from ....composition import AppServices

logger = logging.getLogger(__name__)


def _section(dev: bool, build: bool, target: str | None) -> DepTable:
    if dev and build:
        raise click.UsageError("--dev and --build cannot be used together")
    kind = DepKind.DEVELOPMENT if dev else DepKind.BUILD if build else DepKind.NORMAL
    return DepTable(kind=kind, target=target)


def _target_packages(services: AppServices, manifest_path: Path | None, pkgids: tuple[str, ...]) -> list[Package]:
    if pkgids:
        return services.resolve_manifests(manifest_path, workspace=False, pkgids=pkgids)
    manifest = services.find_manifest(manifest_path)
    return [Package(name=manifest.parent.name, manifest_path=manifest)]


@click.command("rm", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("dependencies", nargs=-1, required=True, metavar="DEP...")
@click.option("-D", "--dev", is_flag=True, default=False, help="Remove from dev-dependencies")
@click.option("-B", "--build", is_flag=True, default=False, help="Remove from build-dependencies")
@click.option("--target", default=None, metavar="TARGET", help="Remove from a target-platform table")
@manifest_path_option
@click.option(
    "-p",
    "--package",
    "pkgids",
    multiple=True,
    default=(),
    metavar="PKGID",
    help="Workspace member to edit (repeatable)",
)
@click.option("--dry-run", is_flag=True, default=False, help="Show what would change without writing")
@click.pass_context
def cli_rm(
    ctx: click.Context,
    dependencies: tuple[str, ...],
    dev: bool,
    build: bool,
    target: str | None,
    manifest_path: Path | None,
    pkgids: tuple[str, ...],
    dry_run: bool,
) -> None:
    """Remove dependencies from a manifest.

    Feature activations naming a removed dependency are cleaned up as well.
    """
    cli_ctx = get_cli_context(ctx)
    services = cli_ctx.services
    section = _section(dev, build, target)

    extra = {"command": "rm", "dependencies": list(dependencies), "table": ".".join(section.to_table())}
    with lib_log_rich.runtime.bind(job_id="cli-rm", extra=extra):
        try:
            for package in _target_packages(services, manifest_path, pkgids):
                logger.info("Removing dependencies", extra={"package": package.name, "dry_run": dry_run})
                request = RemoveRequest(package=package, dependencies=dependencies, section=section, dry_run=dry_run)
                remove_dependencies(request, open_manifest=services.open_manifest, shell=services.shell)
        except CrateEditError as exc:
            handle_command_error(exc, shell=services.shell, command="rm")


__all__ = ["cli_rm"]
