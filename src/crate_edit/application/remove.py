"""Remove dependencies from one table of a package manifest.

Every requested name is attempted and followed by feature garbage
collection, even when its removal failed, so dangling activations left by an
earlier pass are cleaned too. Failures are reported after the loop and the
manifest is then left unwritten.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..domain.errors import DependencyNotFound
from ..domain.packages import Package
from ..domain.tables import DepTable
from .ports import ManifestDocument, OpenManifest, Shell

logger = logging.getLogger(__name__)

__all__ = ["RemoveRequest", "remove_dependencies"]


@dataclass(frozen=True, slots=True)
class RemoveRequest:
    """Which dependencies to drop, from which table, of which package."""

    package: Package
    dependencies: Sequence[str]
    section: DepTable = DepTable()
    dry_run: bool = False


def remove_dependencies(request: RemoveRequest, *, open_manifest: OpenManifest, shell: Shell) -> ManifestDocument:
    """Apply ``request`` and persist the manifest unless it is a dry run.

    Returns:
        The mutated manifest, whether or not it was written.

    Raises:
        TableNotFound: If the selected table does not exist.
        DependencyNotFound: For the first name that could not be removed.
    """
    manifest = open_manifest(request.package.manifest_path)
    table_path = request.section.to_table()
    failures: list[DependencyNotFound] = []

    for name in request.dependencies:
        shell.status("Removing", f"{name} from {request.section.section_label}")
        try:
            removed_key = manifest.remove_from_table(table_path, name)
        except DependencyNotFound as exc:
            logger.error("Failed to remove dependency", extra={"dependency": name, "error": str(exc)})
            failures.append(exc)
            removed_key = name
        manifest.gc_dep(removed_key)

    if failures:
        raise failures[0]

    if request.dry_run:
        shell.warn("aborting remove due to dry run")
    else:
        manifest.write()
        logger.info(
            "Removed dependencies",
            extra={"package": request.package.name, "dependencies": list(request.dependencies)},
        )
    return manifest
