"""Format-preserving ``Cargo.toml`` handle built on tomlkit.

Purpose
-------
Own one parsed manifest document plus its path, expose its dependency tables
in file order, and persist edits without touching unrelated bytes.

Contents
--------
* :class:`DependencyTable` - ordered view over one dependency table.
* :class:`LocalManifest` - parse, edit, and atomically write a manifest.

System Role
-----------
Adapter consumed by the remove and upgrade use cases. Feature activation
rules live in :mod:`crate_edit.domain.features`; this module only walks the
document.
"""

from __future__ import annotations

import difflib
import logging
import os
import shutil
import tempfile
from collections.abc import Iterator, Mapping, MutableMapping
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from ...domain.dependency import Dependency
from ...domain.enums import DepKind
from ...domain.errors import CrateEditError, DependencyNotFound, ManifestNotFound, TableNotFound, UnsupportedDependency
from ...domain.features import DependencyStatus, FeatureValue

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"
_KIND_TABLES = frozenset(kind.value for kind in DepKind)


class DependencyTable:
    """Ordered handle over one dependency table of a manifest.

    Iteration yields ``(key, item)`` pairs from a snapshot, so entries may be
    edited while iterating.
    """

    def __init__(self, path: tuple[str, ...], table: MutableMapping[str, Any]) -> None:
        self.path = path
        self._table = table

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter([(str(key), item) for key, item in self._table.items()])

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def get(self, key: str) -> Any:
        return self._table.get(key)

    def set_version(self, key: str, requirement: str) -> None:
        """Replace the version requirement of ``key`` in place.

        Table entries keep every other field; string entries are replaced
        wholesale, keeping their surrounding comments.
        """
        item = self._table[key]
        if isinstance(item, MutableMapping):
            item["version"] = requirement
        else:
            self._table[key] = requirement

    def __repr__(self) -> str:
        return f"DependencyTable(path={self.path!r}, keys={[key for key, _ in self]!r})"


def _as_table(value: Any) -> MutableMapping[str, Any] | None:
    return value if isinstance(value, MutableMapping) else None


class LocalManifest:
    """A ``Cargo.toml`` on disk together with its parsed document.

    Example:
        >>> manifest = LocalManifest.from_text('[dependencies]\\nserde = "1.0"\\n', Path("Cargo.toml"))
        >>> [key for table in manifest.dependency_tables() for key, _ in table]
        ['serde']
    """

    def __init__(self, path: Path, document: TOMLDocument) -> None:
        self.path = path
        self.data = document

    @classmethod
    def from_text(cls, text: str, path: Path) -> LocalManifest:
        try:
            document = tomlkit.parse(text)
        except TOMLKitError as exc:
            raise CrateEditError(f"failed to parse `{path}`: {exc}") from exc
        return cls(path, document)

    @classmethod
    def load(cls, path: Path) -> LocalManifest:
        """Read and parse the manifest at ``path`` (a file or its directory).

        Raises:
            ManifestNotFound: If no manifest exists there.
            CrateEditError: If the file is not valid TOML.
        """
        manifest_path = path / MANIFEST_NAME if path.is_dir() else path
        try:
            raw = manifest_path.read_bytes()
        except FileNotFoundError as exc:
            raise ManifestNotFound(f"manifest `{manifest_path}` does not exist") from exc
        # bytes keep CRLF line endings intact through the round trip
        return cls.from_text(raw.decode("utf-8"), manifest_path)

    def __str__(self) -> str:
        return tomlkit.dumps(self.data)

    def write(self) -> None:
        """Persist the document atomically next to the original file."""
        payload = str(self).encode("utf-8")
        directory = self.path.parent
        handle = tempfile.NamedTemporaryFile(
            "wb", dir=directory, prefix=f".{self.path.name}.", suffix=".tmp", delete=False
        )
        temp_path = Path(handle.name)
        try:
            with handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            if self.path.exists():
                shutil.copymode(self.path, temp_path)
            os.replace(temp_path, self.path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote manifest", extra={"path": str(self.path), "bytes": len(payload)})

    def _iter_tables(self, *, include_workspace: bool) -> Iterator[DependencyTable]:
        for key, value in self.data.items():
            if key in _KIND_TABLES:
                table = _as_table(value)
                if table is not None:
                    yield DependencyTable((key,), table)
            elif key == "target":
                for platform, platform_value in (_as_table(value) or {}).items():
                    for kind, kind_value in (_as_table(platform_value) or {}).items():
                        table = _as_table(kind_value)
                        if kind in _KIND_TABLES and table is not None:
                            yield DependencyTable(("target", str(platform), kind), table)
            elif key == "workspace" and include_workspace:
                table = _as_table((_as_table(value) or {}).get("dependencies"))
                if table is not None:
                    yield DependencyTable(("workspace", "dependencies"), table)

    def dependency_tables(self) -> list[DependencyTable]:
        """Every dependency table in file order, ``workspace.dependencies`` included."""
        return list(self._iter_tables(include_workspace=True))

    def _resolve_table(self, table_path: tuple[str, ...]) -> tuple[MutableMapping[str, Any], MutableMapping[str, Any]]:
        parent: MutableMapping[str, Any] = self.data
        for depth, key in enumerate(table_path):
            child = _as_table(parent.get(key))
            if child is None:
                raise TableNotFound(f"The table `{'.'.join(table_path[: depth + 1])}` could not be found.")
            if depth == len(table_path) - 1:
                return parent, child
            parent = child
        raise TableNotFound("The table `` could not be found.")

    def remove_from_table(self, table_path: tuple[str, ...], name: str) -> str:
        """Remove ``name`` (a key or a renamed package) from a table.

        The table itself is dropped once it is empty.

        Returns:
            The key that was removed.

        Raises:
            TableNotFound: If ``table_path`` does not exist.
            DependencyNotFound: If no entry matches ``name``.
        """
        parent, table = self._resolve_table(table_path)
        key = name if name in table else self._renamed_key(table, name)
        if key is None:
            location = ".".join(table_path)
            message = f"the dependency `{name}` could not be found in `{location}`."
            similar = difflib.get_close_matches(name, [str(k) for k in table], n=1)
            if similar:
                message += f"\n\nhelp: a dependency with a similar name exists: `{similar[0]}`"
            raise DependencyNotFound(message)
        del table[key]
        if not table:
            del parent[table_path[-1]]
        return key

    @staticmethod
    def _renamed_key(table: Mapping[str, Any], name: str) -> str | None:
        for key, item in table.items():
            if isinstance(item, Mapping) and item.get("package") == name:
                return str(key)
        return None

    def dependency_status(self, dep_key: str) -> DependencyStatus:
        """Classify ``dep_key`` across the package's own dependency tables.

        Entries that do not parse still count as declared, and as required.
        """
        status = DependencyStatus.NONE
        for table in self._iter_tables(include_workspace=False):
            item = table.get(dep_key)
            if item is None:
                continue
            try:
                optional = Dependency.from_toml(dep_key, item).optional
            except UnsupportedDependency:
                optional = False
            if optional:
                return DependencyStatus.OPTIONAL
            status = DependencyStatus.REQUIRED
        return status

    def _feature_lists(self) -> Iterator[list[Any]]:
        features = _as_table(self.data.get("features"))
        if features is None:
            return
        for _, values in features.items():
            if isinstance(values, list):
                yield values

    def gc_dep(self, dep_key: str) -> None:
        """Drop or rewrite ``[features]`` activations that dangle after a removal.

        Emptied feature lists stay in place as ``[]``.
        """
        status = self.dependency_status(dep_key)
        explicit = any(
            isinstance(value, str) and FeatureValue.parse(value).activates_dependency(dep_key)
            for values in self._feature_lists()
            for value in values
        )
        for values in self._feature_lists():
            parsed = [(index, FeatureValue.parse(value)) for index, value in enumerate(values) if isinstance(value, str)]
            for index, feature in reversed(parsed):
                if feature.should_remove(dep_key, status, explicit):
                    del values[index]
            if status is DependencyStatus.REQUIRED:
                for index, value in enumerate(values):
                    if not isinstance(value, str):
                        continue
                    feature = FeatureValue.parse(value)
                    if feature.name == dep_key and feature.weak:
                        values[index] = feature.strengthened()


__all__ = ["MANIFEST_NAME", "DependencyTable", "LocalManifest"]
