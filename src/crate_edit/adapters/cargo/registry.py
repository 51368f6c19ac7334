"""Registry index access over Cargo's sparse HTTP protocol.

Purpose
-------
Answer "what is the newest published version of this crate?" for crates.io
and for alternate registries declared in ``.cargo/config.toml``.

Contents
--------
* :func:`index_path` - sparse index file path for a crate name.
* :func:`registry_url` - index URL of a named alternate registry.
* :class:`SparseRegistry` - the ``Registry`` port implementation.

System Role
-----------
Adapter behind the ``OpenRegistry`` port. HTTP goes through httpx, index
lines are parsed with orjson, and Cargo config files are read with rtoml.
Git-protocol indices are not supported.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any, cast

import httpx
import orjson
import rtoml

from ...domain.errors import CollaboratorFailure, UnparsableRequirement
from ...domain.semver import Version
from ..config.settings import CRATES_IO_INDEX, RegistrySettings

logger = logging.getLogger(__name__)

CRATES_IO_GIT_INDEX = "https://github.com/rust-lang/crates.io-index"
_SPARSE_PREFIX = "sparse+"


def index_path(name: str) -> str:
    """Relative path of a crate's file inside a sparse index.

    Example:
        >>> [index_path(n) for n in ("a", "cc", "syn", "Serde")]
        ['1/a', '2/cc', '3/s/syn', 'se/rd/serde']
    """
    lowered = name.lower()
    if len(lowered) <= 2:
        return f"{len(lowered)}/{lowered}"
    if len(lowered) == 3:
        return f"3/{lowered[0]}/{lowered}"
    return f"{lowered[:2]}/{lowered[2:4]}/{lowered}"


def _cargo_home() -> Path:
    configured = os.environ.get("CARGO_HOME")
    return Path(configured) if configured else Path.home() / ".cargo"


def _config_files(manifest_path: Path) -> Iterator[Path]:
    start = manifest_path.resolve().parent
    for directory in (start, *start.parents):
        for name in ("config.toml", "config"):
            candidate = directory / ".cargo" / name
            if candidate.is_file():
                yield candidate
    for name in ("config.toml", "config"):
        candidate = _cargo_home() / name
        if candidate.is_file():
            yield candidate


def registry_url(manifest_path: Path, registry: str) -> str:
    """Index URL of the alternate registry ``registry``.

    ``CARGO_REGISTRIES_<NAME>_INDEX`` wins; otherwise ``[registries.<name>]``
    is looked up in ``.cargo/config.toml`` files from the manifest directory
    upwards, then in ``$CARGO_HOME``.

    Raises:
        CollaboratorFailure: If the registry is not configured anywhere.
    """
    variable = f"CARGO_REGISTRIES_{registry.upper().replace('-', '_')}_INDEX"
    if variable in os.environ:
        return os.environ[variable]
    for path in _config_files(manifest_path):
        try:
            data = rtoml.load(path)
        except rtoml.TomlParsingError as exc:
            raise CollaboratorFailure(f"failed to parse `{path}`: {exc}") from exc
        registries = cast("dict[str, Any]", data.get("registries", {}))
        entry = registries.get(registry, {})
        if isinstance(entry, dict) and isinstance(entry.get("index"), str):
            return cast(str, entry["index"])
    raise CollaboratorFailure(f"The registry '{registry}' could not be found")


def sparse_base_url(url: str) -> str:
    """HTTP base URL of a sparse index, mapping the crates.io git URL to its sparse twin.

    Raises:
        CollaboratorFailure: For git-protocol indices.

    Example:
        >>> sparse_base_url("https://github.com/rust-lang/crates.io-index")
        'https://index.crates.io/'
    """
    if url.rstrip("/").removesuffix(".git") == CRATES_IO_GIT_INDEX:
        url = CRATES_IO_INDEX
    if not url.startswith(_SPARSE_PREFIX):
        raise CollaboratorFailure(f"registry index `{url}` uses the git protocol, which is not supported")
    base = url[len(_SPARSE_PREFIX) :]
    return base if base.endswith("/") else f"{base}/"


class SparseRegistry:
    """Registry access for one run, bound to settings and the offline flag."""

    def __init__(
        self, settings: RegistrySettings, *, offline: bool, transport: httpx.BaseTransport | None = None
    ) -> None:
        self.settings = settings
        self.offline = offline
        self._transport = transport

    def _get(self, url: str) -> str:
        headers = {"User-Agent": self.settings.user_agent}
        try:
            with httpx.Client(
                timeout=self.settings.timeout, headers=headers, follow_redirects=True, transport=self._transport
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise CollaboratorFailure(f"`{url}` returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise CollaboratorFailure(f"failed to fetch `{url}`: {exc}") from exc
        return response.text

    def registry_url(self, manifest_path: Path, registry: str | None) -> str:
        if registry is None:
            return self.settings.default_index
        return registry_url(manifest_path, registry)

    def update_index(self, url: str) -> None:
        """Confirm the index answers; sparse indices need no local refresh."""
        logger.info("Updating index", extra={"url": url})
        self._get(sparse_base_url(url) + "config.json")

    def latest_version(self, name: str, *, prerelease: bool, manifest_path: Path, registry_url: str | None) -> str:
        """Newest non-yanked version of ``name``.

        Pre-releases count only when ``prerelease`` is set.

        Raises:
            CollaboratorFailure: When offline, on HTTP errors, or when no
                version qualifies.
        """
        if self.offline:
            raise CollaboratorFailure(f"cannot look up `{name}` while offline")
        base = sparse_base_url(registry_url or self.settings.default_index)
        candidates: list[Version] = []
        for line in self._get(base + index_path(name)).splitlines():
            if not line.strip():
                continue
            try:
                record = orjson.loads(line)
                version = Version.parse(str(record["vers"]))
            except (orjson.JSONDecodeError, KeyError, TypeError, UnparsableRequirement):
                logger.debug("Skipping unreadable index line", extra={"crate": name})
                continue
            if record.get("yanked") or (version.is_prerelease and not prerelease):
                continue
            candidates.append(version)
        if not candidates:
            raise CollaboratorFailure(f"no published version of `{name}` found in `{base}`")
        return str(max(candidates))


__all__ = [
    "CRATES_IO_GIT_INDEX",
    "SparseRegistry",
    "index_path",
    "registry_url",
    "sparse_base_url",
]
