"""Shared pytest fixtures for engine, adapter, and CLI tests.

Manifests are real files under ``tmp_path``; cargo, the registry, and the
shell are replaced by the in-memory doubles from
:mod:`crate_edit.adapters.memory`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from crate_edit.adapters.memory import FakeRegistry, FakeWorkspace, ShellSpy
from crate_edit.domain.packages import LockedPackage, Package

if TYPE_CHECKING:
    from crate_edit.composition import AppServices


def _load_dotenv() -> None:
    """Load a project ``.env`` so integration runs can point at a custom registry."""
    from dotenv import load_dotenv

    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_dotenv()

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(type(lib_cli_exit_tools.config)))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Fresh CliRunner; ``result.stdout`` and ``result.stderr`` stay separate."""
    return CliRunner()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """The ``build_production`` factory, for commands that need no injection."""
    from crate_edit.composition import build_production

    return build_production


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Build a ``Config`` from a plain dictionary."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return ANSI_ESCAPE_PATTERN.sub("", value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset lib_cli_exit_tools traceback flags and restore them afterwards."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}
    try:
        yield
    finally:
        for name, value in snapshot.items():
            setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before the test."""
    from crate_edit.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Write a ``Cargo.toml`` below ``tmp_path`` and return its path.

    Example:
        def test_x(write_manifest: Callable[..., Path]) -> None:
            path = write_manifest('[dependencies]\\nserde = "1.0"\\n')
            member = write_manifest(text, member="crates/core")
    """

    def _write(text: str, *, member: str = "") -> Path:
        directory = tmp_path / member if member else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "Cargo.toml"
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def config_cli_context(clear_config_cache: None) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Production services reading ``data`` instead of the layered config files.

    Example:
        def test_config(cli_runner: CliRunner, config_cli_context: Callable[..., Any]) -> None:
            factory = config_cli_context({"registry": {"timeout": 5}})
            result = cli_runner.invoke(cli, ["config"], obj=factory)
    """
    from crate_edit.composition import build_production

    def _create(data: dict[str, Any]) -> Callable[[], AppServices]:
        config = Config(data, {})

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        services = replace(build_production(), get_config=_fake_get_config)
        return lambda: services

    return _create


@dataclass
class Doubles:
    """The in-memory collaborators behind one test's services."""

    shell: ShellSpy = field(default_factory=ShellSpy)
    workspace: FakeWorkspace = field(default_factory=FakeWorkspace)
    registry: FakeRegistry = field(default_factory=FakeRegistry)

    def add_package(self, name: str, manifest_path: Path) -> Package:
        package = Package(name=name, manifest_path=manifest_path)
        self.workspace.packages.append(package)
        return package

    def lock(self, **versions: str) -> None:
        self.workspace.locked.extend(LockedPackage(name=n.replace("_", "-"), version=v) for n, v in versions.items())


@pytest.fixture
def doubles() -> Doubles:
    """Fresh shell spy, scripted workspace, and scripted registry."""
    return Doubles()


@pytest.fixture
def cli_services(
    doubles: Doubles,
    clear_config_cache: None,
) -> Callable[..., Callable[[], AppServices]]:
    """Build a services factory for ``cli_runner.invoke(..., obj=...)``.

    Collaborators come from ``doubles``; ``config_data`` replaces the layered
    configuration; logging uses the real lib_log_rich runtime, as in
    production.
    """
    from crate_edit.adapters.logging import init_logging
    from crate_edit.composition import build_testing

    def _create(config_data: dict[str, Any] | None = None) -> Callable[[], AppServices]:
        config = Config(config_data or {}, {})

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        services = replace(
            build_testing(shell=doubles.shell, workspace=doubles.workspace, registry=doubles.registry),
            get_config=_fake_get_config,
            init_logging=init_logging,
        )
        return lambda: services

    return _create
