"""Sparse registry access: index paths, registry lookup, and version selection."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import orjson
import pytest

from crate_edit.adapters.cargo.registry import SparseRegistry, index_path, registry_url, sparse_base_url
from crate_edit.adapters.config.settings import CRATES_IO_INDEX, RegistrySettings
from crate_edit.domain.errors import CollaboratorFailure

SERDE_INDEX = "\n".join(
    orjson.dumps(entry).decode()
    for entry in [
        {"name": "serde", "vers": "1.0.100", "yanked": False},
        {"name": "serde", "vers": "1.0.200", "yanked": False},
        {"name": "serde", "vers": "1.0.201", "yanked": True},
        {"name": "serde", "vers": "2.0.0-alpha.1", "yanked": False},
        {"name": "serde", "vers": "1.0.9", "yanked": False},
    ]
)


def _registry(handler: Callable[[httpx.Request], httpx.Response], *, offline: bool = False) -> SparseRegistry:
    return SparseRegistry(RegistrySettings(), offline=offline, transport=httpx.MockTransport(handler))


def _serve(body: str, seen: list[str] | None = None) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(str(request.url))
        return httpx.Response(200, text=body)

    return handler


@pytest.fixture
def isolated_cargo_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "cargo-home"
    home.mkdir()
    monkeypatch.setenv("CARGO_HOME", str(home))
    return home


# Index layout


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("name", "expected"),
    [("a", "1/a"), ("cc", "2/cc"), ("syn", "3/s/syn"), ("serde", "se/rd/serde"), ("Inflector", "in/fl/inflector")],
)
def test_when_a_crate_name_is_mapped_to_its_index_file(name: str, expected: str) -> None:
    assert index_path(name) == expected


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sparse+https://index.crates.io/", "https://index.crates.io/"),
        ("sparse+https://corp.example/index", "https://corp.example/index/"),
        ("https://github.com/rust-lang/crates.io-index", "https://index.crates.io/"),
        ("https://github.com/rust-lang/crates.io-index.git", "https://index.crates.io/"),
    ],
)
def test_when_an_index_url_is_turned_into_a_base_url(url: str, expected: str) -> None:
    assert sparse_base_url(url) == expected


@pytest.mark.os_agnostic
def test_when_an_index_uses_the_git_protocol_it_is_rejected() -> None:
    with pytest.raises(CollaboratorFailure, match="git protocol"):
        sparse_base_url("https://git.corp.example/index.git")


# Alternate registries


@pytest.mark.os_agnostic
def test_when_the_environment_names_the_registry_it_wins(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, isolated_cargo_home: Path
) -> None:
    monkeypatch.setenv("CARGO_REGISTRIES_MY_CORP_INDEX", "sparse+https://env.example/")

    assert registry_url(tmp_path / "Cargo.toml", "my-corp") == "sparse+https://env.example/"


@pytest.mark.os_agnostic
def test_when_a_project_config_declares_the_registry_it_is_found(
    tmp_path: Path, isolated_cargo_home: Path
) -> None:
    project = tmp_path / "project"
    member = project / "crates" / "core"
    member.mkdir(parents=True)
    (project / ".cargo").mkdir()
    (project / ".cargo" / "config.toml").write_text(
        '[registries.corp]\nindex = "sparse+https://project.example/"\n', encoding="utf-8"
    )
    (isolated_cargo_home / "config.toml").write_text(
        '[registries.corp]\nindex = "sparse+https://home.example/"\n', encoding="utf-8"
    )

    assert registry_url(member / "Cargo.toml", "corp") == "sparse+https://project.example/"


@pytest.mark.os_agnostic
def test_when_only_cargo_home_declares_the_registry_it_is_found(tmp_path: Path, isolated_cargo_home: Path) -> None:
    (isolated_cargo_home / "config.toml").write_text(
        '[registries.corp]\nindex = "sparse+https://home.example/"\n', encoding="utf-8"
    )

    assert registry_url(tmp_path / "Cargo.toml", "corp") == "sparse+https://home.example/"


@pytest.mark.os_agnostic
def test_when_the_registry_is_not_configured_it_raises(tmp_path: Path, isolated_cargo_home: Path) -> None:
    with pytest.raises(CollaboratorFailure, match="The registry 'ghost' could not be found"):
        registry_url(tmp_path / "Cargo.toml", "ghost")


@pytest.mark.os_agnostic
def test_when_a_cargo_config_is_broken_it_raises(tmp_path: Path, isolated_cargo_home: Path) -> None:
    (isolated_cargo_home / "config.toml").write_text("[registries\n", encoding="utf-8")

    with pytest.raises(CollaboratorFailure, match="failed to parse"):
        registry_url(tmp_path / "Cargo.toml", "corp")


# Version lookup


@pytest.mark.os_agnostic
def test_when_looking_up_latest_yanked_and_prereleases_are_skipped() -> None:
    seen: list[str] = []
    registry = _registry(_serve(SERDE_INDEX, seen))

    latest = registry.latest_version("serde", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None)

    assert latest == "1.0.200"
    assert seen == ["https://index.crates.io/se/rd/serde"]


@pytest.mark.os_agnostic
def test_when_prereleases_are_allowed_they_count() -> None:
    registry = _registry(_serve(SERDE_INDEX))

    latest = registry.latest_version("serde", prerelease=True, manifest_path=Path("Cargo.toml"), registry_url=None)

    assert latest == "2.0.0-alpha.1"


@pytest.mark.os_agnostic
def test_when_index_lines_are_unreadable_they_are_skipped() -> None:
    body = 'not json\n{"name": "rand"}\n\n{"name": "rand", "vers": "0.8.5", "yanked": false}\n'
    registry = _registry(_serve(body))

    latest = registry.latest_version("rand", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None)

    assert latest == "0.8.5"


@pytest.mark.os_agnostic
def test_when_an_alternate_index_is_given_it_is_queried() -> None:
    seen: list[str] = []
    registry = _registry(_serve('{"vers": "0.2.0"}', seen))

    registry.latest_version(
        "internal", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url="sparse+https://corp.example/idx/"
    )

    assert seen == ["https://corp.example/idx/in/te/internal"]


@pytest.mark.os_agnostic
def test_when_every_version_is_yanked_it_raises() -> None:
    registry = _registry(_serve('{"vers": "0.1.0", "yanked": true}'))

    with pytest.raises(CollaboratorFailure, match="no published version of `gone`"):
        registry.latest_version("gone", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None)


@pytest.mark.os_agnostic
def test_when_the_index_answers_404_it_raises() -> None:
    registry = _registry(lambda request: httpx.Response(404, text="not found"))

    with pytest.raises(CollaboratorFailure, match="HTTP 404"):
        registry.latest_version("missing", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None)


@pytest.mark.os_agnostic
def test_when_the_network_fails_it_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    registry = _registry(handler)

    with pytest.raises(CollaboratorFailure, match="failed to fetch"):
        registry.latest_version("serde", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None)


@pytest.mark.os_agnostic
def test_when_offline_no_request_is_made() -> None:
    seen: list[str] = []
    registry = _registry(_serve(SERDE_INDEX, seen), offline=True)

    with pytest.raises(CollaboratorFailure, match="offline"):
        registry.latest_version("serde", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None)

    assert seen == []


@pytest.mark.os_agnostic
def test_when_the_index_is_refreshed_its_config_is_fetched() -> None:
    seen: list[str] = []
    registry = _registry(_serve('{"dl": "https://static.crates.io/crates"}', seen))

    registry.update_index(CRATES_IO_INDEX)

    assert seen == ["https://index.crates.io/config.json"]


@pytest.mark.os_agnostic
def test_when_requests_are_sent_they_carry_the_configured_user_agent() -> None:
    agents: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        agents.append(request.headers["User-Agent"])
        return httpx.Response(200, text="{}")

    registry = SparseRegistry(
        RegistrySettings(user_agent="crate-edit-tests"), offline=False, transport=httpx.MockTransport(handler)
    )
    registry.update_index(CRATES_IO_INDEX)

    assert agents == ["crate-edit-tests"]


@pytest.mark.os_agnostic
def test_when_no_registry_is_named_the_default_index_is_used(tmp_path: Path) -> None:
    registry = SparseRegistry(RegistrySettings(default_index="sparse+https://mirror.example/"), offline=False)

    assert registry.registry_url(tmp_path / "Cargo.toml", None) == "sparse+https://mirror.example/"
