"""Reading manifest entries into ``Dependency`` descriptors."""

from __future__ import annotations

from typing import Any

import pytest
import tomlkit

from crate_edit.domain.dependency import Dependency, GitSource, PathSource, RegistrySource, WorkspaceSource
from crate_edit.domain.errors import UnsupportedDependency


@pytest.mark.os_agnostic
def test_when_the_entry_is_a_string_it_is_a_registry_requirement() -> None:
    dep = Dependency.from_toml("serde", "1.0")

    assert dep.source == RegistrySource(version="1.0")
    assert dep.version == "1.0"
    assert dep.rename is None
    assert dep.registry is None


@pytest.mark.os_agnostic
def test_when_the_entry_is_a_table_its_optional_flag_is_read() -> None:
    dep = Dependency.from_toml(
        "tokio",
        {"version": "1", "features": ["rt", "macros"], "optional": True, "default-features": False},
    )

    assert dep.version == "1"
    assert dep.optional is True


@pytest.mark.os_agnostic
def test_when_the_entry_names_a_package_the_key_is_a_rename() -> None:
    dep = Dependency.from_toml("json", {"package": "serde_json", "version": "1"})

    assert dep.name == "serde_json"
    assert dep.toml_key == "json"
    assert dep.rename == "json"


@pytest.mark.os_agnostic
def test_when_the_entry_names_a_registry_it_is_kept() -> None:
    dep = Dependency.from_toml("internal", {"version": "0.3", "registry": "corp"})

    assert dep.source == RegistrySource(version="0.3", registry="corp")
    assert dep.registry == "corp"


@pytest.mark.os_agnostic
def test_when_the_entry_is_a_git_dependency_it_has_no_version() -> None:
    dep = Dependency.from_toml("serde", {"git": "https://github.com/serde-rs/serde", "tag": "v1.0.0", "version": "1"})

    assert dep.source == GitSource(url="https://github.com/serde-rs/serde", tag="v1.0.0")
    assert str(dep.source) == "https://github.com/serde-rs/serde?tag=v1.0.0"
    assert dep.version is None


@pytest.mark.os_agnostic
def test_when_the_entry_is_a_path_dependency_it_has_no_version() -> None:
    dep = Dependency.from_toml("local", {"path": "../local", "version": "0.1"})

    assert dep.source == PathSource("../local")
    assert dep.version is None


@pytest.mark.os_agnostic
def test_when_the_entry_inherits_from_the_workspace_it_has_no_version() -> None:
    dep = Dependency.from_toml("anyhow", {"workspace": True, "features": ["backtrace"]})

    assert dep.source == WorkspaceSource()
    assert str(dep.source) == "workspace"
    assert dep.version is None


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    "item",
    [
        5,
        ["1.0"],
        {"features": ["derive"]},
        {"version": 1},
        {"version": "1", "features": "derive"},
        {"version": "1", "features": ["derive", 3]},
        {"version": "1", "features": True},
        {"version": "1", "features": 3},
        {"path": "../local", "features": True},
    ],
)
def test_when_the_entry_shape_is_unknown_it_raises(item: Any) -> None:
    with pytest.raises(UnsupportedDependency):
        Dependency.from_toml("weird", item)


@pytest.mark.os_agnostic
def test_when_the_entry_comes_from_tomlkit_it_reads_the_same() -> None:
    document = tomlkit.parse(
        '[dependencies]\nserde = { version = "1.0", features = ["derive"], optional = true }\nrand = "0.8"\n'
    )
    table = document["dependencies"]

    serde = Dependency.from_toml("serde", table["serde"])
    rand = Dependency.from_toml("rand", table["rand"])

    assert serde.version == "1.0"
    assert serde.optional is True
    assert rand.version == "0.8"


@pytest.mark.os_agnostic
def test_when_features_is_not_an_array_the_message_names_the_field() -> None:
    with pytest.raises(UnsupportedDependency, match="`features` of `odd` must be an array of strings"):
        Dependency.from_toml("odd", {"version": "1", "features": True})
