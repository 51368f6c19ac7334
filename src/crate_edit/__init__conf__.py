"""Static package metadata surfaced by ``crate-edit info``.

The ``version`` line is kept in step with ``pyproject.toml``; the
``LAYEREDCONF_*`` triple names the configuration directories that
lib_layered_config searches.
"""

from __future__ import annotations

name = "crate_edit"
title = "Remove and upgrade dependencies in Cargo.toml manifests"
version = "0.4.0"
homepage = "https://github.com/crate-edit/crate_edit"
author = "crate_edit contributors"
shell_command = "crate-edit"

LAYEREDCONF_VENDOR = "crate-edit"
LAYEREDCONF_APP = "crate-edit"
LAYEREDCONF_SLUG = "crate-edit"


def print_info() -> None:
    """Print the metadata block shown by the ``info`` command."""
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
