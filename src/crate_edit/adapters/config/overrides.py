"""Parse and apply ``--set SECTION.KEY=VALUE`` CLI overrides to Config."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""Union of types that :func:`coerce_value` can produce."""


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """A single parsed configuration override."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue


def parse_override(raw: str) -> ConfigOverride:
    """Split ``SECTION.KEY[.SUBKEY...]=VALUE`` into a ConfigOverride.

    The first ``=`` ends the dotted path; the first dot ends the section.

    Raises:
        ValueError: If ``=`` or the section dot is missing, or a path
            component is empty.

    Examples:
        >>> override = parse_override("registry.timeout=5")
        >>> override.section, override.key_path, override.value
        ('registry', ('timeout',), 5)

        >>> parse_override('upgrade.exclude=["serde","rand"]').value
        ['serde', 'rand']

        >>> parse_override("lib_log_rich.payload_limits.max_chars=8192").key_path
        ('payload_limits', 'max_chars')
    """
    path_part, sep, value_str = raw.partition("=")
    if not sep:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")
    if "." not in path_part:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")

    section, *key_parts = path_part.split(".")
    if not section:
        raise ValueError(f"Invalid override {raw!r}: section name is empty")
    if not all(key_parts):
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")

    return ConfigOverride(section=section, key_path=tuple(key_parts), value=coerce_value(value_str))


def coerce_value(raw: str) -> CoercedValue:
    """Read ``raw`` as JSON when possible, else keep the string.

    Examples:
        >>> coerce_value("true"), coerce_value("2.5"), coerce_value("null")
        (True, 2.5, None)
        >>> coerce_value("sparse+https://index.crates.io/")
        'sparse+https://index.crates.io/'
        >>> coerce_value("")
        ''
    """
    if raw == "":
        return ""
    try:
        return orjson.loads(raw)
    except (orjson.JSONDecodeError, ValueError):
        return raw


def _nest_override(target: dict[str, dict[str, object]], override: ConfigOverride) -> None:
    """Insert ``override`` into a nested dict, creating intermediate tables.

    Examples:
        >>> tree: dict[str, dict[str, object]] = {}
        >>> _nest_override(tree, ConfigOverride(section="upgrade", key_path=("verbose",), value=True))
        >>> tree
        {'upgrade': {'verbose': True}}
    """
    node: dict[str, object] = target.setdefault(override.section, {})
    for part in override.key_path[:-1]:
        existing = node.setdefault(part, {})
        if not isinstance(existing, dict):
            raise ValueError(f"Cannot nest under {part!r}: it already holds {type(existing).__name__}")
        node = cast("dict[str, object]", existing)
    node[override.key_path[-1]] = override.value


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Deep-merge CLI overrides into ``config`` via ``Config.with_overrides``.

    Raises:
        ValueError: If any override string is malformed.

    Examples:
        >>> cfg = Config({"upgrade": {"verbose": False}}, {})
        >>> apply_overrides(cfg, ("upgrade.verbose=true",))["upgrade"]["verbose"]
        True
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    if not raw_overrides:
        return config

    overrides: dict[str, dict[str, object]] = {}
    for raw in raw_overrides:
        _nest_override(overrides, parse_override(raw))
    return config.with_overrides(overrides)


__all__ = [
    "CoercedValue",
    "ConfigOverride",
    "apply_overrides",
    "coerce_value",
    "parse_override",
]
