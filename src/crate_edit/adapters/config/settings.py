"""Typed settings for the ``[registry]`` and ``[upgrade]`` config sections.

Bridges lib_layered_config's dictionary output with validated, immutable
Pydantic models, mirroring how each section is documented in
``defaultconfig.toml``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...domain.errors import ConfigurationError

CRATES_IO_INDEX = "sparse+https://index.crates.io/"


class RegistrySettings(BaseModel):
    """How registry indices are reached.

    Example:
        >>> RegistrySettings().default_index
        'sparse+https://index.crates.io/'
        >>> RegistrySettings(timeout=0)  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValidationError: ...
    """

    model_config = ConfigDict(frozen=True)

    default_index: str = CRATES_IO_INDEX
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "crate-edit"


class UpgradeSettings(BaseModel):
    """Defaults for ``upgrade`` that the command line can extend."""

    model_config = ConfigDict(frozen=True)

    exclude: tuple[str, ...] = ()
    verbose: bool = False

    @field_validator("exclude", mode="before")
    @classmethod
    def _coerce_string_to_tuple(cls, v: Any) -> tuple[str, ...]:
        """Accept a comma-separated string as produced by env variables.

        Examples:
            >>> UpgradeSettings._coerce_string_to_tuple("serde, rand")
            ('serde', 'rand')
            >>> UpgradeSettings._coerce_string_to_tuple("")
            ()
        """
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        if isinstance(v, (list, tuple)):
            return tuple(str(item) for item in cast("list[Any]", v))
        return cast("tuple[str, ...]", v)


class CrateEditSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    upgrade: UpgradeSettings = Field(default_factory=UpgradeSettings)


def _section(config_dict: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section: Any = config_dict.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[{name}] must be a table, got {type(section).__name__}")
    return cast("Mapping[str, Any]", section)


def load_settings_from_dict(config_dict: Mapping[str, Any]) -> CrateEditSettings:
    """Validate the ``[registry]`` and ``[upgrade]`` sections.

    Raises:
        ConfigurationError: When a section has the wrong shape or an invalid value.

    Example:
        >>> settings = load_settings_from_dict({"upgrade": {"exclude": ["serde"]}})
        >>> settings.upgrade.exclude
        ('serde',)
        >>> settings.registry.timeout
        30.0
    """
    try:
        return CrateEditSettings(
            registry=RegistrySettings.model_validate(dict(_section(config_dict, "registry"))),
            upgrade=UpgradeSettings.model_validate(dict(_section(config_dict, "upgrade"))),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc


__all__ = [
    "CRATES_IO_INDEX",
    "CrateEditSettings",
    "RegistrySettings",
    "UpgradeSettings",
    "load_settings_from_dict",
]
