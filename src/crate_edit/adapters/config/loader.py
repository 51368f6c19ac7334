"""Layered configuration loading with caching and profile support.

Precedence (lowest first): bundled ``defaultconfig.toml`` → app → host →
user → ``.env`` → environment variables, as implemented by
lib_layered_config.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol, cast

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from ... import __init__conf__


class ConfigLoaderProtocol(Protocol):
    """A config loader that also exposes ``cache_clear``."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Reject profile names lib_layered_config would refuse to map onto paths.

    Raises:
        ValueError: For empty, overlong, reserved, or path-traversing names.

    Examples:
        >>> validate_profile("ci")

        >>> validate_profile("../escape")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../escape
    """
    validate_profile_name(profile, max_length=max_length if max_length is not None else DEFAULT_MAX_PROFILE_LENGTH)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Path of the ``defaultconfig.toml`` shipped inside the package.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).parent / "defaultconfig.toml"


# One Config per (profile, start_dir) for the life of the process.
@lru_cache(maxsize=4)
def _get_config_impl(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Load the layered configuration.

    Args:
        profile: Optional profile name; inserts ``profile/<name>/`` into every
            configuration path.
        start_dir: Directory that seeds ``.env`` discovery; the working
            directory when None.

    Returns:
        Immutable configuration with provenance tracking.

    Example:
        >>> get_config().get("registry", default={}).get("timeout")
        30.0
    """
    if profile is not None:
        validate_profile(profile)
    return _get_config_impl(profile=profile, start_dir=start_dir)


def _cache_clear() -> None:
    """Force the next ``get_config()`` call to re-read every layer."""
    _get_config_impl.cache_clear()


# lru_cache's cache_clear is invisible once the function is cast to the Protocol.
_get_config.cache_clear = _cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


__all__ = [
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
