"""Tests for the ``[lib_log_rich]`` configuration model and runtime config.

init_logging itself runs through the CLI tests, which start the real runtime.
"""

from __future__ import annotations

import pytest
from lib_layered_config import Config

from crate_edit import __init__conf__
from crate_edit.adapters.logging.setup import LoggingConfigModel, _build_runtime_config


@pytest.mark.os_agnostic
def test_logging_config_model_allows_extra_fields() -> None:
    """Extra fields pass through for lib_log_rich RuntimeConfig."""
    parsed = LoggingConfigModel.model_validate({"service": "test", "environment": "dev", "console_level": "debug"})

    assert parsed.service == "test"
    assert parsed.environment == "dev"
    extra = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    assert extra == {"console_level": "debug"}


@pytest.mark.os_agnostic
def test_logging_config_model_defaults() -> None:
    """Empty input produces sensible defaults."""
    parsed = LoggingConfigModel.model_validate({})

    assert parsed.service is None
    assert parsed.environment == "prod"


@pytest.mark.os_agnostic
def test_runtime_config_falls_back_to_the_package_name() -> None:
    """Without a ``[lib_log_rich]`` section the service is the package name."""
    runtime = _build_runtime_config(Config({}, {}))

    assert runtime.service == __init__conf__.name
    assert runtime.environment == "prod"


@pytest.mark.os_agnostic
def test_runtime_config_uses_the_configured_section() -> None:
    """Service and environment come from the config section."""
    runtime = _build_runtime_config(Config({"lib_log_rich": {"service": "ci-edit", "environment": "test"}}, {}))

    assert runtime.service == "ci-edit"
    assert runtime.environment == "test"
