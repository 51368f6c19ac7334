"""lib_log_rich runtime initialisation shared by every entry point.

Contents:
    * :class:`LoggingConfigModel` – validated view of the ``[lib_log_rich]`` section.
    * :func:`init_logging` – idempotent runtime setup plus stdlib bridging.

System Role:
    Adapter layer. Engine modules log through ``logging.getLogger(__name__)``;
    :func:`init_logging` routes those records into lib_log_rich once the CLI
    has loaded configuration.
"""

from __future__ import annotations

from typing import cast

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict

from ... import __init__conf__


class LoggingConfigModel(BaseModel):
    """The ``[lib_log_rich]`` section; unknown keys go to ``RuntimeConfig`` untouched.

    Example:
        >>> LoggingConfigModel().environment
        'prod'
        >>> LoggingConfigModel(service="crate_edit", console_level="debug").model_dump()["console_level"]
        'debug'
    """

    service: str | None = None
    environment: str = "prod"

    model_config = ConfigDict(extra="allow")


def _build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    section: object = config.get("lib_log_rich", default={})
    parsed = LoggingConfigModel.model_validate(cast("dict[str, object]", section) if section else {})
    passthrough = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    return lib_log_rich.runtime.RuntimeConfig(
        service=parsed.service or __init__conf__.name,
        environment=parsed.environment,
        **passthrough,
    )


def init_logging(config: Config) -> None:
    """Start the lib_log_rich runtime unless it is already running.

    ``.env`` files are loaded first so ``LOG_*`` variables take effect, and
    stdlib logging is attached so module loggers reach the runtime.

    Example:
        >>> init_logging(Config({"lib_log_rich": {"environment": "test"}}, {}))  # doctest: +SKIP
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(_build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()


__all__ = [
    "LoggingConfigModel",
    "init_logging",
]
