"""Console script entry point (``crate-edit``).

Lives at package level, outside the adapters, so it can hand the
composition root's production wiring to the CLI.
"""

from __future__ import annotations

from .adapters.cli.main import main as cli_main
from .composition import build_production


def main() -> int:
    """Run ``crate-edit`` with production services and return its exit code."""
    return cli_main(services_factory=build_production)


__all__ = ["main"]
