"""``acs-mailer`` console script.

Binds the CLI to :func:`build_production`, so the installed command sends
through the real httpx executor and reads the real layered configuration.
Kept outside ``adapters`` because it is the one place allowed to import
both the CLI and the composition root.
"""

from __future__ import annotations

from .adapters.cli.main import main as run_cli
from .composition import build_production


def main() -> int:
    """Run the mailer CLI against production services and return its exit code."""
    return run_cli(services_factory=build_production)


__all__ = ["main"]
