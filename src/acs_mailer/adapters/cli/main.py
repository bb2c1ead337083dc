"""Process-level runner for ``acs-mailer``.

Runs the root group with an injected services factory, prints errors
through ``lib_cli_exit_tools``, and turns mailer exceptions that escape a
command into the exit codes of :class:`~.exit_codes.ExitCode`.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import click
import lib_cli_exit_tools
import lib_log_rich.runtime

from acs_mailer import __init__conf__
from acs_mailer.domain.errors import ApiError, ConfigurationError, ProtocolError, TransportError

from .constants import TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import (
    apply_traceback_preferences,
    restore_traceback_state,
    snapshot_traceback_state,
)
from .exit_codes import ExitCode

if TYPE_CHECKING:
    from acs_mailer.composition import AppServices

_MAILER_EXIT_CODES: tuple[tuple[type[BaseException], ExitCode], ...] = (
    (ConfigurationError, ExitCode.CONFIG_ERROR),
    (ProtocolError, ExitCode.PROTOCOL_ERROR),
    (TransportError, ExitCode.PROVIDER_FAILURE),
    (ApiError, ExitCode.PROVIDER_FAILURE),
)


def exit_code_for(exc: BaseException) -> int:
    """Return the process exit code for an exception raised by a command.

    Mailer errors map onto their sysexits code; everything else is left to
    ``lib_cli_exit_tools``.

    Example:
        >>> exit_code_for(ConfigurationError("no endpoint"))
        78
        >>> exit_code_for(SystemExit(22))
        22
    """
    for exc_type, code in _MAILER_EXIT_CODES:
        if isinstance(exc, exc_type):
            return int(code)
    return lib_cli_exit_tools.get_system_exit_code(exc)


def _run_cli(argv: Sequence[str] | None, *, services_factory: Callable[[], AppServices]) -> int:
    """Invoke the root group with ``services_factory`` as ``ctx.obj``.

    ``lib_cli_exit_tools.run_cli`` cannot pass ``obj``, so its behaviour is
    reproduced here.
    """
    from .root import cli

    args = list(argv) if argv is not None else sys.argv[1:]

    try:
        cli.main(
            args=args,
            prog_name=__init__conf__.shell_command,
            obj=services_factory,
            standalone_mode=False,
        )
        return 0
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except BaseException as exc:
        # BaseException so SystemExit and KeyboardInterrupt are formatted too.
        verbose, _ = snapshot_traceback_state()
        apply_traceback_preferences(verbose)
        limit = TRACEBACK_VERBOSE_LIMIT if verbose else TRACEBACK_SUMMARY_LIMIT
        lib_cli_exit_tools.print_exception_message(trace_back=verbose, length_limit=limit)
        return exit_code_for(exc)


def main(
    argv: Sequence[str] | None = None,
    *,
    restore_traceback: bool = True,
    services_factory: Callable[[], AppServices] | None = None,
) -> int:
    """Run ``acs-mailer`` and return its exit code instead of exiting.

    Args:
        argv: Arguments without the program name; ``None`` reads ``sys.argv``.
        restore_traceback: Put the ``lib_cli_exit_tools`` traceback flags back
            the way they were once the run ends.
        services_factory: ``build_production`` for real sends,
            ``build_testing`` to send into an :class:`HttpExecutorSpy`.

    Raises:
        ValueError: ``services_factory`` is missing.

    Example:
        >>> from acs_mailer.composition import build_testing
        >>> main(["--version"], services_factory=build_testing)  # doctest: +SKIP
        0
    """
    if services_factory is None:
        raise ValueError("services_factory is required; pass build_production or build_testing")

    saved = snapshot_traceback_state()
    try:
        return _run_cli(argv, services_factory=services_factory)
    finally:
        if restore_traceback:
            restore_traceback_state(saved)
        # Shutting down from a worker thread would stop logging for the others.
        if threading.current_thread() is threading.main_thread() and lib_log_rich.runtime.is_initialised():
            lib_log_rich.runtime.shutdown()


__all__ = ["exit_code_for", "main"]
