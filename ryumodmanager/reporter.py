"""User-facing output for the pipeline phases.

Phases never print directly; they receive a :class:`Reporter`. The console
implementation forwards to :mod:`logging_utils`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .logging_utils import log_debug, log_error, log_info, log_ok, log_warn


@runtime_checkable
class Reporter(Protocol):
    def info(self, message: str, indent: int = 0) -> None:
        """Report progress."""

    def warn(self, message: str, indent: int = 0) -> None:
        """Report a non-fatal problem."""

    def error(self, message: str, indent: int = 0) -> None:
        """Report a problem that stops the current phase."""

    def ok(self, message: str, indent: int = 0) -> None:
        """Report a completed step."""

    def debug(self, message: str, indent: int = 0) -> None:
        """Report details only shown in verbose mode."""

    def pause(self, message: str) -> None:
        """Block until the user acknowledges ``message``."""

    def set_verbose(self, enabled: bool) -> None:
        """Turn debug output on or off."""


class ConsoleReporter:
    """Prints through :mod:`logging_utils`. Debug lines only show once verbose output is on."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def set_verbose(self, enabled: bool) -> None:
        self.verbose = enabled

    def info(self, message: str, indent: int = 0) -> None:
        log_info(message, indent)

    def warn(self, message: str, indent: int = 0) -> None:
        log_warn(message, indent)

    def error(self, message: str, indent: int = 0) -> None:
        log_error(message, indent)

    def ok(self, message: str, indent: int = 0) -> None:
        log_ok(message, indent)

    def debug(self, message: str, indent: int = 0) -> None:
        if self.verbose:
            log_debug(message, indent)

    def pause(self, message: str) -> None:
        try:
            input(f"{message} ")
        except EOFError:
            self.debug("No console input available, continuing.")
