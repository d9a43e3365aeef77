"""Human-readable console output for validation runs."""
import sys
from typing import TextIO

from .classification import ValidateStatus
from .store import ValidateResult

LIST_PREFIX = '    - '

RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
ORANGE = '\033[38;5;214m'
BRIGHT_BLACK = '\033[90m'
RESET = '\033[0m'


class ConsoleReporter:
    """Prints phase progress and the classified module listings.

    Each phase is announced with begin() and closed with succeed(), warn() or fail().
    Colors are only emitted when the stream is a terminal.
    """

    def __init__(self, stream: TextIO | None = None, color: bool | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        if color is None:
            isatty = getattr(self._stream, 'isatty', None)
            color = bool(isatty and isatty())
        self._color = color
        self._phase: str | None = None

    def print(self, line: str, color: str | None = None) -> None:
        if color is not None and self._color:
            line = f"{color}{line}{RESET}"
        print(line, file=self._stream, flush=True)

    def begin(self, message: str) -> None:
        self._phase = message
        self.print(f"{message} ...")

    def succeed(self, message: str | None = None) -> None:
        self._end('OK', GREEN, message)

    def warn(self, message: str | None = None) -> None:
        self._end('WARN', YELLOW, message)

    def fail(self, message: str | None = None) -> None:
        self._end('FAIL', RED, message)

    def _end(self, tag: str, color: str, message: str | None) -> None:
        self.print(f"[{tag}] {message or self._phase or ''}", color)
        self._phase = None

    def finish_duplicate_phase(self, status: ValidateStatus) -> None:
        """Close the duplicate-testing phase according to the run status."""
        if status == ValidateStatus.SUCCESS:
            self.succeed("No Duplicate Modules")
        elif status == ValidateStatus.ERROR:
            self.fail("New Duplicate Modules Detected")
        else:
            self.warn("Known Duplicate Modules Exist")

    def print_result(self, result: ValidateResult) -> None:
        self._print_listing("New Duplicate Modules", result.new_duplicate_modules, RED)
        self._print_listing("Known Duplicate Modules", result.known_duplicate_modules, ORANGE)
        self._print_listing("Redundant Duplicate Module Ids", result.redundant_duplicate_modules, BRIGHT_BLACK)

    def _print_listing(self, title: str, module_ids, color: str) -> None:
        if not module_ids:
            return

        self.print(title, color)
        for module_id in module_ids:
            self.print(f"{LIST_PREFIX}{module_id}", color)
