"""
The single error kind of a run and the value a finished run produces.

A ``Failure`` carries an exit code and an optional message. It is raised
inside a run (automatically when a child process exits non-zero, or
explicitly through ``Session.fail``) and is never caught before the
driver; the first one ends the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class Failure(Exception):
    """Terminal outcome of a run: exit code plus optional message."""

    def __init__(self, exit_code: int, message: Optional[str] = None):
        super().__init__(exit_code, message)
        self.exit_code = int(exit_code)
        self.message = message

    def __str__(self) -> str:
        if self.message:
            return f"exit code {self.exit_code}: {self.message}"
        return f"exit code {self.exit_code}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return (self.exit_code, self.message) == (other.exit_code, other.message)

    def __hash__(self) -> int:
        return hash((self.exit_code, self.message))


@dataclass
class RunOutcome:
    """What ``run`` hands back: the produced value, or the failure that ended the run."""

    value: Any = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def exit_code(self) -> int:
        return 0 if self.failure is None else self.failure.exit_code
