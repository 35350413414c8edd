"""
Command protocol: how a command renders itself to a shell line and how its
raw stdout turns into a typed result.

A concrete command subclasses ``Command[R]`` and implements

- ``render(self) -> str``: the exact shell text to run. Pure; computed before
  any process starts.
- ``parse(cls, output) -> R``: classmethod mapping the captured stdout of that
  text to ``R``. Must accept any string, including ``""``, and never raise;
  unexpected text maps to a degenerate default.

Wrappers whose result depends on the wrapped command (``Cd``) define no
``parse`` of their own and override ``parse_output`` instead.

``GenericCommand`` and ``Cd`` are the only variants shipped here; concrete
deployment steps live with their callers.
"""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Generic, Optional, Type, TypeVar, Union

R = TypeVar("R")


class Command(ABC, Generic[R]):
    @abstractmethod
    def render(self) -> str:
        raise NotImplementedError

    @classmethod
    def parse(cls, output: str) -> R:
        raise NotImplementedError(f"{cls.__name__} does not define parse")

    def parse_output(self, output: str) -> R:
        """Interpret the stdout of running ``render()``."""
        return type(self).parse(output)


def render_command(command: Command[R]) -> str:
    return command.render()


def parse_result(command: Union[Command[R], Type[Command[R]]], output: str) -> R:
    """Parse ``output`` for a command value, or for a command type that defines ``parse``."""
    if isinstance(command, Command):
        return command.parse_output(output)
    return command.parse(output)


@dataclass(frozen=True)
class GenericCommand(Command[str]):
    """Arbitrary one-line shell command. Result is the raw stdout."""

    text: str

    def __post_init__(self) -> None:
        trimmed = (self.text or "").strip()
        if not trimmed:
            raise ValueError("command must not be empty")
        if "\n" in trimmed:
            raise ValueError("command must be a single line")
        object.__setattr__(self, "text", trimmed)

    @classmethod
    def create(cls, text: str) -> Optional["GenericCommand"]:
        """Like the constructor, but ``None`` for empty or multi-line text."""
        try:
            return cls(text)
        except ValueError:
            return None

    def render(self) -> str:
        return self.text

    @classmethod
    def parse(cls, output: str) -> str:
        return output


@dataclass(frozen=True)
class Cd(Command[R]):
    """Run ``command`` from inside ``path``; parsed like ``command`` itself."""

    path: Union[str, PurePosixPath]
    command: Command[R]

    def render(self) -> str:
        return f"(cd {shlex.quote(str(self.path))} && {self.command.render()})"

    def parse_output(self, output: str) -> R:
        return self.command.parse_output(output)
