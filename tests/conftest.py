"""Shared pytest fixtures."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Tuple

import pytest


class FakeRunner:
    """Stands in for ``run_process``: records argv and replays queued results."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self._results: List[Tuple[int, str, str]] = []

    def push(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        self._results.append((returncode, stdout, stderr))
        return self

    def __call__(self, argv: List[str]) -> "subprocess.CompletedProcess[str]":
        self.calls.append(list(argv))
        rc, out, err = self._results.pop(0) if self._results else (0, "", "")
        return subprocess.CompletedProcess(argv, rc, out, err)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
