"""
Execution engine: run shell steps locally or over ssh, stop at the first failure.

A run is a callable taking a ``Session``. The session carries the read-only
target ``Config`` and the subprocess primitive; any step that fails raises
``Failure``, which unwinds straight to the driver so no later step executes.

    def deploy(s: Session):
        s.exec(GenericCommand("mkdir -p /srv/app"))
        copy_dir(s, "/build/app", "/srv/app")
        return s.exec(GenericCommand("cat /srv/app/VERSION"))

    run_engine(Config.remote("example.com", 2222), deploy)

Every child process is blocking and has no timeout; a hung child hangs the run.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Any, Callable, List, NoReturn, Optional, TextIO, TypeVar, Union

from .commands import Command, render_command
from .errors import Failure, RunOutcome
from .models import Config, SshOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

LINE_WIDTH = 75
# Exit status reported when the program itself cannot be started (shell convention).
SPAWN_FAILED = 127

Runner = Callable[[List[str]], "subprocess.CompletedProcess[str]"]
Computation = Callable[["Session"], T]


def run_process(argv: List[str]) -> "subprocess.CompletedProcess[str]":
    """Run argv to completion with no stdin; capture stdout/stderr as text."""
    return subprocess.run(
        argv,
        shell=False,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )


def format_line(label: str) -> str:
    """``*** <label> `` followed by '*' fill; no fill once the label reaches LINE_WIDTH."""
    return f"*** {label} " + "*" * (LINE_WIDTH - len(label))


class Session:
    """Context handed to every step of a run."""

    def __init__(
        self,
        config: Config,
        runner: Optional[Runner] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self._config = config
        self._runner = runner or run_process
        self._out = out
        self._err = err

    @property
    def config(self) -> Config:
        return self._config

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def fail(self, code: int, message: Optional[str] = None) -> NoReturn:
        raise Failure(code, message)

    def exec_raw(self, program: str, args: List[str], display: str) -> str:
        """Run one program to completion and return its stdout, or fail with its exit status."""
        print(format_line(self._config.host_label), file=self.out)
        print(f"$ {display}", file=self.out)
        argv = [program, *args]
        logger.debug(f"spawn {argv}")
        try:
            res = self._runner(argv)
        except OSError as ex:
            logger.info(f"could not start {program}: {ex}")
            self.fail(SPAWN_FAILED, f"{program}: {ex.strerror or ex}")
        stdout = res.stdout or ""
        stderr = res.stderr or ""
        logger.debug(f"done rc={res.returncode}: {display}")
        if stdout:
            print(stdout, file=self.out)
        if stderr:
            print(stderr, file=self.err)
        if res.returncode == 0:
            return stdout
        logger.info(f"failed rc={res.returncode}: {display}")
        self.fail(res.returncode)

    def exec(self, command: Command[R]) -> R:
        """Run a typed command on the configured target and parse its stdout."""
        cmd = render_command(command)
        opts = self._config.ssh_options
        if opts is None:
            prog, args = "bash", ["-c", cmd]
        else:
            prog, args = "ssh", [opts.host, "-p", str(opts.port), cmd]
        return command.parse_output(self.exec_raw(prog, args, cmd))


def sequence(*steps: Callable[[Session], Any]) -> Computation[List[Any]]:
    """Computation running ``steps`` in order and collecting their values."""

    def _run(session: Session) -> List[Any]:
        return [step(session) for step in steps]

    return _run


def _as_config(target: Union[Config, SshOptions, None]) -> Config:
    if target is None:
        return Config()
    if isinstance(target, SshOptions):
        return Config(ssh_options=target)
    return target


def run(
    target: Union[Config, SshOptions, None],
    computation: Computation[T],
    *,
    runner: Optional[Runner] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> RunOutcome:
    """Run ``computation`` once and return its outcome instead of exiting."""
    session = Session(_as_config(target), runner=runner, out=out, err=err)
    try:
        value = computation(session)
    except Failure as failure:
        logger.info(f"run aborted: {failure}")
        return RunOutcome(failure=failure)
    return RunOutcome(value=value)


def run_engine(
    target: Union[Config, SshOptions, None],
    computation: Computation[T],
    *,
    runner: Optional[Runner] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> T:
    """Top-level driver: print ``Success.`` and return the value, or exit with the failure's code."""
    outcome = run(target, computation, runner=runner, out=out, err=err)
    if outcome.failure is not None:
        if outcome.failure.message is not None:
            print(outcome.failure.message, file=err if err is not None else sys.stderr)
        sys.exit(outcome.failure.exit_code)
    print("Success.", file=out if out is not None else sys.stdout)
    return outcome.value
