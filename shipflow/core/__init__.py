"""
Core of the execution engine: command protocol, run context, scp transport, plans.
"""

from .commands import Cd, Command, GenericCommand, parse_result, render_command
from .engine import Session, run, run_engine, run_process, sequence
from .errors import Failure, RunOutcome
from .models import Config, PlanModel, SshOptions, StepModel
from .plan import build_computation, load_plan, plan_rows
from .transport import copy_dir, copy_file

__all__ = [
    "Command",
    "GenericCommand",
    "Cd",
    "render_command",
    "parse_result",
    "Session",
    "run",
    "run_engine",
    "run_process",
    "sequence",
    "Failure",
    "RunOutcome",
    "Config",
    "SshOptions",
    "PlanModel",
    "StepModel",
    "load_plan",
    "build_computation",
    "plan_rows",
    "copy_file",
    "copy_dir",
]
