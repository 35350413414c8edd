"""
YAML plans: a target plus an ordered list of steps, turned into a run.

    target: {host: example.com, port: 2222}   # omit for a local run
    steps:
      - run: "git -C /srv/app pull"
      - run: "make"
        cd: /srv/app
      - copy_file: {src: /etc/app.conf, dest: /srv/app/app.conf}
      - copy_dir: {src: /build/static, dest: /srv/app/static}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, List, Tuple, Union

import yaml

from .commands import Cd, Command, GenericCommand, render_command
from .engine import Computation, Session, sequence
from .models import PlanModel, StepModel
from .transport import copy_dir, copy_dir_args, copy_file, copy_file_args

logger = logging.getLogger(__name__)


def load_plan(path: Union[str, Path]) -> PlanModel:
    """Read and validate a plan file. Raises FileNotFoundError, ValueError or ValidationError."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Plan file not found: {p}")
    with open(p, "r") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as ex:
            raise ValueError(f"Invalid YAML in {p}: {ex}") from ex
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Plan {p} must be a mapping with 'target' and 'steps'")
    plan = PlanModel.model_validate(raw)
    logger.debug(f"loaded plan {p} with {len(plan.steps)} steps")
    return plan


def step_command(step: StepModel) -> Command[str]:
    cmd = GenericCommand(step.run or "")
    return Cd(step.cd, cmd) if step.cd else cmd


def build_step(step: StepModel) -> Callable[[Session], Any]:
    if step.run is not None:
        cmd = step_command(step)
        return lambda s: s.exec(cmd)
    if step.copy_file is not None:
        spec = step.copy_file
        return lambda s: copy_file(s, spec.src, spec.dest)
    spec = step.copy_dir
    return lambda s: copy_dir(s, spec.src, spec.dest)


def build_computation(plan: PlanModel) -> Computation[List[Any]]:
    return sequence(*(build_step(step) for step in plan.steps))


def plan_rows(plan: PlanModel) -> List[Tuple[int, str, str]]:
    """(index, kind, display text) per step, as the run would print them."""
    probe = Session(plan.to_config())
    rows: List[Tuple[int, str, str]] = []
    for i, step in enumerate(plan.steps, start=1):
        if step.run is not None:
            text = render_command(step_command(step))
        elif step.copy_file is not None:
            text = "scp " + " ".join(copy_file_args(probe, step.copy_file.src, step.copy_file.dest))
        else:
            text = "scp " + " ".join(copy_dir_args(probe, step.copy_dir.src, step.copy_dir.dest))
        rows.append((i, step.kind, text))
    return rows
