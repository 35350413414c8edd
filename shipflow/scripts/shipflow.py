#!/usr/bin/env python3
"""
shipflow: minimal CLI for the execution engine

Commands:
  shipflow run PLAN            # run a YAML plan (target + steps)
  shipflow exec CMD...         # run one shell command locally or over ssh
  shipflow copy SRC DEST       # scp a file (or --dir a directory) to the target
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from shipflow.core.commands import Cd, GenericCommand
from shipflow.core.engine import run_engine
from shipflow.core.models import Config, SshOptions
from shipflow.core.plan import build_computation, load_plan, plan_rows
from shipflow.core.transport import copy_dir, copy_file
from shipflow.utils.logging_config import setup_logging

logger = logging.getLogger("shipflow")

# Exit status for unusable input (bad plan, bad arguments); distinct from run failures.
USAGE_ERROR = 2


def _resolve_target(args: argparse.Namespace, plan_target: Optional[SshOptions] = None) -> Config:
    """--host/--port override whatever target the plan names."""
    host = getattr(args, "host", None)
    port = getattr(args, "port", None)
    if host:
        return Config(ssh_options=SshOptions(host=host, port=port or 22))
    if port is not None and plan_target is None:
        raise ValueError("--port needs a remote host (--host or a plan target)")
    if port is not None:
        return Config(ssh_options=SshOptions(host=plan_target.host, port=port))
    return Config(ssh_options=plan_target)


def _render_plan(plan, config: Config) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"{config.host_label} ({len(plan.steps)} steps)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("kind", style="cyan")
    table.add_column("command")
    for idx, kind, text in plan_rows(plan.model_copy(update={"target": config.ssh_options})):
        table.add_row(str(idx), kind, text)
    Console().print(table)


def cmd_run(args: argparse.Namespace) -> int:
    plan = load_plan(args.plan)
    config = _resolve_target(args, plan.target)
    if args.dry_run:
        _render_plan(plan, config)
        return 0
    logger.info(f"running {len(plan.steps)} steps on {config.host_label}")
    run_engine(config, build_computation(plan))
    return 0


def cmd_exec(args: argparse.Namespace) -> int:
    cmd = GenericCommand(" ".join(args.command))
    step = Cd(args.cd, cmd) if args.cd else cmd
    run_engine(_resolve_target(args), lambda s: s.exec(step))
    return 0


def cmd_copy(args: argparse.Namespace) -> int:
    copy = copy_dir if args.dir else copy_file
    run_engine(_resolve_target(args), lambda s: copy(s, args.src, args.dest))
    return 0


def _target_args() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--host", help="Remote host; omit to run locally")
    common.add_argument("--port", type=int, default=None, help="ssh port (default: 22)")
    common.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    common.add_argument("--log-file", default=None, help="Also write log records to this file")
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shipflow", description="Run shell steps locally or over ssh")
    sub = parser.add_subparsers(dest="cmd")
    common = _target_args()

    p_run = sub.add_parser("run", parents=[common], help="Run a YAML plan")
    p_run.add_argument("plan", help="Path to plan YAML")
    p_run.add_argument("--dry-run", default=False, action="store_true", help="Show the steps and exit")
    p_run.set_defaults(func=cmd_run)

    p_exec = sub.add_parser("exec", parents=[common], help="Run one shell command")
    p_exec.add_argument("command", nargs="+", help="Command text (joined with spaces)")
    p_exec.add_argument("--cd", default=None, help="Directory to run the command in")
    p_exec.set_defaults(func=cmd_exec)

    p_copy = sub.add_parser("copy", parents=[common], help="Copy a file or directory to the target")
    p_copy.add_argument("src", help="Absolute local path")
    p_copy.add_argument("dest", help="Absolute path on the target")
    p_copy.add_argument("--dir", default=False, action="store_true", help="Copy a directory recursively")
    p_copy.set_defaults(func=cmd_copy)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    setup_logging(level=args.log_level, log_file=args.log_file, console_level=args.log_level)
    try:
        return int(args.func(args))
    except (FileNotFoundError, ValueError, ValidationError) as ex:
        print(f"shipflow: error: {ex}", file=sys.stderr)
        return USAGE_ERROR


if __name__ == "__main__":
    sys.exit(main())
