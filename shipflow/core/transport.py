"""
scp transfers from the local filesystem to the run's target.

Under a local target the host prefix and port flag are omitted, so the copy
degenerates to a same-host ``scp`` between two local paths.
"""

from __future__ import annotations

import logging
import os
from pathlib import PurePath
from typing import List, Union

from .engine import Session

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]


def _abs(path: PathLike) -> str:
    p = str(path)
    if not os.path.isabs(p):
        raise ValueError(f"path must be absolute: {p}")
    return p


def _abs_dir(path: PathLike) -> str:
    p = _abs(path)
    return p if p.endswith("/") else p + "/"


def scp_args(session: Session, src: str, dest: str, extra: List[str]) -> List[str]:
    opts = session.config.ssh_options
    port_args: List[str] = [] if opts is None else ["-P", str(opts.port)]
    host_prefix = "" if opts is None else f"{opts.host}:"
    return [*extra, *port_args, src, host_prefix + dest]


def copy_file_args(session: Session, src: PathLike, dest: PathLike) -> List[str]:
    return scp_args(session, _abs(src), _abs(dest), ["-q"])


def copy_dir_args(session: Session, src: PathLike, dest: PathLike) -> List[str]:
    return scp_args(session, _abs_dir(src), _abs_dir(dest), ["-qr"])


def copy_file(session: Session, src: PathLike, dest: PathLike) -> None:
    """Copy a single file to ``dest`` on the target."""
    _scp(session, copy_file_args(session, src, dest))


def copy_dir(session: Session, src: PathLike, dest: PathLike) -> None:
    """Copy a directory tree recursively to ``dest`` on the target."""
    _scp(session, copy_dir_args(session, src, dest))


def _scp(session: Session, args: List[str]) -> None:
    logger.debug(f"scp {args[-2]} -> {args[-1]}")
    session.exec_raw("scp", args, "scp " + " ".join(args))
