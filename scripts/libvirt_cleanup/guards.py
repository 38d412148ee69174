from __future__ import annotations

import fcntl
import os
import shutil
import signal
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Optional, Sequence

from .virsh import Virsh, VirshError


def default_lock_path(prog: str, env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    tmpdir = env.get("TMPDIR") or "/tmp"
    return Path(tmpdir) / f"{prog}.lock"


def require_tools(tools: Sequence[str]) -> None:
    for tool in tools:
        if shutil.which(tool) is None:
            raise SystemExit(f"ERROR: required command '{tool}' not found")


def connectivity_guard(virsh: Virsh) -> None:
    try:
        virsh.text(["uri"])
    except VirshError as e:
        raise SystemExit(f"ERROR: cannot reach libvirt at {virsh.uri or '(default)'}: {e}") from e


def _raise_exit(signum, frame) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def run_lock(path: Path) -> Iterator[Path]:
    """
    Exclusive, non-blocking run lock.

    A held lock fails immediately with "another instance is running". The
    flock is dropped when the scope exits by any path; SIGTERM and SIGHUP are
    turned into SystemExit while the lock is held so they unwind this scope
    too. The kernel drops the lock if the process dies outright.
    """
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    except OSError as e:
        raise SystemExit(f"ERROR: cannot open lock file {path}: {e}") from e
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        os.close(fd)
        raise SystemExit(f"ERROR: another instance is running (lock held: {path})")

    previous = {}
    if threading.current_thread() is threading.main_thread():
        for sig in (signal.SIGTERM, signal.SIGHUP):
            previous[sig] = signal.signal(sig, _raise_exit)
    try:
        os.ftruncate(fd, 0)
        os.write(fd, f"{os.getpid()}\n".encode())
        yield path
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)
