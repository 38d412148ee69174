from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .model import Ctx
from .report import Reporter

_ENV_ID = re.compile(r"^[0-9a-f]{7}$")


@dataclass(frozen=True)
class VagrantResult:
    rc: int
    stdout: str
    stderr: str


def parse_global_status_ids(out: str) -> List[str]:
    """Environment ids are the seven hex chars leading each row of `vagrant global-status`."""
    ids: List[str] = []
    for line in out.splitlines():
        fields = line.split()
        if fields and _ENV_ID.match(fields[0]):
            ids.append(fields[0])
    return ids


class Vagrant:
    def __init__(self, *, cwd: Optional[Path] = None, binary: str = "vagrant"):
        self._cwd = cwd
        self._binary = binary

    def run(self, args: Sequence[str]) -> VagrantResult:
        try:
            p = subprocess.run(
                [self._binary, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                cwd=self._cwd,
            )
        except OSError as e:
            return VagrantResult(rc=127, stdout="", stderr=str(e))
        return VagrantResult(
            rc=p.returncode, stdout=p.stdout.strip(), stderr=p.stderr.strip()
        )


def _best_effort(vagrant: Vagrant, reporter: Reporter, args: Sequence[str]) -> VagrantResult:
    res = vagrant.run(args)
    if res.rc != 0:
        tail = res.stderr.splitlines()[-1] if res.stderr else ""
        reporter.warn(f"vagrant {' '.join(args)} exited {res.rc} (ignored) {tail}".rstrip())
    return res


def prune(ctx: Ctx, vagrant: Vagrant, reporter: Reporter) -> None:
    if not ctx.force:
        reporter.dry_run("vagrant global-status --prune")
        return
    _best_effort(vagrant, reporter, ["global-status", "--prune"])


def destroy_project(ctx: Ctx, vagrant: Vagrant, reporter: Reporter) -> None:
    """Ask vagrant to tear down the environment defined in the project directory."""
    if not ctx.force:
        reporter.dry_run("vagrant destroy -f")
        return
    _best_effort(vagrant, reporter, ["destroy", "-f"])


def destroy_all_known(ctx: Ctx, vagrant: Vagrant, reporter: Reporter) -> None:
    """Destroy every environment in vagrant's global index, pruning stale entries first and last."""
    if not ctx.force:
        reporter.dry_run("vagrant global-status --prune")
        reporter.dry_run("vagrant destroy -f <all envs>")
        return

    _best_effort(vagrant, reporter, ["global-status", "--prune"])
    env_ids = parse_global_status_ids(vagrant.run(["global-status"]).stdout)
    if not env_ids:
        reporter.line("No Vagrant environments found.")
    for env_id in env_ids:
        reporter.line(f"Destroying Vagrant env: {env_id}")
        _best_effort(vagrant, reporter, ["destroy", "-f", env_id])
    _best_effort(vagrant, reporter, ["global-status", "--prune"])
