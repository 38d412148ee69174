from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Sequence


class VirshError(RuntimeError):
    pass


@dataclass(frozen=True)
class VirshResult:
    rc: int
    stdout: str
    stderr: str


def _fmt(args: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in args)


def parse_name_list(out: str) -> List[str]:
    """Parse `--name` style output: one name per line, blank lines ignored."""
    return [line.strip() for line in out.splitlines() if line.strip()]


def parse_vol_list(out: str) -> List[str]:
    """
    Parse the table printed by `virsh vol-list <pool>`:

         Name                 Path
        ------------------------------------------------------------
         lab1_web.img         /var/lib/libvirt/images/lab1_web.img

    The header and the dashed separator are skipped; the first column of every
    remaining non-empty row is the volume name.
    """
    names: List[str] = []
    seen_separator = False
    for line in out.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if not seen_separator:
            if set(stripped) == {"-"}:
                seen_separator = True
            continue
        names.append(stripped.split()[0])
    return names


class Virsh:
    def __init__(self, uri: str = "", *, binary: str = "virsh"):
        self.uri = uri
        self._binary = binary

    def _cmd(self, args: Sequence[str]) -> List[str]:
        cmd = [self._binary]
        if self.uri:
            cmd += ["-c", self.uri]
        return [*cmd, *args]

    def run(self, args: Sequence[str]) -> VirshResult:
        try:
            p = subprocess.run(
                self._cmd(args),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            return VirshResult(rc=127, stdout="", stderr=str(e))
        return VirshResult(
            rc=p.returncode, stdout=p.stdout.strip(), stderr=p.stderr.strip()
        )

    def text(self, args: Sequence[str]) -> str:
        res = self.run(args)
        if res.rc != 0:
            raise VirshError(f"virsh {_fmt(args)} failed: {res.stderr}")
        return res.stdout
