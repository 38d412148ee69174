"""Shared fixtures: an in-memory libvirt host behind the virsh adapter, and a recording vagrant."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

import pytest

from libvirt_cleanup.model import Ctx
from libvirt_cleanup.report import Reporter
from libvirt_cleanup.vagrant import Vagrant, VagrantResult
from libvirt_cleanup.virsh import Virsh, VirshResult

MUTATING = {"destroy", "undefine", "vol-delete"}


def _ok(stdout: str = "") -> VirshResult:
    return VirshResult(rc=0, stdout=stdout, stderr="")


def _err(stderr: str) -> VirshResult:
    return VirshResult(rc=1, stdout="", stderr=stderr)


class FakeVirsh(Virsh):
    """
    Interprets the argv the real adapter sends to `virsh` against an in-memory
    host. Domain states use virsh wording ("running", "shut off", "paused").
    """

    def __init__(
        self,
        domains: Optional[Dict[str, str]] = None,
        pools: Optional[Dict[str, List[str]]] = None,
        *,
        reachable: bool = True,
        fail: Sequence[Tuple[str, ...]] = (),
    ):
        super().__init__("qemu:///system")
        self.domains: Dict[str, str] = dict(domains or {})
        self.pools: Dict[str, List[str]] = {k: list(v) for k, v in (pools or {}).items()}
        self.reachable = reachable
        self.fail: Set[Tuple[str, ...]] = set(fail)
        self.calls: List[Tuple[str, ...]] = []

    @property
    def mutations(self) -> List[Tuple[str, ...]]:
        return [c for c in self.calls if c[0] in MUTATING]

    def _names(self, state: Optional[str] = None) -> str:
        return "\n".join(n for n, s in self.domains.items() if state is None or s == state)

    def _vol_table(self, pool: str) -> str:
        rows = [" Name                 Path", "-" * 60]
        rows += [f" {v:<20} /var/lib/libvirt/images/{v}" for v in self.pools[pool]]
        return "\n".join(rows)

    def run(self, args: Sequence[str]) -> VirshResult:
        call = tuple(args)
        self.calls.append(call)
        if not self.reachable:
            return _err("error: failed to connect to the hypervisor")
        if call in self.fail:
            return _err(f"error: injected failure for {' '.join(call)}")

        verb = call[0]
        if call == ("uri",):
            return _ok(self.uri)
        if call == ("list", "--all", "--name"):
            return _ok(self._names())
        if call == ("list", "--name", "--state-running"):
            return _ok(self._names("running"))
        if call == ("list", "--name", "--state-shutoff"):
            return _ok(self._names("shut off"))
        if verb == "pool-info":
            return _ok("Name: " + call[1]) if call[1] in self.pools else _err("error: Storage pool not found")
        if verb == "vol-list":
            return _ok(self._vol_table(call[1])) if call[1] in self.pools else _err("error: Storage pool not found")
        if verb == "destroy":
            if self.domains.get(call[1]) != "running":
                return _err("error: Requested operation is not valid: domain is not running")
            self.domains[call[1]] = "shut off"
            return _ok(f"Domain '{call[1]}' destroyed")
        if verb == "undefine":
            if self.domains.pop(call[1], None) is None:
                return _err(f"error: failed to get domain '{call[1]}'")
            return _ok(f"Domain '{call[1]}' has been undefined")
        if verb == "vol-delete":
            vols = self.pools.get(call[3], [])
            if call[1] not in vols:
                return _err(f"error: failed to get vol '{call[1]}'")
            vols.remove(call[1])
            return _ok(f"Vol {call[1]} deleted")
        return _err(f"error: unknown command: {verb}")


class FakeVagrant(Vagrant):
    def __init__(self, global_status: str = "", *, rc: int = 0):
        super().__init__()
        self.global_status = global_status
        self.rc = rc
        self.calls: List[Tuple[str, ...]] = []

    def run(self, args: Sequence[str]) -> VagrantResult:
        self.calls.append(tuple(args))
        if tuple(args) == ("global-status",):
            return VagrantResult(rc=0, stdout=self.global_status, stderr="")
        return VagrantResult(rc=self.rc, stdout="", stderr="" if self.rc == 0 else "vagrant blew up")


class CapturingReporter(Reporter):
    def __init__(self, quiet: bool = False):
        super().__init__(quiet, out=io.StringIO(), err=io.StringIO())

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()


def make_ctx(tmp_path: Path, *, scope: str = "global", force: bool = False, quiet: bool = False, pool: str = "default") -> Ctx:
    return Ctx(
        scope=scope,
        force=force,
        quiet=quiet,
        pool=pool,
        uri="qemu:///system",
        lock_path=tmp_path / "test.lock",
        project_dir=tmp_path / "lab1" if scope == "project" else None,
    )


@pytest.fixture
def reporter() -> CapturingReporter:
    return CapturingReporter()


@pytest.fixture
def lab_host() -> FakeVirsh:
    """Two lab1 domains (one running), one unrelated domain, and a mixed pool."""
    return FakeVirsh(
        domains={"lab1_web": "running", "lab1_db": "shut off", "other_db": "running"},
        pools={
            "default": [
                "lab1_web_disk",
                "base_vagrant_box_image_9",
                "other_disk",
                "installer.iso",
            ]
        },
    )
