from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


@dataclass(frozen=True)
class Ctx:
    scope: str  # global|project
    force: bool
    quiet: bool
    pool: str
    uri: str
    lock_path: Path
    project_dir: Optional[Path] = None

    @property
    def mode_label(self) -> str:
        return "DESTRUCTIVE (--force)" if self.force else "DRY RUN"


class DomainState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    OTHER = "other"


@dataclass(frozen=True)
class Domain:
    name: str
    state: DomainState


@dataclass(frozen=True)
class Volume:
    name: str
    pool: str


@dataclass(frozen=True)
class Inventory:
    domains: List[Domain] = field(default_factory=list)
    volumes: List[Volume] = field(default_factory=list)
    # False when the requested pool is absent; volume cleanup is skipped.
    pool_found: bool = True


@dataclass(frozen=True)
class DestroyDomain:
    name: str
    order: int = 0

    def argv(self) -> List[str]:
        return ["destroy", self.name]


@dataclass(frozen=True)
class UndefineDomain:
    name: str
    order: int = 0

    def argv(self) -> List[str]:
        return ["undefine", self.name]


@dataclass(frozen=True)
class DeleteVolume:
    pool: str
    name: str
    order: int = 0

    def argv(self) -> List[str]:
        return ["vol-delete", self.name, "--pool", self.pool]


Action = Union[DestroyDomain, UndefineDomain, DeleteVolume]


def describe(action: Action) -> str:
    return " ".join(["virsh", *action.argv()])


class Status(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ActionRecord:
    action: Action
    status: Status
    rc: Optional[int] = None
    stderr: str = ""

    @property
    def desc(self) -> str:
        return describe(self.action)


@dataclass
class Summary:
    domains_seen: List[str] = field(default_factory=list)
    volumes_seen: List[str] = field(default_factory=list)
    actions: List[ActionRecord] = field(default_factory=list)
    completed: bool = False

    def add_action(self, rec: ActionRecord) -> None:
        self.actions.append(rec)

    def with_status(self, status: Status) -> List[ActionRecord]:
        return [a for a in self.actions if a.status is status]

    def failed_actions(self) -> List[ActionRecord]:
        return self.with_status(Status.FAILED)

    def executed_actions(self) -> List[ActionRecord]:
        return [a for a in self.actions if a.status is not Status.SKIPPED]
