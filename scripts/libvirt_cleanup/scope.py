from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Union

# Vagrant's libvirt provider uploads boxes as "<box>_vagrant_box_image_<version>".
DEFAULT_PROTECT_PATTERNS: FrozenSet[str] = frozenset({"*_vagrant_box_image_*", "*.iso"})

PROJECT_MARKER = "Vagrantfile"


@dataclass(frozen=True)
class GlobalExclusion:
    protect_patterns: FrozenSet[str] = DEFAULT_PROTECT_PATTERNS

    def is_protected(self, name: str) -> bool:
        lowered = name.lower()
        return any(fnmatch.fnmatchcase(lowered, p.lower()) for p in self.protect_patterns)

    def matches_domain(self, name: str) -> bool:
        return True

    def matches_volume(self, name: str) -> bool:
        return not self.is_protected(name)

    def describe(self) -> str:
        return "all (protecting " + ", ".join(sorted(self.protect_patterns)) + ")"


@dataclass(frozen=True)
class PrefixMatch:
    project: str

    def __post_init__(self) -> None:
        if not self.project:
            raise ValueError("project name must not be empty")

    @property
    def prefix(self) -> str:
        return f"{self.project}_"

    def matches_domain(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def matches_volume(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def describe(self) -> str:
        return f"prefix '{self.prefix}'"


ScopeRule = Union[GlobalExclusion, PrefixMatch]


def project_scope(project_dir: Path) -> PrefixMatch:
    """
    Derive the prefix scope from a project directory. The directory must hold a
    Vagrantfile; anything else would silently match the wrong resources.
    """
    if not (project_dir / PROJECT_MARKER).is_file():
        raise SystemExit(
            f"ERROR: no {PROJECT_MARKER} found in {project_dir}; "
            "cd into the project directory first"
        )
    project = project_dir.resolve().name
    if not project:
        raise SystemExit(f"ERROR: cannot derive a project prefix from {project_dir}")
    return PrefixMatch(project=project)
