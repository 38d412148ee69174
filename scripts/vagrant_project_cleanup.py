#!/usr/bin/env python3
"""
Vagrant Project Cleanup (libvirt)

Goal: Remove what a crashed or partial `vagrant destroy` left behind for ONE project.

Only libvirt domains and volumes whose name starts with "<project_dirname>_" are
touched. Refuses to run unless the current directory holds a Vagrantfile.
Dry run unless --force.

Usage:
  ./vagrant_project_cleanup.py
  ./vagrant_project_cleanup.py --force
  ./vagrant_project_cleanup.py --pool default --uri qemu:///system
  ./vagrant_project_cleanup.py --quiet
"""

from __future__ import annotations

import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    script_dir = Path(__file__).resolve().parent
    if str(script_dir) not in sys.path:
        sys.path.insert(0, str(script_dir))


def main() -> int:
    _bootstrap_import_path()
    from libvirt_cleanup.main import main_project  # type: ignore

    return main_project(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main())
