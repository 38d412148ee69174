#!/usr/bin/env python3
"""
Nuke All Vagrant (libvirt)

Goal: Reset a lab host after crashed or half-finished `vagrant destroy` runs so the
      next `vagrant up` starts clean.

Destroys every environment in vagrant's global index, then every libvirt domain,
then every volume in the pool except base box images (`*_vagrant_box_image_*`)
and ISOs. Dry run unless --force.

Usage:
  ./scripts/nuke_all_vagrant.py
  ./scripts/nuke_all_vagrant.py --force
  ./scripts/nuke_all_vagrant.py --force --pool images --quiet
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
    from libvirt_cleanup.main import main_global  # type: ignore

    return main_global(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main())
