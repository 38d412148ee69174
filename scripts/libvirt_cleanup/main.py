from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .discover import collect_inventory
from .doer import Doer
from .guards import connectivity_guard, default_lock_path, require_tools, run_lock
from .model import Ctx, Summary
from .plan import build_plan
from .report import Reporter, print_header, print_summary
from .scope import GlobalExclusion, ScopeRule, project_scope
from .vagrant import Vagrant, destroy_all_known, destroy_project, prune
from .virsh import Virsh, VirshError

DEFAULT_URI = "qemu:///system"
DEFAULT_POOL = "default"
REQUIRED_TOOLS = ("vagrant", "virsh")

GLOBAL_PROG = "libvirt-nuke-all"
PROJECT_PROG = "libvirt-project-cleanup"


def run(ctx: Ctx, scope: ScopeRule, virsh: Virsh, vagrant: Vagrant, reporter: Reporter) -> Summary:
    """One cleanup pass; the caller holds the run lock."""
    print_header(ctx, reporter)
    connectivity_guard(virsh)

    if ctx.scope == "global":
        reporter.section("Step 1: destroy all known Vagrant environments (best effort)")
        destroy_all_known(ctx, vagrant, reporter)
    else:
        reporter.section("Step 1: vagrant destroy -f (best effort, project-local)")
        destroy_project(ctx, vagrant, reporter)

    reporter.section(f"Step 2: libvirt domains and volumes in pool '{ctx.pool}' matching {scope.describe()}")
    try:
        inventory = collect_inventory(virsh, ctx.pool)
    except VirshError as e:
        raise SystemExit(f"ERROR: libvirt inventory failed: {e}") from e

    summary = Summary()
    for dom in inventory.domains:
        if scope.matches_domain(dom.name):
            summary.domains_seen.append(dom.name)
            reporter.line(f"Domain: {dom.name} (state: {dom.state.value})")
    if not inventory.pool_found:
        reporter.line(f"Pool '{ctx.pool}' not found (skipping volume cleanup).")
    for vol in inventory.volumes:
        if scope.matches_volume(vol.name):
            summary.volumes_seen.append(vol.name)
            reporter.line(f"Volume: {vol.name}")
    if not (summary.domains_seen or summary.volumes_seen):
        reporter.line("No matching domains or volumes found.")

    plan = build_plan(inventory, scope)
    if plan:
        reporter.section("Step 3: apply plan" if ctx.force else "Step 3: plan (dry run, use --force to delete)")
    Doer(ctx=ctx, virsh=virsh, summary=summary, reporter=reporter).execute(plan)

    if ctx.scope == "project":
        reporter.section("Step 4: vagrant global-status --prune")
        prune(ctx, vagrant, reporter)

    print_summary(ctx, summary, reporter)
    reporter.line("")
    reporter.line("Done." if ctx.scope == "project" else "Done. Run 'vagrant up' to start fresh.")
    return summary


def _parser(prog: str, description: str, *, with_uri: bool) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--force",
        action="store_true",
        help="actually delete; without this it is a dry run",
    )
    parser.add_argument("--quiet", action="store_true", help="suppress normal output")
    parser.add_argument(
        "--pool",
        default=DEFAULT_POOL,
        metavar="NAME",
        help=f"storage pool name (default: {DEFAULT_POOL})",
    )
    if with_uri:
        parser.add_argument(
            "--uri",
            default=DEFAULT_URI,
            help=f"libvirt connection URI (default: {DEFAULT_URI})",
        )
    return parser


def _execute(ctx: Ctx, scope: ScopeRule, reporter: Reporter) -> int:
    try:
        with run_lock(ctx.lock_path):
            run(ctx, scope, Virsh(ctx.uri), Vagrant(cwd=ctx.project_dir), reporter)
    except KeyboardInterrupt:
        reporter.error("interrupted")
        return 130
    return 0


def main_global(argv: List[str], *, env: Optional[dict] = None) -> int:
    parser = _parser(
        GLOBAL_PROG,
        "Destroy ALL Vagrant environments, libvirt domains and orphaned volumes "
        "(base box images and ISOs are kept). Dry run unless --force.",
        with_uri=False,
    )
    args = parser.parse_args(argv[1:])

    require_tools(REQUIRED_TOOLS)
    ctx = Ctx(
        scope="global",
        force=args.force,
        quiet=args.quiet,
        pool=args.pool,
        uri=DEFAULT_URI,
        lock_path=default_lock_path(GLOBAL_PROG, env),
    )
    return _execute(ctx, GlobalExclusion(), Reporter(quiet=ctx.quiet))


def main_project(argv: List[str], *, env: Optional[dict] = None, cwd: Optional[Path] = None) -> int:
    parser = _parser(
        PROJECT_PROG,
        "Project-scoped cleanup: only libvirt domains and volumes named "
        "'<project_dirname>_*'. Must run from a directory holding a Vagrantfile. "
        "Dry run unless --force.",
        with_uri=True,
    )
    args = parser.parse_args(argv[1:])

    require_tools(REQUIRED_TOOLS)
    project_dir = Path(cwd or os.getcwd()).resolve()
    scope = project_scope(project_dir)
    ctx = Ctx(
        scope="project",
        force=args.force,
        quiet=args.quiet,
        pool=args.pool,
        uri=args.uri,
        lock_path=default_lock_path(PROJECT_PROG, env),
        project_dir=project_dir,
    )
    return _execute(ctx, scope, Reporter(quiet=ctx.quiet))


def cli_global() -> int:
    return main_global(sys.argv)


def cli_project() -> int:
    return main_project(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main_global(sys.argv))
