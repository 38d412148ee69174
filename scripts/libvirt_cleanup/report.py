from __future__ import annotations

import sys
from typing import Optional, TextIO

from .model import ActionRecord, Ctx, Summary, Status


class Reporter:
    """Transcript writer. `quiet` silences stdout only; warnings and errors always reach stderr."""

    def __init__(self, quiet: bool = False, *, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.quiet = quiet
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def line(self, msg: str = "") -> None:
        if not self.quiet:
            print(msg, file=self.out)

    def section(self, title: str) -> None:
        self.line("")
        self.line(f"--- {title}")

    def dry_run(self, desc: str) -> None:
        self.line(f"+ (dry-run) {desc}")

    def execute(self, desc: str) -> None:
        self.line(f"+ {desc}")

    def failed(self, rec: ActionRecord) -> None:
        msg = rec.stderr.splitlines()[-1] if rec.stderr else ""
        self.warn(f"failed: {rec.desc}: rc={rec.rc} {msg}".rstrip())

    def warn(self, msg: str) -> None:
        print(f"  ! {msg}", file=self.err)

    def error(self, msg: str) -> None:
        print(f"ERROR: {msg}", file=self.err)


def print_header(ctx: Ctx, reporter: Reporter) -> None:
    if ctx.scope == "project" and ctx.project_dir is not None:
        reporter.line(f"Project directory: {ctx.project_dir}")
        reporter.line(f"Project prefix:    {ctx.project_dir.name}_")
    reporter.line(f"Libvirt URI:       {ctx.uri}")
    reporter.line(f"Libvirt pool:      {ctx.pool}")
    reporter.line(f"Mode:              {ctx.mode_label}")


def print_summary(ctx: Ctx, summary: Summary, reporter: Reporter) -> None:
    reporter.section("Summary")
    reporter.line(f"- mode: {'force' if ctx.force else 'dry-run'}")
    reporter.line(f"- domains_matched: {len(summary.domains_seen)}")
    reporter.line(f"- volumes_matched: {len(summary.volumes_seen)}")
    reporter.line(f"- actions_planned: {len(summary.actions)}")
    reporter.line(f"- actions_executed: {len(summary.executed_actions())}")
    reporter.line(f"- actions_skipped: {len(summary.with_status(Status.SKIPPED))}")
    reporter.line(f"- actions_succeeded: {len(summary.with_status(Status.SUCCEEDED))}")
    failed = summary.failed_actions()
    reporter.line(f"- actions_failed: {len(failed)}")
    if failed:
        reporter.line("")
        reporter.line("Failed actions:")
        for a in failed[:12]:
            reporter.line(f"- {a.desc}: rc={a.rc}")
