from __future__ import annotations

from typing import Sequence

from .model import Action, ActionRecord, Ctx, Status, Summary, describe
from .report import Reporter
from .virsh import Virsh


class Doer:
    def __init__(self, ctx: Ctx, virsh: Virsh, summary: Summary, reporter: Reporter):
        self.ctx = ctx
        self.virsh = virsh
        self.summary = summary
        self.reporter = reporter

    def plan(self, action: Action) -> ActionRecord:
        self.reporter.dry_run(describe(action))
        rec = ActionRecord(action=action, status=Status.SKIPPED)
        self.summary.add_action(rec)
        return rec

    def run_allow_fail(self, action: Action) -> ActionRecord:
        """Issue one action; a failure is recorded and reported, never raised."""
        if not self.ctx.force:
            return self.plan(action)

        self.reporter.execute(describe(action))
        res = self.virsh.run(action.argv())
        rec = ActionRecord(
            action=action,
            status=Status.SUCCEEDED if res.rc == 0 else Status.FAILED,
            rc=res.rc,
            stderr=res.stderr,
        )
        if rec.status is Status.FAILED:
            self.reporter.failed(rec)
        self.summary.add_action(rec)
        return rec

    def execute(self, plan: Sequence[Action]) -> Summary:
        # Sequential on purpose: the transcript is the audit trail.
        for action in plan:
            self.run_allow_fail(action)
        self.summary.completed = True
        return self.summary
