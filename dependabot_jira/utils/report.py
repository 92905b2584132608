#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Run result aggregation – tallies per-item results from both sync phases
and renders the summary line, the action outputs, and the log / step-summary
report.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import ItemResult, Outcome

NO_ALERTS_SUMMARY = "No alerts to process"


@dataclass
class SyncReport:
    dry_run: bool = False
    created: int = 0
    updated: int = 0
    closed: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    results: list[ItemResult] = field(default_factory=list)

    def _tally(self, result: ItemResult) -> None:
        self.results.append(result)
        if not result.ok:
            self.failed += 1
        elif result.outcome == Outcome.CREATED:
            self.created += 1
        elif result.outcome == Outcome.UPDATED:
            self.updated += 1
        elif result.outcome == Outcome.CLOSED:
            self.closed += 1
        elif result.outcome == Outcome.SKIPPED:
            self.skipped += 1

    def add_alert_results(self, results: list[ItemResult]) -> None:
        """Record create/update phase results; every alert counts as processed."""
        for result in results:
            self.processed += 1
            self._tally(result)

    def add_close_results(self, results: list[ItemResult]) -> None:
        for result in results:
            self._tally(result)

    def summary(self) -> str:
        if self.processed == 0 and self.closed == 0:
            return NO_ALERTS_SUMMARY
        if self.dry_run:
            return (
                f"DRY RUN: Would create {self.created} issues, update {self.updated} issues "
                f"and close {self.closed} issues"
            )
        return (
            f"Created {self.created} new issues, updated {self.updated} existing issues "
            f"and closed {self.closed} resolved issues"
        )

    def outputs(self) -> dict[str, str]:
        return {
            "issues-created": str(self.created),
            "issues-updated": str(self.updated),
            "issues-closed": str(self.closed),
            "alerts-processed": str(self.processed),
            "summary": self.summary(),
        }

    def print_report(self) -> None:
        print("\nSummary:")
        print(f"- Alerts processed: {self.processed}")
        print(f"- Issues created: {self.created}")
        print(f"- Issues updated: {self.updated}")
        print(f"- Issues closed: {self.closed}")
        if self.skipped:
            print(f"- Skipped: {self.skipped}")
        if self.failed:
            print(f"- Failed (see errors above): {self.failed}")
        if self.dry_run:
            print("- Mode: DRY RUN (no actual changes made)")

    def to_markdown(self) -> str:
        lines = [
            "## Dependabot Jira Sync",
            "",
            self.summary(),
            "",
            "| Metric | Count |",
            "| --- | --- |",
            f"| Alerts processed | {self.processed} |",
            f"| Issues created | {self.created} |",
            f"| Issues updated | {self.updated} |",
            f"| Issues closed | {self.closed} |",
            f"| Failed | {self.failed} |",
        ]
        return "\n".join(lines) + "\n"
