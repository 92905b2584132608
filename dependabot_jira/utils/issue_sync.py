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


"""Core sync orchestration – decides create / update / skip for every
alert, closes tracked Jira issues whose alert has been resolved, and
aggregates the per-item results into a :class:`SyncReport`.

Every alert and every tracked issue is processed in isolation: a failure
is reported and recorded as a failed :class:`ItemResult`, and the run
continues with the next item.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..shared.common import is_verbose, utc_now, vprint
from ..shared.errors import TransitionNotAvailableError, TransportError
from ..shared.models import Ticket
from .alert_parser import parse_alert
from .constants import ALERT_STATE_OPEN, DRY_RUN_ISSUE_KEY, RESOLVED_ALERT_STATES
from .due_date import calculate_due_date
from .issue_builder import build_issue_fields, build_update_comment
from .models import Action, Alert, AlertSource, ItemResult, Outcome, SyncConfig, TicketSystem
from .report import SyncReport
from .severity import filter_by_severity
from .ticket_matcher import extract_alert_id, find_all_open_tracked, find_existing


def decide_action(existing: Ticket | None, update_existing: bool) -> Action:
    if existing is None:
        return Action.CREATE
    if update_existing:
        return Action.UPDATE
    return Action.SKIP


def create_issue(
    jira: TicketSystem,
    config: SyncConfig,
    alert: Alert,
    *,
    now: Callable[[], datetime] = utc_now,
) -> Ticket:
    due_date = calculate_due_date(alert.severity, config.due_days.as_dict(), alert.created_at, now=now)
    fields = build_issue_fields(config, alert, due_date)

    if config.dry_run:
        print(
            f"DRY-RUN: would create Jira issue: {fields['summary']!r} "
            f"type={config.issue_type} priority={config.priority} due={due_date} labels={fields['labels']}"
        )
        if is_verbose():
            print("DRY-RUN: body_preview_begin")
            print(fields["description"])
            print("DRY-RUN: body_preview_end")
        return Ticket(key=DRY_RUN_ISSUE_KEY, summary=fields["summary"], description=fields["description"])

    ticket = jira.create_issue(fields)
    print(f"Created Jira issue {ticket.key} for alert #{alert.id} (due {due_date})")
    return ticket


def update_issue(jira: TicketSystem, issue_key: str, alert: Alert, *, dry_run: bool) -> None:
    """Append an alert-status comment; summary and due date are never touched."""
    comment = build_update_comment(alert)
    if dry_run:
        print(f"DRY-RUN: would update Jira issue {issue_key} with comment (alert #{alert.id}, state={alert.state})")
        if is_verbose():
            print("DRY-RUN: body_preview_begin")
            print(comment)
            print("DRY-RUN: body_preview_end")
        return

    jira.add_comment(issue_key, comment)
    print(f"Updated Jira issue {issue_key}")


def close_issue(jira: TicketSystem, issue_key: str, config: SyncConfig) -> None:
    """Comment (when configured) and transition *issue_key* to the close state."""
    if config.dry_run:
        print(f"DRY-RUN: would close Jira issue {issue_key} via transition {config.close_transition!r}")
        return

    transitions = jira.get_transitions(issue_key)
    wanted = config.close_transition.strip().lower()
    match = next((t for t in transitions if str(t.get("name", "")).strip().lower() == wanted), None)
    if match is None:
        raise TransitionNotAvailableError(issue_key, config.close_transition, [t.get("name", "") for t in transitions])

    # Comment first so it is visible whatever the transition triggers.
    if (config.close_comment or "").strip():
        jira.add_comment(issue_key, config.close_comment)
    jira.apply_transition(issue_key, match["id"])
    print(f"Closed Jira issue {issue_key} (transition {match.get('name')!r})")


def ensure_issue(
    alert: Alert,
    jira: TicketSystem,
    config: SyncConfig,
    handled: dict[int, Ticket],
    *,
    now: Callable[[], datetime] = utc_now,
) -> ItemResult:
    item = f"alert #{alert.id}"

    # Issues created earlier in this run may not be searchable yet.
    existing = handled.get(alert.id) or find_existing(jira, config.jira_project_key, alert.id)
    action = decide_action(existing, config.update_existing)

    if action == Action.CREATE:
        created = create_issue(jira, config, alert, now=now)
        handled[alert.id] = created
        return ItemResult(item=item, outcome=Outcome.CREATED, issue_key=created.key)

    if action == Action.UPDATE:
        print(f"Found existing issue: {existing.key}")
        update_issue(jira, existing.key, alert, dry_run=config.dry_run)
        handled[alert.id] = existing
        return ItemResult(item=item, outcome=Outcome.UPDATED, issue_key=existing.key)

    print(f"Skipping existing issue: {existing.key} (update-existing is false)")
    handled[alert.id] = existing
    return ItemResult(item=item, outcome=Outcome.SKIPPED, issue_key=existing.key)


def sync_alerts(
    raw_alerts: list[dict[str, Any]],
    jira: TicketSystem,
    config: SyncConfig,
    *,
    now: Callable[[], datetime] = utc_now,
) -> list[ItemResult]:
    """Create / update phase: one :class:`ItemResult` per raw alert, in source order."""
    handled: dict[int, Ticket] = {}
    results: list[ItemResult] = []
    for raw in raw_alerts:
        item = "alert #?"
        try:
            item = f"alert #{raw.get('number')}"
            alert = parse_alert(raw)
            print(f"Processing alert #{alert.id}: {alert.title}")
            results.append(ensure_issue(alert, jira, config, handled, now=now))
        except Exception as exc:
            print(f"ERROR: Failed to process {item}: {exc}", file=sys.stderr)
            results.append(ItemResult(item=item, error=exc))
    return results


def _auto_close_one(
    ticket: Ticket,
    jira: TicketSystem,
    alert_source: AlertSource,
    config: SyncConfig,
) -> ItemResult:
    alert_id = extract_alert_id(ticket)
    if alert_id is None:
        return ItemResult(item=ticket.key, outcome=Outcome.UNPARSEABLE, issue_key=ticket.key)

    # Ask GitHub directly: the alert may be outside this run's severity / state filter.
    status = alert_source.get_alert_status(config.repo, alert_id)

    if status in RESOLVED_ALERT_STATES:
        print(f"Alert #{alert_id} is {status}; closing Jira issue {ticket.key}")
        close_issue(jira, ticket.key, config)
        return ItemResult(item=ticket.key, outcome=Outcome.CLOSED, issue_key=ticket.key)

    if status == ALERT_STATE_OPEN:
        vprint(f"Alert #{alert_id} is still open; keeping {ticket.key}")
    else:
        print(
            f"WARN: Alert #{alert_id} has unexpected status {status!r}; leaving {ticket.key} open",
            file=sys.stderr,
        )
    return ItemResult(item=ticket.key, outcome=Outcome.KEPT_OPEN, issue_key=ticket.key)


def auto_close_resolved(
    jira: TicketSystem,
    alert_source: AlertSource,
    config: SyncConfig,
) -> list[ItemResult]:
    """Auto-close phase: close tracked issues whose alert is fixed, dismissed or gone."""
    print("Checking tracked Jira issues for resolved alerts...")
    try:
        tickets = find_all_open_tracked(jira, config.jira_project_key)
    except Exception as exc:
        print(f"ERROR: Auto-close phase failed: {exc}", file=sys.stderr)
        return []

    if not tickets:
        vprint("No open tracked issues – nothing to auto-close")
        return []

    results: list[ItemResult] = []
    for ticket in tickets:
        try:
            results.append(_auto_close_one(ticket, jira, alert_source, config))
        except Exception as exc:
            print(f"ERROR: Failed to auto-close {ticket.key}: {exc}", file=sys.stderr)
            results.append(ItemResult(item=ticket.key, error=exc, issue_key=ticket.key))
    return results


def run_sync(
    config: SyncConfig,
    alert_source: AlertSource,
    jira: TicketSystem,
    *,
    now: Callable[[], datetime] = utc_now,
) -> SyncReport:
    """Run both phases once and return the aggregated report."""
    report = SyncReport(dry_run=config.dry_run)

    print("Starting Dependabot Jira Sync...")
    if config.dry_run:
        print("DRY-RUN: no changes will be made")
    print(f"Repository: {config.repo}")

    try:
        raw_alerts = alert_source.list_alerts(config.repo, include_dismissed=not config.exclude_dismissed)
    except TransportError as exc:
        print(f"WARN: {exc}; continuing without alerts", file=sys.stderr)
        raw_alerts = []

    alerts = filter_by_severity(raw_alerts, config.severity_threshold)
    if alerts:
        report.add_alert_results(sync_alerts(alerts, jira, config, now=now))
    else:
        print("No Dependabot alerts found matching the criteria")

    if config.auto_close:
        report.add_close_results(auto_close_resolved(jira, alert_source, config))
    else:
        vprint("Auto-close disabled – skipping resolved-alert check")

    report.print_report()
    return report
