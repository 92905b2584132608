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


"""Matching Jira issues to Dependabot alerts.

Each tracked issue carries its alert number in the summary
(``Alert #<id>: ...``) and, as a fallback, in the description
(``Alert ID: <id>``). Identifiers are validated before they are
interpolated into JQL.
"""

from __future__ import annotations

import re
import sys

from ..shared.common import vprint
from ..shared.errors import TransportError, ValidationError
from ..shared.models import Ticket
from .constants import LABEL_TRACKING, SUMMARY_MARKER
from .models import TicketSystem

PROJECT_KEY_RE = re.compile(r"^[A-Za-z0-9-]+$")
ALERT_ID_RE = re.compile(r"^[0-9]+$")

SUMMARY_ALERT_ID_RE = re.compile(r"Alert #(\d+)\b")
BODY_ALERT_ID_RE = re.compile(r"Alert ID:\s*(\d+)\b")


def validate_project_key(project_key: str) -> str:
    key = str(project_key or "")
    if not PROJECT_KEY_RE.match(key):
        raise ValidationError(f"Invalid Jira project key: {project_key!r}")
    return key


def validate_alert_id(alert_id: int | str) -> str:
    if isinstance(alert_id, bool):
        raise ValidationError(f"Invalid alert id: {alert_id!r}")
    value = str(alert_id if alert_id is not None else "")
    if not ALERT_ID_RE.match(value):
        raise ValidationError(f"Invalid alert id: {alert_id!r}")
    return value


def build_existing_issue_jql(project_key: str, alert_id: int | str) -> str:
    key = validate_project_key(project_key)
    marker = SUMMARY_MARKER.format(alert_id=validate_alert_id(alert_id))
    return f'project = "{key}" AND summary ~ "{marker}"'


def build_tracked_issues_jql(project_key: str) -> str:
    key = validate_project_key(project_key)
    return f'project = "{key}" AND labels = "{LABEL_TRACKING}" AND statusCategory != Done ORDER BY created ASC'


def _first_id(pattern: re.Pattern[str], text: str | None) -> int | None:
    m = pattern.search(text or "")
    if m:
        return int(m.group(1))
    return None


def extract_alert_id(ticket: Ticket, *, warn: bool = True) -> int | None:
    """Return the alert number referenced by *ticket*.

    The summary marker wins over the description marker. Tickets matching
    neither are reported and excluded from auto-close until fixed by hand.
    """
    alert_id = _first_id(SUMMARY_ALERT_ID_RE, ticket.summary)
    if alert_id is None:
        alert_id = _first_id(BODY_ALERT_ID_RE, ticket.description)
    if alert_id is None and warn:
        print(
            f"WARN: Could not extract alert id from issue {ticket.key} "
            f"(summary={ticket.summary!r}); skipping",
            file=sys.stderr,
        )
    return alert_id


def find_existing(jira: TicketSystem, project_key: str, alert_id: int | str) -> Ticket | None:
    """Return the issue tracking *alert_id*, or ``None``.

    Search failures are reported and treated as "no issue": a possible
    duplicate is preferred over a missed alert.
    """
    jql = build_existing_issue_jql(project_key, alert_id)
    try:
        results = jira.search(jql)
    except TransportError as exc:
        print(f"WARN: Failed to search for existing issue for alert #{alert_id}: {exc}", file=sys.stderr)
        return None

    wanted = int(alert_id)
    matches = [t for t in results if _first_id(SUMMARY_ALERT_ID_RE, t.summary) == wanted]
    if len(matches) < len(results):
        vprint(f"Ignored {len(results) - len(matches)} fuzzy search hit(s) for alert #{alert_id}")
    if not matches:
        return None

    if len(matches) > 1:
        print(
            f"WARN: {len(matches)} issues reference alert #{alert_id} "
            f"({', '.join(t.key for t in matches)}); using {matches[0].key}",
            file=sys.stderr,
        )
    return matches[0]


def find_all_open_tracked(jira: TicketSystem, project_key: str) -> list[Ticket]:
    """Return every unresolved issue in *project_key* carrying the tracking label."""
    jql = build_tracked_issues_jql(project_key)
    try:
        tickets = jira.search(jql)
    except TransportError as exc:
        print(f"WARN: Failed to list tracked issues in {project_key}: {exc}", file=sys.stderr)
        return []

    print(f"Loaded {len(tickets)} open tracked issues from project {project_key}")
    return tickets
