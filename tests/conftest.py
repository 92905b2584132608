"""Shared fixtures: an in-memory Jira, a scripted Dependabot alert source,
and factories for raw alert payloads and run configuration.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

import pytest

from dependabot_jira.shared.common import set_verbose_enabled
from dependabot_jira.shared.errors import TransportError
from dependabot_jira.shared.models import Ticket
from dependabot_jira.utils.models import SyncConfig

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


class FakeJira:
    """In-memory stand-in for ``JiraClient`` that records every call."""

    def __init__(self) -> None:
        self.issues: dict[str, dict[str, Any]] = {}
        self.transitions: dict[str, list[dict[str, str]]] = {}
        self.default_transitions = [
            {"id": "11", "name": "In Progress"},
            {"id": "31", "name": "Done"},
        ]
        self.writes: list[tuple] = []
        self.reads: list[tuple] = []
        self.fail_search = False
        self.fail_create_for: set[int] = set()
        self._next_id = 1

    def add_issue(
        self,
        summary: str,
        description: str = "",
        *,
        labels: tuple[str, ...] = ("dependabot", "security"),
        closed: bool = False,
        key: str | None = None,
    ) -> str:
        key = key or f"SEC-{self._next_id}"
        self._next_id += 1
        self.issues[key] = {
            "ticket": Ticket(key=key, summary=summary, description=description, status="Done" if closed else "To Do"),
            "labels": list(labels),
            "closed": closed,
            "fields": {},
        }
        return key

    def search(self, jql: str, fields: tuple[str, ...] = ()) -> list[Ticket]:
        self.reads.append(("search", jql))
        if self.fail_search:
            raise TransportError("Jira API Error: search unavailable", status=503)

        m = re.search(r'summary ~ "(.*?)"', jql)
        if m:
            needle = m.group(1)
            return [rec["ticket"] for rec in self.issues.values() if needle in rec["ticket"].summary]

        m = re.search(r'labels = "(.*?)"', jql)
        if m:
            label = m.group(1)
            return [
                rec["ticket"]
                for rec in self.issues.values()
                if label in rec["labels"] and not rec["closed"]
            ]
        return []

    def create_issue(self, fields: dict[str, Any]) -> Ticket:
        self.writes.append(("create", fields))
        alert_id = int(re.search(r"Alert #(\d+)", fields["summary"]).group(1))
        if alert_id in self.fail_create_for:
            raise TransportError("Jira API Error: Field 'priority' cannot be set", status=400)
        key = self.add_issue(fields["summary"], fields["description"], labels=tuple(fields.get("labels") or ()))
        self.issues[key]["fields"] = fields
        return Ticket(key=key, summary=fields["summary"], description=fields["description"])

    def add_comment(self, issue_key: str, body: str) -> None:
        self.writes.append(("comment", issue_key, body))

    def get_transitions(self, issue_key: str) -> list[dict[str, str]]:
        self.reads.append(("transitions", issue_key))
        return list(self.transitions.get(issue_key, self.default_transitions))

    def apply_transition(self, issue_key: str, transition_id: str) -> None:
        self.writes.append(("transition", issue_key, transition_id))
        self.issues[issue_key]["closed"] = True

    def created(self) -> list[dict[str, Any]]:
        return [w[1] for w in self.writes if w[0] == "create"]

    def comments(self, issue_key: str | None = None) -> list[tuple]:
        return [w for w in self.writes if w[0] == "comment" and (issue_key is None or w[1] == issue_key)]


class FakeAlertSource:
    """Scripted stand-in for ``GitHubAlertSource``."""

    def __init__(self) -> None:
        self.alerts: list[dict[str, Any]] = []
        self.statuses: dict[int, str] = {}
        self.list_calls: list[dict[str, Any]] = []
        self.status_calls: list[int] = []
        self.fail_list = False

    def list_alerts(self, repo: str, *, include_dismissed: bool = False, state: str | None = None) -> list[dict[str, Any]]:
        self.list_calls.append({"repo": repo, "include_dismissed": include_dismissed, "state": state})
        if self.fail_list:
            raise TransportError("Failed to fetch Dependabot alerts for acme/widgets: 502", status=502)
        return list(self.alerts)

    def get_alert_status(self, repo: str, alert_id: int | str) -> str:
        self.status_calls.append(int(alert_id))
        return self.statuses.get(int(alert_id), "open")


def build_raw_alert(
    number: int = 1,
    severity: str = "critical",
    *,
    package: str = "lodash",
    created_at: str = "2023-01-10T08:00:00Z",
    state: str = "open",
    **overrides: Any,
) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "number": number,
        "state": state,
        "dependency": {
            "package": {"ecosystem": "npm", "name": package},
            "manifest_path": "package-lock.json",
            "scope": "runtime",
        },
        "security_advisory": {
            "ghsa_id": f"GHSA-aaaa-bbbb-{number:04d}",
            "cve_id": f"CVE-2023-{1000 + number}",
            "summary": f"Prototype pollution in {package}",
            "description": f"Versions of {package} are vulnerable to prototype pollution.",
            "severity": severity,
            "cvss": {"score": 9.1, "vector_string": "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:N"},
        },
        "security_vulnerability": {
            "package": {"ecosystem": "npm", "name": package},
            "severity": severity,
            "vulnerable_version_range": "< 4.17.21",
            "first_patched_version": {"identifier": "4.17.21"},
        },
        "url": f"https://api.github.com/repos/acme/widgets/dependabot/alerts/{number}",
        "html_url": f"https://github.com/acme/widgets/security/dependabot/{number}",
        "created_at": created_at,
        "updated_at": "2023-02-01T10:30:00Z",
        "dismissed_at": None,
        "dismissed_reason": None,
        "dismissed_comment": None,
        "fixed_at": None,
    }
    raw.update(overrides)
    return raw


def build_config(**overrides: Any) -> SyncConfig:
    values: dict[str, Any] = {
        "jira_url": "https://jira.example.com",
        "jira_username": "bot@example.com",
        "jira_api_token": "secret-token",
        "jira_project_key": "SEC",
        "repo": "acme/widgets",
    }
    values.update(overrides)
    return SyncConfig(**values)


@pytest.fixture(autouse=True)
def _reset_verbose():
    set_verbose_enabled(False)
    yield
    set_verbose_enabled(False)


@pytest.fixture
def jira() -> FakeJira:
    return FakeJira()


@pytest.fixture
def alert_source() -> FakeAlertSource:
    return FakeAlertSource()


@pytest.fixture
def make_raw_alert():
    return build_raw_alert


@pytest.fixture
def make_config():
    return build_config


@pytest.fixture
def clock():
    return fixed_clock
