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


"""Sync data models – canonical alert, run configuration, per-item results,
and the collaborator protocols the engine talks to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from ..shared.models import Ticket
from .constants import (
    DEFAULT_CLOSE_COMMENT,
    DEFAULT_CLOSE_TRANSITION,
    DEFAULT_DUE_DAYS,
    DEFAULT_ISSUE_TYPE,
    DEFAULT_LABELS,
    DEFAULT_PRIORITY,
    DEFAULT_SEVERITY_THRESHOLD,
)


@dataclass(frozen=True)
class Alert:
    """Canonical Dependabot alert, rebuilt from the raw payload on every run."""
    id: int
    title: str
    description: str
    severity: str
    package: str
    ecosystem: str
    vulnerable_version_range: str
    first_patched_version: str
    url: str
    created_at: str | None
    updated_at: str | None
    state: str
    cvss: float | None = None
    cve_id: str | None = None
    ghsa_id: str | None = None
    manifest_path: str | None = None
    dismissed_at: str | None = None
    dismissed_reason: str | None = None
    dismissed_comment: str | None = None


@dataclass(frozen=True)
class DueDays:
    critical: int = DEFAULT_DUE_DAYS["critical"]
    high: int = DEFAULT_DUE_DAYS["high"]
    medium: int = DEFAULT_DUE_DAYS["medium"]
    low: int = DEFAULT_DUE_DAYS["low"]

    def as_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
        }


@dataclass(frozen=True)
class SyncConfig:
    """Immutable per-run configuration, built once by ``config.load_config``."""
    jira_url: str
    jira_username: str
    jira_api_token: str = field(repr=False)
    jira_project_key: str
    repo: str
    issue_type: str = DEFAULT_ISSUE_TYPE
    priority: str = DEFAULT_PRIORITY
    labels: str = DEFAULT_LABELS
    assignee: str | None = None
    due_days: DueDays = field(default_factory=DueDays)
    severity_threshold: str = DEFAULT_SEVERITY_THRESHOLD
    exclude_dismissed: bool = True
    update_existing: bool = True
    auto_close: bool = True
    close_transition: str = DEFAULT_CLOSE_TRANSITION
    close_comment: str = DEFAULT_CLOSE_COMMENT
    dry_run: bool = False
    github_token: str = field(default="", repr=False)
    github_app_id: str = ""
    github_app_private_key: str = field(default="", repr=False)
    github_app_installation_id: str = ""
    github_api_url: str = ""
    verbose: bool = False

    def label_list(self) -> list[str]:
        """Configured labels, comma-split and trimmed (empty entries dropped)."""
        return [label.strip() for label in (self.labels or "").split(",") if label.strip()]


class Action(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class Outcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    CLOSED = "closed"
    KEPT_OPEN = "kept_open"
    UNPARSEABLE = "unparseable"


@dataclass
class ItemResult:
    """Outcome of processing one alert or one tracked issue: either an outcome or an error."""
    item: str
    outcome: Outcome | None = None
    error: Exception | None = None
    issue_key: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class AlertSource(Protocol):
    def list_alerts(
        self,
        repo: str,
        *,
        include_dismissed: bool = False,
        state: str | None = None,
    ) -> list[dict[str, Any]]:
        ...

    def get_alert_status(self, repo: str, alert_id: int | str) -> str:
        ...


class TicketSystem(Protocol):
    def search(self, jql: str, fields: tuple[str, ...] = ...) -> list[Ticket]:
        ...

    def create_issue(self, fields: dict[str, Any]) -> Ticket:
        ...

    def add_comment(self, issue_key: str, body: str) -> None:
        ...

    def get_transitions(self, issue_key: str) -> list[dict[str, str]]:
        ...

    def apply_transition(self, issue_key: str, transition_id: str) -> None:
        ...
