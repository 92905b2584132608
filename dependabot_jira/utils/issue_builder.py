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


"""Jira issue summary / description / fields and update-comment construction
from a canonical :class:`Alert`.
"""

from __future__ import annotations

from typing import Any

from ..shared.common import format_timestamp
from ..shared.templates import render_template
from .constants import LABEL_TRACKING, SUMMARY_MARKER
from .models import Alert, SyncConfig
from .templates import ISSUE_DESCRIPTION_TEMPLATE, UPDATE_COMMENT_TEMPLATE


def build_issue_summary(alert: Alert) -> str:
    return f"{SUMMARY_MARKER.format(alert_id=alert.id)}: {alert.title}"


def _fmt_cvss(cvss: float | None) -> str:
    if cvss is None:
        return ""
    return f"{cvss:g}"


def build_issue_description(alert: Alert) -> str:
    values: dict[str, Any] = {
        "id": alert.id,
        "package": alert.package,
        "ecosystem": alert.ecosystem,
        "manifest_path": alert.manifest_path or "",
        "severity": alert.severity.upper(),
        "vulnerable_version_range": alert.vulnerable_version_range,
        "first_patched_version": alert.first_patched_version,
        "description": alert.description,
        "cvss": _fmt_cvss(alert.cvss),
        "cve_id": alert.cve_id or "",
        "ghsa_id": alert.ghsa_id or "",
        "url": alert.url,
    }
    return render_template(ISSUE_DESCRIPTION_TEMPLATE, values)


def build_labels(config: SyncConfig) -> list[str]:
    """Configured labels plus the tracking label the auto-close query relies on."""
    labels = config.label_list()
    if LABEL_TRACKING not in labels:
        labels.append(LABEL_TRACKING)
    return labels


def build_issue_fields(config: SyncConfig, alert: Alert, due_date: str) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "project": {"key": config.jira_project_key},
        "summary": build_issue_summary(alert),
        "description": build_issue_description(alert),
        "issuetype": {"name": config.issue_type},
        "priority": {"name": config.priority},
        "duedate": due_date,
        "labels": build_labels(config),
    }
    if config.assignee:
        fields["assignee"] = {"name": config.assignee}
    return fields


def build_update_comment(alert: Alert) -> str:
    values: dict[str, Any] = {
        "id": alert.id,
        "state": alert.state,
        "updated_at": format_timestamp(alert.updated_at) or "unknown",
        "dismissed_at": format_timestamp(alert.dismissed_at),
        "dismissed_reason": alert.dismissed_reason or "",
        "dismissed_comment": alert.dismissed_comment or "",
        "url": alert.url,
    }
    return render_template(UPDATE_COMMENT_TEMPLATE, values)
