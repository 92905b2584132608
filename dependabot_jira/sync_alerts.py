#!/usr/bin/env python3
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


"""Sync Dependabot alerts of a GitHub repository into Jira issues.

Design intent:
- One Jira issue per Dependabot alert, matched by ``Alert #<number>`` in the summary.
- Existing issues get a status comment; summary and due date are never rewritten.
- Due dates follow severity and count from the alert's creation date.
- Issues whose alert is fixed, dismissed or deleted are transitioned to the close state.

Requirements:
- A GitHub token (or GitHub App) with Dependabot alerts read access.
- A Jira user + API token allowed to create, comment and transition issues.

Draft / debug (no writes):
    `dependabot-jira-sync --repo owner/repo --jira-url https://example.atlassian.net \
        --jira-username bot@example.com --jira-api-token ... --jira-project-key SEC --dry-run`

Every flag defaults to the matching GitHub Actions input (``INPUT_JIRA-URL``, ...).
"""

from __future__ import annotations

from dependabot_jira.shared.common import append_step_summary, set_verbose_enabled, write_outputs
from dependabot_jira.shared.errors import ConfigurationError
from dependabot_jira.shared.github_alerts import GitHubAlertSource, resolve_github_auth
from dependabot_jira.shared.jira_issues import JiraClient
from dependabot_jira.utils.config import load_config
from dependabot_jira.utils.issue_sync import run_sync


def main(argv: list[str] | None = None) -> None:
    try:
        config = load_config(argv)
        set_verbose_enabled(config.verbose)
        auth = resolve_github_auth(
            config.github_token,
            config.github_app_id,
            config.github_app_private_key,
            config.github_app_installation_id,
        )
    except ConfigurationError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc

    alert_source = GitHubAlertSource.from_auth(auth, base_url=config.github_api_url or None)
    jira = JiraClient(config.jira_url, config.jira_username, config.jira_api_token)

    try:
        report = run_sync(config, alert_source, jira)
    except ConfigurationError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc

    outputs = report.outputs()
    for name, value in outputs.items():
        print(f"{name}={value}")
    write_outputs(outputs)
    append_step_summary(report.to_markdown())
    print("Dependabot Jira Sync completed successfully")


if __name__ == "__main__":
    main()
