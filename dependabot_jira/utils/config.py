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


"""Run configuration – command-line flags that default to the GitHub Actions
``INPUT_*`` environment variables, validated and frozen into a
:class:`SyncConfig`.
"""

from __future__ import annotations

import argparse
import os

from ..shared.common import get_input, parse_bool_input, parse_runner_debug
from ..shared.errors import ConfigurationError
from .constants import (
    DEFAULT_CLOSE_COMMENT,
    DEFAULT_CLOSE_TRANSITION,
    DEFAULT_DUE_DAYS,
    DEFAULT_ISSUE_TYPE,
    DEFAULT_LABELS,
    DEFAULT_PRIORITY,
    DEFAULT_SEVERITY_THRESHOLD,
)
from .models import DueDays, SyncConfig
from .severity import validate_threshold

REQUIRED_INPUTS = ("jira-url", "jira-username", "jira-api-token", "jira-project-key")


def parse_int_input(name: str, raw: str | None, default: int) -> int:
    value = (raw or "").strip()
    if not value:
        return default
    try:
        parsed = int(value, 10)
    except ValueError:
        raise ConfigurationError(f"Input {name} must be an integer, got {raw!r}") from None
    if parsed < 0:
        raise ConfigurationError(f"Input {name} must not be negative, got {parsed}")
    return parsed


def _add_input(parser: argparse.ArgumentParser, name: str, help_text: str, *, flag: bool = False) -> None:
    """Add ``--<name>`` defaulting to the ``INPUT_<NAME>`` environment variable."""
    kwargs: dict = {"default": get_input(name), "help": help_text}
    if flag:
        # ``--dry-run`` alone means true; ``--dry-run false`` is accepted as well.
        kwargs.update(nargs="?", const="true")
    parser.add_argument(f"--{name}", **kwargs)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Sync Dependabot alerts of a GitHub repository into Jira issues",
    )
    p.add_argument(
        "--repo",
        default=os.environ.get("GITHUB_REPOSITORY", ""),
        help="GitHub repository in owner/repo format (default: $GITHUB_REPOSITORY)",
    )
    p.add_argument(
        "--github-api-url",
        default=os.environ.get("GITHUB_API_URL", ""),
        help="GitHub REST API base URL, for GitHub Enterprise Server (default: $GITHUB_API_URL)",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )

    _add_input(p, "github-token", "GitHub token (PAT or GITHUB_TOKEN)")
    _add_input(p, "github-app-id", "GitHub App ID (alternative to --github-token)")
    _add_input(p, "github-app-private-key", "GitHub App private key, PEM or base64-encoded PEM")
    _add_input(p, "github-app-installation-id", "GitHub App installation ID")

    _add_input(p, "jira-url", "Jira instance URL, e.g. https://company.atlassian.net (required)")
    _add_input(p, "jira-username", "Jira username or email (required)")
    _add_input(p, "jira-api-token", "Jira API token (required)")
    _add_input(p, "jira-project-key", "Jira project key where issues will be created (required)")
    _add_input(p, "jira-issue-type", f"Jira issue type (default: {DEFAULT_ISSUE_TYPE})")
    _add_input(p, "jira-priority", f"Jira priority (default: {DEFAULT_PRIORITY})")
    _add_input(p, "jira-labels", f"Comma-separated Jira labels (default: {DEFAULT_LABELS})")
    _add_input(p, "jira-assignee", "Jira user to assign issues to")

    for severity, days in DEFAULT_DUE_DAYS.items():
        _add_input(p, f"{severity}-due-days", f"Days until due date for {severity} alerts (default: {days})")

    _add_input(
        p,
        "severity-threshold",
        f"Minimum severity to process: low, medium, high, critical (default: {DEFAULT_SEVERITY_THRESHOLD})",
    )
    _add_input(p, "exclude-dismissed", "Exclude dismissed alerts (default: true)", flag=True)
    _add_input(p, "update-existing", "Comment on existing Jira issues (default: true)", flag=True)
    _add_input(p, "auto-close-resolved", "Close Jira issues of resolved alerts (default: true)", flag=True)
    _add_input(p, "close-transition", f"Jira transition used to close issues (default: {DEFAULT_CLOSE_TRANSITION})")
    _add_input(p, "close-comment", "Comment added when auto-closing (default: fixed sentence)")
    _add_input(p, "dry-run", "Only log intended changes (default: false)", flag=True)
    return p


def config_from_args(args: argparse.Namespace) -> SyncConfig:
    values = vars(args)

    def arg(name: str) -> str:
        return str(values.get(name.replace("-", "_")) or "").strip()

    missing = [name for name in REQUIRED_INPUTS if not arg(name)]
    if missing:
        raise ConfigurationError(f"Input required and not supplied: {', '.join(missing)}")

    repo = arg("repo")
    if repo.count("/") != 1 or not all(repo.split("/")):
        raise ConfigurationError(f"Repository must be in owner/repo format (got {repo!r}); set --repo or GITHUB_REPOSITORY")

    due_days = DueDays(
        **{
            severity: parse_int_input(f"{severity}-due-days", arg(f"{severity}-due-days"), default)
            for severity, default in DEFAULT_DUE_DAYS.items()
        }
    )

    return SyncConfig(
        jira_url=arg("jira-url").rstrip("/"),
        jira_username=arg("jira-username"),
        jira_api_token=arg("jira-api-token"),
        jira_project_key=arg("jira-project-key"),
        repo=repo,
        issue_type=arg("jira-issue-type") or DEFAULT_ISSUE_TYPE,
        priority=arg("jira-priority") or DEFAULT_PRIORITY,
        labels=arg("jira-labels") or DEFAULT_LABELS,
        assignee=arg("jira-assignee") or None,
        due_days=due_days,
        severity_threshold=validate_threshold(arg("severity-threshold") or DEFAULT_SEVERITY_THRESHOLD),
        exclude_dismissed=parse_bool_input("exclude-dismissed", arg("exclude-dismissed"), True),
        update_existing=parse_bool_input("update-existing", arg("update-existing"), True),
        auto_close=parse_bool_input("auto-close-resolved", arg("auto-close-resolved"), True),
        close_transition=arg("close-transition") or DEFAULT_CLOSE_TRANSITION,
        close_comment=arg("close-comment") or DEFAULT_CLOSE_COMMENT,
        dry_run=parse_bool_input("dry-run", arg("dry-run"), False),
        github_token=arg("github-token"),
        github_app_id=arg("github-app-id"),
        github_app_private_key=str(values.get("github_app_private_key") or ""),
        github_app_installation_id=arg("github-app-installation-id"),
        github_api_url=arg("github-api-url"),
        verbose=bool(values.get("verbose")) or parse_runner_debug(),
    )


def load_config(argv: list[str] | None = None) -> SyncConfig:
    return config_from_args(build_parser().parse_args(argv))
