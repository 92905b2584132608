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


"""GitHub Dependabot alert operations via PyGithub – authentication
(token or GitHub App installation), alert listing and single-alert status
lookup.
"""

from __future__ import annotations

import base64
import binascii
import sys
from typing import Any

import requests
from github import Auth, Github, GithubException, UnknownObjectException

from .common import vprint
from .errors import ConfigurationError, TransportError

ALERT_STATES_OPEN = "open"
ALERT_STATES_OPEN_AND_DISMISSED = "open,dismissed"


def decode_private_key(private_key: str) -> str:
    """Return a PEM private key; base64-encoded keys are decoded first."""
    key = (private_key or "").strip()
    if "BEGIN" in key:
        return key
    try:
        return base64.b64decode("".join(key.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ConfigurationError("github-app-private-key is neither PEM nor base64-encoded PEM") from exc


def resolve_github_auth(
    token: str = "",
    app_id: str = "",
    private_key: str = "",
    installation_id: str = "",
) -> Auth.Auth:
    """Pick GitHub App installation auth when all three app inputs are set, else the token."""
    if app_id and private_key and installation_id:
        print("Using GitHub App authentication")
        try:
            app_auth = Auth.AppAuth(int(app_id), decode_private_key(private_key))
            return app_auth.get_installation_auth(int(installation_id))
        except ValueError as exc:
            raise ConfigurationError("github-app-id and github-app-installation-id must be integers") from exc

    if token:
        print("Using GitHub token authentication")
        return Auth.Token(token)

    raise ConfigurationError(
        "No authentication method provided. Please provide either:\n"
        "1. GitHub App credentials (github-app-id, github-app-private-key, github-app-installation-id), or\n"
        "2. GitHub token (github-token)"
    )


class GitHubAlertSource:
    """Reads Dependabot alerts of a repository."""

    def __init__(self, client: Github) -> None:
        self._gh = client

    @classmethod
    def from_auth(cls, auth: Auth.Auth, base_url: str | None = None) -> "GitHubAlertSource":
        if base_url:
            return cls(Github(auth=auth, base_url=base_url, timeout=30))
        return cls(Github(auth=auth, timeout=30))

    def list_alerts(
        self,
        repo: str,
        *,
        include_dismissed: bool = False,
        state: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return raw alert payloads (REST JSON shape) for *repo*.

        *state* overrides the state filter derived from *include_dismissed*.
        """
        wanted = state or (ALERT_STATES_OPEN_AND_DISMISSED if include_dismissed else ALERT_STATES_OPEN)
        print(f"Fetching Dependabot alerts for {repo} (state={wanted})")
        try:
            repository = self._gh.get_repo(repo, lazy=True)
            alerts = [alert.raw_data for alert in repository.get_dependabot_alerts(state=wanted)]
        except GithubException as exc:
            raise TransportError(
                f"Failed to fetch Dependabot alerts for {repo}: {exc.data or exc}",
                status=exc.status,
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Failed to fetch Dependabot alerts for {repo}: {exc}") from exc

        print(f"Found {len(alerts)} total alerts")
        return alerts

    def get_alert_status(self, repo: str, alert_id: int | str) -> str:
        """Return the alert state: ``open``, ``fixed``, ``dismissed``, ... or
        ``not_found`` (HTTP 404) / ``unknown`` (any other failure).
        """
        vprint(f"Checking status of alert #{alert_id}")
        try:
            repository = self._gh.get_repo(repo, lazy=True)
            alert = repository.get_dependabot_alert(int(alert_id))
            return str(alert.state or "unknown").lower()
        except UnknownObjectException:
            print(f"Alert #{alert_id} not found (may have been deleted)")
            return "not_found"
        except GithubException as exc:
            if exc.status == 404:
                print(f"Alert #{alert_id} not found (may have been deleted)")
                return "not_found"
            print(f"WARN: Failed to check status of alert #{alert_id}: {exc.data or exc}", file=sys.stderr)
            return "unknown"
        except requests.RequestException as exc:
            print(f"WARN: Failed to check status of alert #{alert_id}: {exc}", file=sys.stderr)
            return "unknown"
