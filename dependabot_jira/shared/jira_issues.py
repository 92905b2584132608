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


"""Jira REST (v2) operations via ``requests`` – JQL search, issue creation,
comments, and workflow transitions.

Every failure (network error or non-2xx response) is raised as
:class:`TransportError`; callers decide whether it is recoverable.
"""

from __future__ import annotations

from typing import Any

import requests

from .common import vprint
from .errors import TransportError
from .models import Ticket

DEFAULT_SEARCH_FIELDS = ("key", "summary", "description", "status", "updated")
SEARCH_PAGE_SIZE = 50


def _error_message(resp: requests.Response) -> str:
    """Extract Jira's error text (``errorMessages`` / ``errors`` / ``message``) from *resp*."""
    try:
        data = resp.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        messages = [str(m) for m in data.get("errorMessages") or []]
        errors = data.get("errors") or {}
        if isinstance(errors, dict):
            messages += [f"{k}: {v}" for k, v in errors.items()]
        if messages:
            return ", ".join(messages)
        if data.get("message"):
            return str(data["message"])

    return (resp.text or "").strip() or f"HTTP {resp.status_code} {resp.reason}"


class JiraClient:
    """Thin client for the Jira REST API v2 (Cloud and Data Center)."""

    def __init__(
        self,
        base_url: str,
        username: str,
        api_token: str,
        *,
        session: requests.Session | None = None,
        timeout: int = 30,
    ) -> None:
        self.api_url = base_url.rstrip("/") + "/rest/api/2"
        self.timeout = timeout
        self._legacy_search = False
        self.session = session or requests.Session()
        self.session.auth = (username, api_token)
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.api_url}{path}"
        try:
            resp = self.session.request(method, url, params=params, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Jira API Error: {exc}") from exc

        if not resp.ok:
            raise TransportError(f"Jira API Error: {_error_message(resp)}", status=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Jira API Error: invalid JSON response from {path}") from exc

    def search(self, jql: str, fields: tuple[str, ...] = DEFAULT_SEARCH_FIELDS) -> list[Ticket]:
        """Run *jql* and return every matching issue.

        Uses ``/search/jql`` (``nextPageToken`` paging, Jira Cloud) and falls
        back to ``/search`` (``startAt`` paging) when the server answers 404,
        as Jira Data Center does.
        """
        vprint(f"JQL: {jql}")
        if not self._legacy_search:
            try:
                return self._search_jql(jql, fields)
            except TransportError as exc:
                if exc.status != 404:
                    raise
                vprint("Jira /search/jql not available – falling back to /search")
                self._legacy_search = True
        return self._search_start_at(jql, fields)

    def _search_jql(self, jql: str, fields: tuple[str, ...]) -> list[Ticket]:
        tickets: list[Ticket] = []
        token: str | None = None
        while True:
            params: dict[str, Any] = {
                "jql": jql,
                "fields": ",".join(fields),
                "maxResults": SEARCH_PAGE_SIZE,
            }
            if token:
                params["nextPageToken"] = token
            data = self._request("GET", "/search/jql", params=params) or {}
            issues = data.get("issues") or []
            tickets.extend(Ticket.from_api(obj) for obj in issues)

            token = data.get("nextPageToken")
            if not issues or not token or data.get("isLast"):
                break
        return tickets

    def _search_start_at(self, jql: str, fields: tuple[str, ...]) -> list[Ticket]:
        tickets: list[Ticket] = []
        start_at = 0
        while True:
            data = self._request(
                "GET",
                "/search",
                params={
                    "jql": jql,
                    "fields": ",".join(fields),
                    "startAt": start_at,
                    "maxResults": SEARCH_PAGE_SIZE,
                },
            ) or {}
            issues = data.get("issues") or []
            tickets.extend(Ticket.from_api(obj) for obj in issues)

            total = int(data.get("total") or 0)
            start_at += len(issues)
            if not issues or start_at >= total:
                break
        return tickets

    def create_issue(self, fields: dict[str, Any]) -> Ticket:
        data = self._request("POST", "/issue", payload={"fields": fields}) or {}
        return Ticket(
            key=str(data.get("key") or ""),
            summary=str(fields.get("summary") or ""),
            description=str(fields.get("description") or ""),
        )

    def add_comment(self, issue_key: str, body: str) -> None:
        self._request("POST", f"/issue/{issue_key}/comment", payload={"body": body})

    def get_transitions(self, issue_key: str) -> list[dict[str, str]]:
        data = self._request("GET", f"/issue/{issue_key}/transitions") or {}
        return [
            {"id": str(t.get("id") or ""), "name": str(t.get("name") or "")}
            for t in data.get("transitions") or []
        ]

    def apply_transition(self, issue_key: str, transition_id: str) -> None:
        self._request(
            "POST",
            f"/issue/{issue_key}/transitions",
            payload={"transition": {"id": str(transition_id)}},
        )
