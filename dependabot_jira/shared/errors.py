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


"""Error taxonomy shared by the API wrappers and the sync engine.

ConfigurationError           missing / invalid run input; aborts the run up front.
ValidationError              unsafe identifier about to be interpolated into JQL.
TransportError               GitHub or Jira API call failed.
TransitionNotAvailableError  requested close transition is not offered by the issue workflow.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for all errors raised by the sync."""


class ConfigurationError(SyncError):
    pass


class ValidationError(SyncError, ValueError):
    pass


class TransportError(SyncError):
    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TransitionNotAvailableError(SyncError):
    def __init__(self, issue_key: str, requested: str, available: list[str]) -> None:
        self.issue_key = issue_key
        self.requested = requested
        self.available = list(available)
        names = ", ".join(self.available) if self.available else "(none)"
        super().__init__(
            f"Transition {requested!r} not available for {issue_key}. Available transitions: {names}"
        )
