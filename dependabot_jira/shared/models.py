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


"""Jira-side data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Ticket:
    key: str
    summary: str = ""
    description: str = ""
    status: str = ""

    @classmethod
    def from_api(cls, obj: dict) -> "Ticket":
        """Build a Ticket from a Jira REST issue payload (``key`` + ``fields``)."""
        fields = obj.get("fields") or {}
        status = fields.get("status") or {}
        return cls(
            key=str(obj.get("key") or ""),
            summary=str(fields.get("summary") or ""),
            description=str(fields.get("description") or ""),
            status=str(status.get("name") or "") if isinstance(status, dict) else str(status),
        )
