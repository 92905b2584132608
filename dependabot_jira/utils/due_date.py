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


"""Severity-based Jira due dates.

The offset is counted from the alert's creation time, so an alert that
stays open across many runs keeps its original deadline.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone

from ..shared.common import parse_iso_datetime, utc_now
from .constants import DEFAULT_DUE_DAYS


def due_days_for(severity: str | None, due_days: Mapping[str, int | None]) -> int:
    """Return the day offset for *severity*.

    Missing or falsy configured values fall back to ``DEFAULT_DUE_DAYS``;
    unrecognised severities use the medium offset.
    """
    days_map = {sev: (due_days.get(sev) or default) for sev, default in DEFAULT_DUE_DAYS.items()}
    return days_map.get(str(severity or "").lower(), days_map["medium"])


def calculate_due_date(
    severity: str | None,
    due_days: Mapping[str, int | None],
    reference: str | datetime | None = None,
    *,
    now: Callable[[], datetime] = utc_now,
) -> str:
    """Return the ``YYYY-MM-DD`` due date for an alert of *severity* created at *reference*."""
    if reference is None or reference == "":
        start = now()
    elif isinstance(reference, datetime):
        start = reference
    else:
        try:
            start = parse_iso_datetime(reference)
        except ValueError:
            print(f"WARN: Unparseable alert timestamp {reference!r}; counting due date from now", file=sys.stderr)
            start = now()

    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)

    due = start.astimezone(timezone.utc) + timedelta(days=due_days_for(severity, due_days))
    return due.date().isoformat()
