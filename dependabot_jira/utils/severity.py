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


"""Severity ordering and threshold filtering.

Severities are ordered ``low < medium < high < critical``. Anything else
(including ``unknown``) has no rank and never passes a threshold.
"""

from __future__ import annotations

import sys
from typing import Any

from ..shared.common import vprint
from ..shared.errors import ConfigurationError

# Ordered from lowest to highest.
SEVERITY_LEVELS: tuple[str, ...] = ("low", "medium", "high", "critical")


def severity_index(severity: str | None) -> int | None:
    """Return the rank of *severity* (case-insensitive), or ``None`` when unrecognised."""
    try:
        return SEVERITY_LEVELS.index(str(severity or "").strip().lower())
    except ValueError:
        return None


def validate_threshold(threshold: str | None) -> str:
    """Return the normalised threshold or raise :class:`ConfigurationError`."""
    normalised = str(threshold or "").strip().lower()
    if normalised not in SEVERITY_LEVELS:
        raise ConfigurationError(
            f"Invalid severity threshold: {threshold!r} (expected one of {', '.join(SEVERITY_LEVELS)})"
        )
    return normalised


def passes(alert_severity: str | None, threshold: str) -> bool:
    min_index = severity_index(validate_threshold(threshold))
    alert_index = severity_index(alert_severity)
    if alert_index is None:
        return False
    return alert_index >= min_index


def raw_alert_severity(raw_alert: dict[str, Any]) -> str:
    advisory = raw_alert.get("security_advisory")
    if not isinstance(advisory, dict):
        return ""
    return str(advisory.get("severity") or "").lower()


def filter_by_severity(raw_alerts: list[dict[str, Any]], threshold: str) -> list[dict[str, Any]]:
    """Keep raw alerts whose advisory severity meets *threshold*."""
    validate_threshold(threshold)
    kept: list[dict[str, Any]] = []
    for raw in raw_alerts:
        if not isinstance(raw, dict):
            print(f"WARN: Ignoring malformed alert payload: {raw!r}", file=sys.stderr)
            continue
        if passes(raw_alert_severity(raw), threshold):
            kept.append(raw)
        else:
            vprint(
                f"Skip alert #{raw.get('number')}: severity={raw_alert_severity(raw) or 'unknown'!r} "
                f"below threshold {threshold!r}"
            )
    print(f"{len(kept)} alerts match severity threshold: {threshold}")
    return kept
