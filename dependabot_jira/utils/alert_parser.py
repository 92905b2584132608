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


"""Alert normalisation – turning a raw Dependabot REST payload into the
canonical :class:`Alert`.

Missing ``security_advisory`` / ``security_vulnerability`` / ``dependency``
sub-structures never raise; each field falls back to a fixed placeholder
or, for the optional enrichment fields (CVSS, CVE, GHSA), to ``None``.
"""

from __future__ import annotations

from typing import Any

from ..shared.errors import ValidationError
from .constants import ALERT_STATE_UNKNOWN
from .models import Alert
from .severity import SEVERITY_LEVELS

NO_DESCRIPTION = "No description available"
NOT_AVAILABLE = "Not available"
UNKNOWN = "unknown"


def _section(data: dict[str, Any] | None, key: str) -> dict[str, Any]:
    """Return ``data[key]`` when it is a dict, else ``{}``."""
    value = (data or {}).get(key)
    if isinstance(value, dict):
        return value
    return {}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def extract_cvss(advisory: dict[str, Any]) -> float | None:
    """Best-effort CVSS score: legacy ``cvss.score`` first, then CVSS v4, then v3.

    A score of 0 means "not scored" and is treated as absent.
    """
    candidates = [
        _section(advisory, "cvss").get("score"),
        _section(_section(advisory, "cvss_severities"), "cvss_v4").get("score"),
        _section(_section(advisory, "cvss_severities"), "cvss_v3").get("score"),
    ]
    for raw in candidates:
        try:
            score = float(raw)
        except (TypeError, ValueError):
            continue
        if score > 0:
            return score
    return None


def normalize_severity(value: Any) -> str:
    severity = str(value or "").strip().lower()
    return severity if severity in SEVERITY_LEVELS else UNKNOWN


def parse_alert_number(raw: dict[str, Any]) -> int:
    number = raw.get("number")
    try:
        return int(number)
    except (TypeError, ValueError):
        raise ValidationError(f"Alert payload has no valid number: {number!r}") from None


def parse_alert(raw: dict[str, Any]) -> Alert:
    """Normalise one raw Dependabot alert payload."""
    advisory = _section(raw, "security_advisory")
    vulnerability = _section(raw, "security_vulnerability")
    dependency = _section(raw, "dependency")
    package = _section(dependency, "package")

    package_name = _text(package.get("name"))

    return Alert(
        id=parse_alert_number(raw),
        title=_text(advisory.get("summary")) or f"Vulnerability in {package_name or UNKNOWN}",
        description=_text(advisory.get("description")) or NO_DESCRIPTION,
        severity=normalize_severity(advisory.get("severity")),
        package=package_name or UNKNOWN,
        ecosystem=_text(package.get("ecosystem")) or UNKNOWN,
        vulnerable_version_range=_text(vulnerability.get("vulnerable_version_range")) or UNKNOWN,
        first_patched_version=(
            _text(_section(vulnerability, "first_patched_version").get("identifier")) or NOT_AVAILABLE
        ),
        cvss=extract_cvss(advisory),
        cve_id=_text(advisory.get("cve_id")),
        ghsa_id=_text(advisory.get("ghsa_id")),
        manifest_path=_text(dependency.get("manifest_path")),
        url=_text(raw.get("html_url")) or "",
        created_at=_text(raw.get("created_at")),
        updated_at=_text(raw.get("updated_at")),
        state=(_text(raw.get("state")) or ALERT_STATE_UNKNOWN).lower(),
        dismissed_at=_text(raw.get("dismissed_at")),
        dismissed_reason=_text(raw.get("dismissed_reason")),
        dismissed_comment=_text(raw.get("dismissed_comment")),
    )
