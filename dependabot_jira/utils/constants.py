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


"""Domain constants (labels, summary / body markers, alert states)."""

LABEL_TRACKING = "dependabot"
DEFAULT_LABELS = "dependabot,security"

SUMMARY_MARKER = "Alert #{alert_id}"
BODY_MARKER = "Alert ID: {alert_id}"

DRY_RUN_ISSUE_KEY = "DRY-RUN-KEY"

ALERT_STATE_OPEN = "open"
ALERT_STATE_FIXED = "fixed"
ALERT_STATE_DISMISSED = "dismissed"
ALERT_STATE_NOT_FOUND = "not_found"
ALERT_STATE_UNKNOWN = "unknown"

# Alert states that make a tracked Jira issue eligible for auto-close.
RESOLVED_ALERT_STATES = frozenset({ALERT_STATE_FIXED, ALERT_STATE_DISMISSED, ALERT_STATE_NOT_FOUND})

DEFAULT_ISSUE_TYPE = "Bug"
DEFAULT_PRIORITY = "Medium"
DEFAULT_SEVERITY_THRESHOLD = "medium"
DEFAULT_CLOSE_TRANSITION = "Done"
DEFAULT_CLOSE_COMMENT = (
    "This issue has been automatically closed because the associated Dependabot alert was resolved."
)

DEFAULT_DUE_DAYS = {
    "critical": 1,
    "high": 7,
    "medium": 30,
    "low": 90,
}
