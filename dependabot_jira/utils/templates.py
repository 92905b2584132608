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


"""Jira wiki-markup templates for issue descriptions and comments.

Lines prefixed with ``?`` are dropped when their placeholder is empty
(see :func:`shared.templates.render_template`).
"""

ISSUE_DESCRIPTION_TEMPLATE = """*Dependabot Security Alert #{{ id }}*

*Package:* {{ package }}
*Ecosystem:* {{ ecosystem }}
?*Manifest:* {{ manifest_path }}
*Severity:* {{ severity }}
*Vulnerable Version Range:* {{ vulnerable_version_range }}
*First Patched Version:* {{ first_patched_version }}

*Description:*
{{ description }}

?*CVSS Score:* {{ cvss }}
?*CVE ID:* {{ cve_id }}
?*GHSA ID:* {{ ghsa_id }}

*GitHub Alert URL:* {{ url }}

----
Alert ID: {{ id }}
_This issue was automatically created by the Dependabot Jira Sync._
"""


UPDATE_COMMENT_TEMPLATE = """*Dependabot Alert Updated*

The Dependabot alert #{{ id }} has been updated.

*Current Status:* {{ state }}
*Last Updated:* {{ updated_at }}

?*Dismissed At:* {{ dismissed_at }}
?*Dismissed Reason:* {{ dismissed_reason }}
?*Dismissed Comment:* {{ dismissed_comment }}

*GitHub Alert URL:* {{ url }}
"""
