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


"""Generic ``{{ placeholder }}`` template rendering engine used for Jira
wiki-markup bodies.

A template line starting with ``?`` is optional: it is emitted (without the
marker) only when every placeholder on it resolves to a non-empty value, and
dropped entirely otherwise.
"""

import re
from typing import Any


PLACEHOLDER_RE = re.compile(r"\{\{\s*([a-zA-Z0-9_\.]+)\s*\}\}")
OPTIONAL_MARKER = "?"


def _get_nested_value(data: dict[str, Any], dotted_key: str) -> Any:
    """Resolve a dot-separated key path against a nested dict."""
    cur: Any = data
    for part in (dotted_key or "").split("."):
        if not part:
            continue
        if isinstance(cur, dict) and part in cur:
            cur = cur.get(part)
        else:
            return ""
    if cur is None:
        return ""
    return cur


def _render_line(line: str, values: dict[str, Any]) -> str | None:
    optional = line.startswith(OPTIONAL_MARKER)
    if optional:
        line = line[len(OPTIONAL_MARKER):]
        for key in PLACEHOLDER_RE.findall(line):
            if str(_get_nested_value(values, key)).strip() == "":
                return None
    return PLACEHOLDER_RE.sub(lambda m: str(_get_nested_value(values, m.group(1))), line)


def render_template(template: str, values: dict[str, Any]) -> str:
    """Replace ``{{ key }}`` placeholders in *template* with values from *values*.

    Consecutive blank template lines (left behind by dropped optional lines)
    collapse into one; blank lines inside substituted values are kept.
    """
    lines: list[str] = []
    for line in template.splitlines():
        rendered = _render_line(line, values)
        if rendered is None:
            continue
        if rendered.strip() == "" and lines and lines[-1].strip() == "":
            continue
        lines.append(rendered)
    return "\n".join(lines).strip()
