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


"""Shared low-level utilities – logging control, date helpers, and the
GitHub Actions input / output plumbing (``INPUT_*`` variables,
``$GITHUB_OUTPUT`` and ``$GITHUB_STEP_SUMMARY`` files).
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone

from .errors import ConfigurationError

_verbose_enabled = False

TRUE_VALUES = {"true", "True", "TRUE"}
FALSE_VALUES = {"false", "False", "FALSE"}


def parse_runner_debug() -> bool:
    raw = os.getenv("RUNNER_DEBUG")
    if raw is None or raw == "":
        return False
    if raw not in {"0", "1"}:
        raise ConfigurationError("RUNNER_DEBUG must be '0' or '1' when set")
    return raw == "1"


def set_verbose_enabled(value: bool) -> None:
    global _verbose_enabled
    _verbose_enabled = bool(value)


def is_verbose() -> bool:
    """Return the current verbose-logging state."""
    return _verbose_enabled


def vprint(msg: str) -> None:
    if _verbose_enabled:
        print(msg)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> str:
    return utc_now().date().isoformat()


def parse_iso_datetime(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp (``Z`` suffix accepted) into an aware datetime.

    Naive values are assumed to be UTC.
    """
    text = (value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: str | None) -> str:
    """Render an ISO timestamp as ``YYYY-MM-DD HH:MM UTC``; unparseable values are returned as-is."""
    if not value:
        return ""
    try:
        return parse_iso_datetime(value).astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    except ValueError:
        return value


def input_env_name(name: str) -> str:
    """Return the environment variable GitHub Actions uses for input *name*."""
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str, default: str = "") -> str:
    return os.environ.get(input_env_name(name), "").strip() or default


def parse_bool_input(name: str, raw: str | None, default: bool) -> bool:
    """Parse a boolean input the same way the Actions toolkit does.

    Only ``true|True|TRUE`` and ``false|False|FALSE`` are accepted; an empty
    value yields *default*.
    """
    value = (raw or "").strip()
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}. "
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def write_outputs(outputs: dict[str, str]) -> None:
    """Write step outputs to ``$GITHUB_OUTPUT`` (no-op outside of Actions)."""
    path = os.getenv("GITHUB_OUTPUT")
    if not path:
        vprint("GITHUB_OUTPUT not set – outputs are only printed")
        return

    with open(path, "a", encoding="utf-8") as fh:
        for name, value in outputs.items():
            text = str(value)
            if "\n" in text:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                fh.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
            else:
                fh.write(f"{name}={text}\n")


def append_step_summary(markdown: str) -> None:
    path = os.getenv("GITHUB_STEP_SUMMARY")
    if not path:
        return
    with open(path, "a", encoding="utf-8") as fh:
        fh.write(markdown.rstrip() + "\n")
