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


"""Dependabot → Jira sync engine.

Modules
-------
constants       Domain constants (tracking label, summary / body markers, alert states, defaults).
models          Alert, DueDays, SyncConfig, per-item results, collaborator protocols.
severity        Severity ordering and threshold filtering.
due_date        Severity-based due-date calculation from the alert creation date.
alert_parser    Raw Dependabot payload → canonical Alert normalisation.
templates       Jira wiki-markup description / comment templates.
issue_builder   Jira issue summary / description / fields and update-comment construction.
ticket_matcher  JQL building, existing-issue lookup, tracked-issue listing, alert-id extraction.
issue_sync      Core sync orchestration (create / update / skip, auto-close, run).
report          Result aggregation, summary line and action outputs.
config          CLI / ``INPUT_*`` configuration loading and validation.
"""
