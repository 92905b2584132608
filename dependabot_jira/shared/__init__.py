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


"""API-facing building blocks shared by the sync engine.

Modules
-------
common          Logging control, date helpers, GitHub Actions input / output plumbing.
errors          Error taxonomy (configuration, validation, transport, transitions).
models          Jira ``Ticket`` dataclass.
templates       ``{{ placeholder }}`` rendering with optional lines.
github_alerts   Dependabot alert listing / status lookup via PyGithub.
jira_issues     Jira REST v2 client (search, create, comment, transitions) via requests.
"""
