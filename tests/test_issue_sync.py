import pytest

from dependabot_jira.shared.errors import TransitionNotAvailableError
from dependabot_jira.shared.models import Ticket
from dependabot_jira.utils.alert_parser import parse_alert
from dependabot_jira.utils.constants import DEFAULT_CLOSE_COMMENT, DRY_RUN_ISSUE_KEY
from dependabot_jira.utils.issue_sync import (
    auto_close_resolved,
    close_issue,
    decide_action,
    ensure_issue,
    run_sync,
    sync_alerts,
)
from dependabot_jira.utils.models import Action, Outcome


def test_decide_action():
    ticket = Ticket(key="SEC-1")
    assert decide_action(None, True) == Action.CREATE
    assert decide_action(None, False) == Action.CREATE
    assert decide_action(ticket, True) == Action.UPDATE
    assert decide_action(ticket, False) == Action.SKIP


def test_no_alerts_reports_zero(jira, alert_source, make_config, clock):
    report = run_sync(make_config(), alert_source, jira, now=clock)

    assert report.outputs() == {
        "issues-created": "0",
        "issues-updated": "0",
        "issues-closed": "0",
        "alerts-processed": "0",
        "summary": "No alerts to process",
    }
    assert jira.writes == []


def test_new_critical_alert_creates_issue(jira, alert_source, make_raw_alert, make_config, clock):
    alert_source.alerts = [make_raw_alert(1, "critical", created_at="2023-01-10T08:00:00Z")]

    report = run_sync(make_config(), alert_source, jira, now=clock)

    created = jira.created()
    assert len(created) == 1
    fields = created[0]
    assert fields["summary"] == "Alert #1: Prototype pollution in lodash"
    assert fields["duedate"] == "2023-01-11"
    assert fields["labels"] == ["dependabot", "security"]
    assert fields["project"] == {"key": "SEC"}
    assert fields["issuetype"] == {"name": "Bug"}
    assert fields["priority"] == {"name": "Medium"}
    assert report.outputs()["issues-created"] == "1"
    assert report.outputs()["alerts-processed"] == "1"
    assert report.summary() == "Created 1 new issues, updated 0 existing issues and closed 0 resolved issues"


def test_second_run_updates_instead_of_creating(jira, alert_source, make_raw_alert, make_config, clock):
    alert_source.alerts = [make_raw_alert(1), make_raw_alert(2, "high")]
    config = make_config()

    run_sync(config, alert_source, jira, now=clock)
    second = run_sync(config, alert_source, jira, now=clock)

    assert len(jira.created()) == 2
    assert second.created == 0
    assert second.updated == 2
    assert len(jira.comments("SEC-1")) == 1
    assert "The Dependabot alert #1 has been updated." in jira.comments("SEC-1")[0][2]


def test_update_existing_false_skips(jira, alert_source, make_raw_alert, make_config, clock):
    jira.add_issue("Alert #1: Prototype pollution in lodash")
    alert_source.alerts = [make_raw_alert(1)]

    report = run_sync(make_config(update_existing=False), alert_source, jira, now=clock)

    assert report.skipped == 1
    assert report.updated == 0
    assert report.created == 0
    assert jira.writes == []
    assert report.results[0].outcome == Outcome.SKIPPED
    assert report.results[0].issue_key == "SEC-1"


def test_fuzzy_search_hits_are_ignored(jira, alert_source, make_raw_alert, make_config, clock):
    jira.add_issue("Alert #12: Unrelated advisory")
    alert_source.alerts = [make_raw_alert(1)]

    report = run_sync(make_config(auto_close=False), alert_source, jira, now=clock)

    assert report.created == 1
    assert jira.comments("SEC-1") == []


def test_duplicate_alert_in_one_run_creates_once(jira, make_raw_alert, make_config, clock):
    # Search is unavailable, so only the in-run record prevents a duplicate.
    jira.fail_search = True
    results = sync_alerts([make_raw_alert(3), make_raw_alert(3)], jira, make_config(), now=clock)

    assert [r.outcome for r in results] == [Outcome.CREATED, Outcome.UPDATED]
    assert len(jira.created()) == 1
    assert results[0].issue_key == results[1].issue_key


def test_search_failure_still_creates(jira, alert_source, make_raw_alert, make_config, clock, capsys):
    jira.fail_search = True
    alert_source.alerts = [make_raw_alert(4)]

    report = run_sync(make_config(), alert_source, jira, now=clock)

    assert report.created == 1
    err = capsys.readouterr().err
    assert "WARN: Failed to search for existing issue for alert #4" in err
    assert "WARN: Failed to list tracked issues in SEC" in err


def test_one_failing_alert_does_not_stop_the_run(jira, alert_source, make_raw_alert, make_config, clock, capsys):
    jira.fail_create_for = {2}
    alert_source.alerts = [make_raw_alert(1), make_raw_alert(2), make_raw_alert(3)]

    report = run_sync(make_config(auto_close=False), alert_source, jira, now=clock)

    assert report.processed == 3
    assert report.created == 2
    assert report.failed == 1
    failed = [r for r in report.results if not r.ok]
    assert failed[0].item == "alert #2"
    assert "ERROR: Failed to process alert #2" in capsys.readouterr().err


def test_malformed_alert_is_recorded_as_failure(jira, make_raw_alert, make_config, clock):
    results = sync_alerts([{"state": "open"}, make_raw_alert(5)], jira, make_config(), now=clock)

    assert not results[0].ok
    assert results[1].outcome == Outcome.CREATED


def test_severity_threshold_filters_alerts(jira, alert_source, make_raw_alert, make_config, clock):
    alert_source.alerts = [
        make_raw_alert(1, "low"),
        make_raw_alert(2, "medium"),
        make_raw_alert(3, "high"),
        make_raw_alert(4, "critical"),
    ]

    report = run_sync(make_config(severity_threshold="high", auto_close=False), alert_source, jira, now=clock)

    assert report.processed == 2
    assert sorted(f["summary"].split(":")[0] for f in jira.created()) == ["Alert #3", "Alert #4"]


@pytest.mark.parametrize("exclude_dismissed,expected", [(True, False), (False, True)])
def test_dismissed_alerts_requested_per_config(
    jira, alert_source, make_config, clock, exclude_dismissed, expected
):
    run_sync(make_config(exclude_dismissed=exclude_dismissed), alert_source, jira, now=clock)
    assert alert_source.list_calls == [{"repo": "acme/widgets", "include_dismissed": expected, "state": None}]


def test_alert_listing_failure_degrades(jira, alert_source, make_config, clock, capsys):
    alert_source.fail_list = True
    jira.add_issue("Alert #9: Old advisory")
    alert_source.statuses[9] = "fixed"

    report = run_sync(make_config(), alert_source, jira, now=clock)

    assert report.processed == 0
    assert report.closed == 1
    assert "WARN: Failed to fetch Dependabot alerts" in capsys.readouterr().err


def test_dry_run_makes_no_writes(jira, alert_source, make_raw_alert, make_config, clock, capsys):
    jira.add_issue("Alert #5: Old advisory")
    jira.add_issue("Alert #2: Prototype pollution in lodash")
    alert_source.statuses[5] = "fixed"
    alert_source.alerts = [make_raw_alert(1), make_raw_alert(2)]

    report = run_sync(make_config(dry_run=True), alert_source, jira, now=clock)

    assert jira.writes == []
    assert report.created == 1
    assert report.updated == 1
    assert report.closed == 1
    assert report.summary() == "DRY RUN: Would create 1 issues, update 1 issues and close 1 issues"
    assert report.results[0].issue_key == DRY_RUN_ISSUE_KEY
    out = capsys.readouterr().out
    assert "DRY-RUN: would create Jira issue: 'Alert #1: Prototype pollution in lodash'" in out
    assert "DRY-RUN: would close Jira issue SEC-1" in out


def test_auto_close_by_alert_status(jira, alert_source, make_config, capsys):
    gone = jira.add_issue("Alert #10: Removed dependency")
    still_open = jira.add_issue("Alert #11: Still vulnerable")
    odd = jira.add_issue("Alert #12: Odd state")
    alert_source.statuses.update({10: "not_found", 11: "open", 12: "auto_dismissed"})

    results = auto_close_resolved(jira, alert_source, make_config())

    outcomes = {r.issue_key: r.outcome for r in results}
    assert outcomes == {gone: Outcome.CLOSED, still_open: Outcome.KEPT_OPEN, odd: Outcome.KEPT_OPEN}
    assert jira.issues[gone]["closed"]
    assert not jira.issues[still_open]["closed"]
    assert not jira.issues[odd]["closed"]
    assert "WARN: Alert #12 has unexpected status 'auto_dismissed'" in capsys.readouterr().err


@pytest.mark.parametrize("status", ["fixed", "dismissed", "not_found"])
def test_resolved_states_close(jira, alert_source, make_config, status):
    key = jira.add_issue("Alert #20: Something")
    alert_source.statuses[20] = status

    results = auto_close_resolved(jira, alert_source, make_config())

    assert results[0].outcome == Outcome.CLOSED
    assert jira.writes == [
        ("comment", key, DEFAULT_CLOSE_COMMENT),
        ("transition", key, "31"),
    ]


def test_auto_close_runs_without_alerts(jira, alert_source, make_config, clock):
    jira.add_issue("Alert #3: Old advisory")
    alert_source.statuses[3] = "fixed"

    report = run_sync(make_config(), alert_source, jira, now=clock)

    assert alert_source.status_calls == [3]
    assert report.outputs()["issues-closed"] == "1"
    assert report.summary() == "Created 0 new issues, updated 0 existing issues and closed 1 resolved issues"


def test_auto_close_disabled(jira, alert_source, make_config, clock):
    jira.add_issue("Alert #3: Old advisory")
    alert_source.statuses[3] = "fixed"

    report = run_sync(make_config(auto_close=False), alert_source, jira, now=clock)

    assert alert_source.status_calls == []
    assert report.closed == 0
    assert not any("labels" in jql for _, jql in jira.reads)


def test_auto_close_ignores_untracked_and_closed_issues(jira, alert_source, make_config):
    jira.add_issue("Alert #1: No tracking label", labels=("security",))
    jira.add_issue("Alert #2: Already done", closed=True)

    results = auto_close_resolved(jira, alert_source, make_config())

    assert results == []
    assert alert_source.status_calls == []


def test_description_marker_is_used_when_summary_has_none(jira, alert_source, make_config):
    key = jira.add_issue("Upgrade lodash", "Some context\nAlert ID: 77")
    alert_source.statuses[77] = "fixed"

    results = auto_close_resolved(jira, alert_source, make_config())

    assert alert_source.status_calls == [77]
    assert results[0].issue_key == key
    assert results[0].outcome == Outcome.CLOSED


def test_unparseable_issue_is_skipped(jira, alert_source, make_config, capsys):
    key = jira.add_issue("Manual security ticket", "No marker here")

    results = auto_close_resolved(jira, alert_source, make_config())

    assert results[0].outcome == Outcome.UNPARSEABLE
    assert alert_source.status_calls == []
    assert f"WARN: Could not extract alert id from issue {key}" in capsys.readouterr().err


def test_missing_transition_fails_only_that_issue(jira, alert_source, make_config, capsys):
    stuck = jira.add_issue("Alert #1: One")
    fine = jira.add_issue("Alert #2: Two")
    jira.transitions[stuck] = [{"id": "5", "name": "Resolve Issue"}]
    alert_source.statuses.update({1: "fixed", 2: "dismissed"})

    results = auto_close_resolved(jira, alert_source, make_config())

    by_key = {r.issue_key: r for r in results}
    assert isinstance(by_key[stuck].error, TransitionNotAvailableError)
    assert "Resolve Issue" in str(by_key[stuck].error)
    assert by_key[fine].outcome == Outcome.CLOSED
    assert not any(w[1] == stuck for w in jira.writes)
    assert f"ERROR: Failed to auto-close {stuck}" in capsys.readouterr().err


def test_close_issue_matches_transition_case_insensitively(jira, make_config):
    key = jira.add_issue("Alert #1: One")
    jira.transitions[key] = [{"id": "41", "name": "DONE"}]

    close_issue(jira, key, make_config(close_transition="done", close_comment=""))

    assert jira.writes == [("transition", key, "41")]


def test_close_issue_error_lists_available_transitions(jira, make_config):
    key = jira.add_issue("Alert #1: One")
    jira.transitions[key] = []

    with pytest.raises(TransitionNotAvailableError) as exc_info:
        close_issue(jira, key, make_config(close_transition="Closed"))

    assert str(exc_info.value) == f"Transition 'Closed' not available for {key}. Available transitions: (none)"


def test_ensure_issue_records_handled(jira, make_raw_alert, make_config, clock):
    handled = {}
    alert = parse_alert(make_raw_alert(6, "low", created_at="2023-01-10T08:00:00Z"))

    result = ensure_issue(alert, jira, make_config(), handled, now=clock)

    assert result.outcome == Outcome.CREATED
    assert handled[6].key == result.issue_key
    assert jira.created()[0]["duedate"] == "2023-04-10"


def test_non_dict_alert_payload_is_isolated(jira, make_raw_alert, make_config, clock):
    results = sync_alerts([None, "bogus", make_raw_alert(5)], jira, make_config(), now=clock)

    assert [r.ok for r in results] == [False, False, True]
    assert results[0].item == "alert #?"
    assert results[2].outcome == Outcome.CREATED


def test_run_sync_skips_malformed_payloads(jira, alert_source, make_raw_alert, make_config, clock, capsys):
    alert_source.alerts = ["bogus", make_raw_alert(1), {"number": 2, "security_advisory": "high"}]

    report = run_sync(make_config(auto_close=False), alert_source, jira, now=clock)

    assert report.created == 1
    assert report.processed == 1
    assert "WARN: Ignoring malformed alert payload: 'bogus'" in capsys.readouterr().err
