#!/usr/bin/env python3
"""Tests for templates, filtering, and report formatting."""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from dep_alerts.models import Alert
from dep_alerts.report import build_report, format_alert, join_report, should_report
from dep_alerts.templates import (
    TemplateError,
    escape_backticks,
    render,
    render_template,
    unescape_backticks,
)


@pytest.fixture
def failed_alert():
    return Alert(
        number=3,
        update_error_body="module not found",
        update_error_title="Dependabot failed to update your dependencies",
        update_error_type="unknown_error",
        title="ReDoS in ansi-regex",
        advisory_link="https://github.com/advisories/GHSA-93q8-gq69-wqmw",
        description="ansi-regex is vulnerable to ReDoS.",
        package="ansi-regex",
        ecosystem="NPM",
        affected_versions=">= 4.0.0, < 4.1.1",
        alert_link="https://github.com/o/r/security/dependabot/3",
    )


def test_should_report_only_failed_updates(failed_alert):
    assert should_report(failed_alert)
    assert not should_report(replace(failed_alert, update_error_body=""))
    # Title alone does not count as a failure
    assert not should_report(
        replace(failed_alert, update_error_body="", update_error_title="x")
    )


def test_format_alert_title(failed_alert):
    draft = format_alert(failed_alert)

    assert draft.title == "[NPM] Security Alert: ansi-regex >= 4.0.0, < 4.1.1"
    assert draft.alert is failed_alert


def test_format_alert_body_order(failed_alert):
    body = format_alert(failed_alert).body

    link = "Original Alert: [#3 ReDoS in ansi-regex](https://github.com/o/r/security/dependabot/3)"
    positions = [
        body.index(link),
        body.index("## Description"),
        body.index("ansi-regex is vulnerable to ReDoS."),
        body.index("## Dependabot error"),
        body.index("⚠️**Dependabot failed to update your dependencies**"),
        body.index("module not found"),
    ]
    assert positions == sorted(positions)


def test_format_alert_keeps_markdown_verbatim(failed_alert):
    error = "```\nnpm ERR! <b>code</b> ERESOLVE\n```"
    body = format_alert(replace(failed_alert, update_error_body=error)).body

    assert error in body


def test_rendering_is_idempotent(failed_alert):
    first = format_alert(failed_alert)
    second = format_alert(failed_alert)

    assert first.title == second.title
    assert first.body == second.body


def test_build_report_filters_and_keeps_order(failed_alert):
    alerts = [
        replace(failed_alert, number=1, update_error_body="first"),
        replace(failed_alert, number=2, update_error_body=""),
        replace(failed_alert, number=3, update_error_body="third"),
    ]

    drafts = build_report(alerts)

    assert [d.alert.number for d in drafts] == [1, 3]


def test_join_report(failed_alert):
    drafts = build_report([failed_alert, failed_alert])

    assert join_report(drafts) == drafts[0].body + "\n" + drafts[1].body + "\n"
    assert join_report([]) == ""


def test_render_unknown_template():
    with pytest.raises(TemplateError):
        render("missing", {})


def test_render_missing_field():
    with pytest.raises(TemplateError, match="unknown field"):
        render("alert_title", {"ecosystem": "NPM"})


def test_render_malformed_template():
    with pytest.raises(TemplateError, match="malformed"):
        render_template("Alert {number", {"number": 1})
    with pytest.raises(TemplateError):
        render_template("Alert {}", {"number": 1})


def test_render_rejects_unsupported_record():
    with pytest.raises(TemplateError):
        render("alert_title", ["not", "a", "record"])


def test_escape_backticks():
    assert escape_backticks("run `npm ci`") == "run \\`npm ci\\`"
    assert escape_backticks("no ticks") == "no ticks"


def test_backtick_escape_round_trips():
    for text in ["", "`", "```code```", "a\\`b", "\\\\`", "plain", "`\n`\\"]:
        assert unescape_backticks(escape_backticks(text)) == text
