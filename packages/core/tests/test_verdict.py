"""Tests for the verdict reducer."""

import pytest

from reviewbot_core.models import Finding, Verdict
from reviewbot_core.verdict import APPROVE_BODY, REQUEST_CHANGES_BODY, decide_verdict


def _finding(path="a.py", body="issue"):
    return Finding(path=path, position=1, body=body, check="todo")


def test_no_findings_approves():
    review = decide_verdict([])
    assert review.verdict is Verdict.APPROVE
    assert review.body == APPROVE_BODY
    assert review.findings == ()
    assert review.api_comments() == []


@pytest.mark.parametrize("count", [1, 2, 5])
def test_any_finding_requests_changes(count):
    findings = [_finding(body=f"issue {i}") for i in range(count)]
    review = decide_verdict(findings)
    assert review.verdict is Verdict.REQUEST_CHANGES
    assert review.body == REQUEST_CHANGES_BODY
    assert len(review.api_comments()) == count


def test_one_comment_per_finding_in_order():
    findings = [_finding("a.py", "first"), _finding("a.py", "second"), _finding("b.py", "third")]
    review = decide_verdict(findings)
    assert review.api_comments() == [
        {"path": "a.py", "position": 1, "body": "first"},
        {"path": "a.py", "position": 1, "body": "second"},
        {"path": "b.py", "position": 1, "body": "third"},
    ]


def test_accepts_any_iterable():
    review = decide_verdict(f for f in [_finding()])
    assert review.verdict is Verdict.REQUEST_CHANGES


def test_verdict_values_match_github_review_events():
    assert Verdict.APPROVE.value == "APPROVE"
    assert Verdict.REQUEST_CHANGES.value == "REQUEST_CHANGES"
