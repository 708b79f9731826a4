from __future__ import annotations

from collections.abc import Iterable

from reviewbot_core.models import Finding, Review, Verdict

APPROVE_BODY = "Code review completed. No issues found! 👍"
REQUEST_CHANGES_BODY = "Code review completed. Please address the following comments:"


def decide_verdict(findings: Iterable[Finding]) -> Review:
    """Reduce the collected findings into a single review.

    Any finding at all requests changes, and each finding becomes its own comment.
    """
    findings = tuple(findings)
    if not findings:
        return Review(verdict=Verdict.APPROVE, body=APPROVE_BODY)
    return Review(verdict=Verdict.REQUEST_CHANGES, body=REQUEST_CHANGES_BODY, findings=findings)
