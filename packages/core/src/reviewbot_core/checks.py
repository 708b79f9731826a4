"""Per-file checks that turn a pull request's changed files into findings.

Checks run in a fixed order for every file that has patch text:

    diff size → TODO text → AI review (only when a reviewer is configured)

Each check runs inside its own failure boundary so one broken check never
stops the others, and findings come out in file order, then check order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from reviewbot_core.models import ChangedFile, Finding

if TYPE_CHECKING:
    from reviewbot_core.providers.base import BaseReviewer

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHANGED_LINES = 300
ANCHOR_POSITION = 1

DIFF_SIZE_CHECK = "diff_size"
TODO_CHECK = "todo"
AI_REVIEW_CHECK = "ai_review"

TODO_MARKER = "TODO"
TODO_MESSAGE = "⚠️ Found TODO comments in the code. Please ensure these are addressed before merging."
AI_REVIEW_PREFIX = "🤖 AI Code Review:\n\n"
AI_REVIEW_ERROR_MESSAGE = "⚠️ Error getting AI code review. Please try again later."

ContentFetcher = Callable[[str, str], str | None]


def anchor_position(changed_file: ChangedFile) -> int:
    """Diff position a finding for ``changed_file`` is attached to.

    Always the first line of the patch for now; replace this with real
    diff-line mapping to move comments next to the code they describe.
    """
    return ANCHOR_POSITION


def _finding(changed_file: ChangedFile, body: str, check: str) -> Finding:
    return Finding(path=changed_file.path, position=anchor_position(changed_file), body=body, check=check)


def check_diff_size(changed_file: ChangedFile, max_changed_lines: int = DEFAULT_MAX_CHANGED_LINES) -> Finding | None:
    if changed_file.changes <= max_changed_lines:
        return None
    return _finding(
        changed_file,
        f"⚠️ This file has {changed_file.changes} changed lines (more than {max_changed_lines}). "
        "Consider splitting it into smaller, focused changes that are easier to review.",
        DIFF_SIZE_CHECK,
    )


def check_todo(changed_file: ChangedFile) -> Finding | None:
    # Only the patch text is inspected, never the full file.
    if TODO_MARKER not in (changed_file.patch or ""):
        return None
    return _finding(changed_file, TODO_MESSAGE, TODO_CHECK)


def check_ai_review(
    changed_file: ChangedFile,
    head_sha: str,
    fetch_content: ContentFetcher,
    reviewer: BaseReviewer,
) -> Finding | None:
    """Ask the AI reviewer about the file's full content at ``head_sha``.

    A file whose content cannot be fetched is skipped without a finding, but a
    failed AI call is reported as a finding of its own.
    """
    content = fetch_content(changed_file.path, head_sha)
    if not content:
        logger.info("Skipping AI review for %s: content unavailable", changed_file.path)
        return None

    try:
        review = reviewer.review(changed_file.path, content)
    except Exception:
        logger.exception("Error getting AI review for %s", changed_file.path)
        return _finding(changed_file, AI_REVIEW_ERROR_MESSAGE, AI_REVIEW_CHECK)

    if not review:
        return None
    return _finding(changed_file, f"{AI_REVIEW_PREFIX}{review}", AI_REVIEW_CHECK)


def review_file(
    changed_file: ChangedFile,
    head_sha: str,
    fetch_content: ContentFetcher,
    reviewer: BaseReviewer | None = None,
    max_changed_lines: int = DEFAULT_MAX_CHANGED_LINES,
) -> list[Finding]:
    """Run every applicable check on one file and return its findings in check order."""
    if not changed_file.patch:
        # Binary or metadata-only changes.
        return []

    checks: list[tuple[str, Callable[[], Finding | None]]] = [
        (DIFF_SIZE_CHECK, lambda: check_diff_size(changed_file, max_changed_lines)),
        (TODO_CHECK, lambda: check_todo(changed_file)),
    ]
    if reviewer is not None:
        checks.append((AI_REVIEW_CHECK, lambda: check_ai_review(changed_file, head_sha, fetch_content, reviewer)))

    findings = []
    for name, run_check in checks:
        try:
            finding = run_check()
        except Exception:
            logger.exception("Check %s failed for %s", name, changed_file.path)
            continue
        if finding is not None:
            findings.append(finding)
    return findings


def collect_findings(
    files: Iterable[ChangedFile],
    head_sha: str,
    fetch_content: ContentFetcher,
    reviewer: BaseReviewer | None = None,
    max_changed_lines: int = DEFAULT_MAX_CHANGED_LINES,
) -> list[Finding]:
    findings: list[Finding] = []
    for changed_file in files:
        file_findings = review_file(changed_file, head_sha, fetch_content, reviewer, max_changed_lines)
        logger.info("%s: %d finding(s)", changed_file.path, len(file_findings))
        findings.extend(file_findings)
    return findings
