"""Decide whether an inbound webhook delivery should start a review."""

from __future__ import annotations

import logging

from reviewbot_core.models import ReviewTarget

logger = logging.getLogger(__name__)

ISSUE_COMMENT_EVENT = "issue_comment"
CREATED_ACTION = "created"
TRIGGER_PHRASE = "code review bot"


def is_trigger_comment(body) -> bool:
    """True when the comment, trimmed and lowercased, is exactly the trigger phrase."""
    if not isinstance(body, str):
        return False
    return body.strip().lower() == TRIGGER_PHRASE


def match_trigger(event_name: str | None, payload) -> ReviewTarget | None:
    """Return the review target for a trigger comment on a pull request, else None.

    Never raises: a payload missing any required field is treated as a
    non-matching event.
    """
    if event_name != ISSUE_COMMENT_EVENT or not isinstance(payload, dict):
        return None
    if payload.get("action") != CREATED_ACTION:
        return None

    try:
        comment_body = payload["comment"]["body"]
        issue = payload["issue"]
        full_name = payload["repository"]["full_name"]
        installation_id = payload["installation"]["id"]
    except (KeyError, TypeError):
        logger.debug("Ignoring malformed issue_comment payload")
        return None

    if not is_trigger_comment(comment_body):
        return None
    # Plain issues carry no pull_request reference.
    if not isinstance(issue, dict) or issue.get("pull_request") is None:
        return None

    owner, sep, repo = str(full_name).partition("/")
    if not sep or not owner or not repo or "/" in repo:
        return None
    try:
        pull_number = int(issue["number"])
        installation_id = int(installation_id)
    except (KeyError, TypeError, ValueError):
        return None

    return ReviewTarget(owner=owner, repo=repo, pull_number=pull_number, installation_id=installation_id)
