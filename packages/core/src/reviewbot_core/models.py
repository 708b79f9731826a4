"""Data models shared by the trigger, check and verdict stages.

Every object here lives for a single webhook delivery and is never mutated
after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class ReviewTarget:
    """The pull request a matching comment asked us to review."""

    owner: str
    repo: str
    pull_number: int
    installation_id: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ChangedFile:
    """One entry of the pull request's changed-files listing."""

    path: str
    patch: str | None
    changes: int = 0


@dataclass(frozen=True)
class Finding:
    """A single observation about one file, posted as one review comment."""

    path: str
    position: int
    body: str
    check: str = ""

    def as_comment(self) -> dict:
        return {"path": self.path, "position": self.position, "body": self.body}


class Verdict(str, Enum):
    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"


@dataclass(frozen=True)
class Review:
    """A review ready for submission.

    REQUEST_CHANGES iff ``findings`` is non-empty. Build it with
    ``decide_verdict`` rather than directly.
    """

    verdict: Verdict
    body: str
    findings: tuple[Finding, ...] = field(default_factory=tuple)

    def api_comments(self) -> list[dict]:
        return [f.as_comment() for f in self.findings]
