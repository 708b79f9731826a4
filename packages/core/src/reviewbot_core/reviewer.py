"""Core PR review orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial

from github import Github
from rich.console import Console

from reviewbot_core.checks import DEFAULT_MAX_CHANGED_LINES, collect_findings
from reviewbot_core.gh.pull_request import get_changed_files, get_file_content, get_pull, get_repo, submit_review
from reviewbot_core.models import Finding, ReviewTarget, Verdict
from reviewbot_core.providers.anthropic import AnthropicReviewer
from reviewbot_core.providers.base import BaseReviewer
from reviewbot_core.providers.openai import OpenAIReviewer
from reviewbot_core.verdict import decide_verdict

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class ReviewSummary:
    """Result returned by run_review."""

    repo: str
    pr_number: int
    head_sha: str
    verdict: Verdict
    findings: list[Finding] = field(default_factory=list)
    files_checked: int = 0
    posted: bool = False

    @property
    def total_findings(self) -> int:
        return len(self.findings)


def get_reviewer(config: dict) -> BaseReviewer | None:
    """Build the AI reviewer named by ``config["model"]``, or None when AI review is off."""
    if not config.get("ai_review", True):
        return None

    options = {
        "max_turns": config.get("max_turns"),
        "max_tokens": config.get("max_tokens"),
        "timeout": config.get("ai_timeout"),
    }
    model = config["model"]
    if model == "anthropic":
        return AnthropicReviewer(api_key=config["anthropic_api_key"], **options)
    if model == "openai":
        return OpenAIReviewer(api_key=config["openai_api_key"], **options)
    raise ValueError(f"Unknown model provider: {model!r}. Choose 'anthropic' or 'openai'.")


def print_shadow_findings(findings: list[Finding]) -> None:
    """Print findings to the terminal without posting to GitHub."""
    if not findings:
        console.print("[green]Shadow mode: no findings. The review would APPROVE.[/green]")
        return
    console.print(f"\n[bold]Shadow review — {len(findings)} finding(s) (not posted)[/bold]\n")
    for f in findings:
        console.print(f"[bold cyan]{f.path}[/bold cyan]  position [bold]{f.position}[/bold]  [dim]{f.check}[/dim]")
        console.print(f"  {f.body}")
        console.print()


def run_review(
    gh: Github,
    target: ReviewTarget,
    config: dict,
    reviewer: BaseReviewer | None = None,
    shadow: bool = False,
) -> ReviewSummary:
    """Review one pull request and post the verdict.

    Errors fetching the PR or posting the review propagate to the caller; no
    partial review is ever submitted. Failures inside a single file's checks
    are absorbed by the collector.
    """
    this_repo = get_repo(gh, target.full_name)
    this_pr = get_pull(this_repo, target.pull_number)
    head_sha = this_pr.head.sha

    files = get_changed_files(this_pr)
    logger.info("Reviewing %s#%d at %s (%d file(s))", target.full_name, target.pull_number, head_sha[:7], len(files))

    findings = collect_findings(
        files,
        head_sha,
        partial(get_file_content, this_repo),
        reviewer=reviewer,
        max_changed_lines=config.get("max_changed_lines", DEFAULT_MAX_CHANGED_LINES),
    )
    review = decide_verdict(findings)

    summary = ReviewSummary(
        repo=target.full_name,
        pr_number=target.pull_number,
        head_sha=head_sha,
        verdict=review.verdict,
        findings=list(review.findings),
        files_checked=len(files),
    )

    if shadow:
        print_shadow_findings(summary.findings)
        return summary

    submit_review(this_pr, review)
    summary.posted = True
    logger.info(
        "Review posted on %s#%d: %s with %d comment(s)",
        target.full_name,
        target.pull_number,
        review.verdict.value,
        len(review.findings),
    )
    return summary
