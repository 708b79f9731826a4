"""review command — run the review pipeline on a pull request from the terminal."""

from __future__ import annotations

import logging
import subprocess

import click
from github import Auth, Github
from rich.console import Console

from reviewbot_core.models import ReviewTarget
from reviewbot_core.reviewer import get_reviewer, run_review

console = Console()
logger = logging.getLogger(__name__)


def _gh_cli_token() -> str | None:
    """Token of the current `gh` CLI session, or None without a usable session."""
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    token = result.stdout.strip() if result.returncode == 0 else ""
    return token or None


def resolve_github_token(config: dict) -> str | None:
    # Terminal runs use a personal token, not the App installation.
    token = config.get("github_token")
    if token:
        return token
    token = _gh_cli_token()
    if token:
        logger.debug("Using the GitHub token from the gh CLI session")
    return token


@click.command("review")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--model",
    type=click.Choice(["anthropic", "openai"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option("--no-ai", "no_ai", is_flag=True, help="Run only the diff-size and TODO checks.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print findings without posting a review to GitHub.",
)
@click.pass_context
def review_cmd(ctx, repo: str, pr_number: int, model: str | None, no_ai: bool, shadow: bool):
    """Review a pull request and post APPROVE or REQUEST_CHANGES.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub personal access token (or use gh CLI)
      ANTHROPIC_API_KEY    Required when using --model anthropic
      OPENAI_API_KEY       Required when using --model openai
    """
    from reviewbot_core.config import check_api_key, load_config, validate_config

    config_path = ctx.obj.get("config_path") if ctx.obj else None
    overrides = {"model": model, "ai_review": False if no_ai else None}
    try:
        config = validate_config(load_config(config_path, overrides=overrides))
    except ValueError as e:
        raise click.UsageError(str(e))

    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise click.UsageError(f"--repo must be in owner/name format, got {repo!r}.")

    token = resolve_github_token(config)
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    try:
        check_api_key(config)
    except ValueError as e:
        raise click.UsageError(str(e))

    target = ReviewTarget(owner=owner, repo=name, pull_number=pr_number, installation_id=0)
    summary = run_review(
        Github(auth=Auth.Token(token)),
        target,
        config,
        reviewer=get_reviewer(config),
        shadow=shadow,
    )

    color = "green" if summary.total_findings == 0 else "yellow"
    action = "Review posted" if summary.posted else "Review not posted"
    console.print(
        f"\n[{color}]{action}: {summary.verdict.value}. "
        f"{summary.total_findings} finding(s) across {summary.files_checked} file(s).[/{color}]"
    )
