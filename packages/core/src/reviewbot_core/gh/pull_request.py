from __future__ import annotations

import logging

from github import Github, GithubException

from reviewbot_core.models import ChangedFile, Review, Verdict

logger = logging.getLogger(__name__)


def get_repo(gh: Github, repo_name: str):
    return gh.get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_changed_files(pr) -> list[ChangedFile]:
    """List the pull request's changed files with their patch text and change counts."""
    return [ChangedFile(path=f.filename, patch=f.patch, changes=f.changes or 0) for f in pr.get_files()]


def get_file_content(repo, path: str, ref: str) -> str | None:
    """Return the UTF-8 content of ``path`` at ``ref``, or None if it cannot be read."""
    try:
        contents = repo.get_contents(path, ref=ref)
    except GithubException as e:
        logger.warning("Could not fetch %s at %s: %s", path, ref[:7], e)
        return None

    # A directory listing comes back as a list of ContentFile objects.
    if isinstance(contents, list):
        logger.warning("Could not fetch %s at %s: path is a directory", path, ref[:7])
        return None
    try:
        return contents.decoded_content.decode("utf-8")
    except (UnicodeDecodeError, AssertionError) as e:
        logger.warning("Could not decode %s at %s: %s", path, ref[:7], e)
        return None


def submit_review(pr, review: Review):
    """Post ``review`` on the pull request as a single GitHub review."""
    if review.verdict is Verdict.APPROVE:
        return pr.create_review(body=review.body, event=review.verdict.value)
    return pr.create_review(body=review.body, event=review.verdict.value, comments=review.api_comments())
