"""GitHub App authentication.

The App's JWT identity (app id + private key) is long-lived and built once per
process. Each webhook delivery exchanges its installation id for a
short-lived installation token scoped to that installation's repositories.
"""

from __future__ import annotations

import logging

from github import Auth, Github, GithubIntegration

logger = logging.getLogger(__name__)


def get_app_integration(app_id: str | int, private_key: str) -> GithubIntegration:
    if not app_id or not private_key:
        raise ValueError("GITHUB_APP_ID and GITHUB_PRIVATE_KEY must both be set.")
    return GithubIntegration(auth=Auth.AppAuth(int(app_id), private_key))


def get_installation_client(integration: GithubIntegration, installation_id: int) -> Github:
    """Exchange ``installation_id`` for an access token and return a client using it."""
    access = integration.get_access_token(installation_id)
    logger.debug("Obtained installation token for installation %d", installation_id)
    return Github(auth=Auth.Token(access.token))
