"""FastAPI application receiving GitHub App webhook deliveries.

Only one event starts work: a ``code review bot`` comment on a pull request.
Every other delivery is acknowledged with 200 so GitHub does not mark the hook
as failing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from github import GithubIntegration

from reviewbot_core.config import check_api_key, load_config, validate_config
from reviewbot_core.gh.app_auth import get_app_integration, get_installation_client
from reviewbot_core.models import ReviewTarget
from reviewbot_core.providers.base import BaseReviewer
from reviewbot_core.reviewer import ReviewSummary, get_reviewer, run_review
from reviewbot_core.trigger import match_trigger
from reviewbot_server.signature import verify_signature

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhook"


@dataclass(frozen=True)
class BotContext:
    """Process-wide, read-only handles shared by every delivery."""

    config: dict
    integration: GithubIntegration
    reviewer: Optional[BaseReviewer]

    def review(self, target: ReviewTarget) -> ReviewSummary:
        gh = get_installation_client(self.integration, target.installation_id)
        return run_review(gh, target, self.config, reviewer=self.reviewer)


def create_app(
    config: Optional[dict] = None,
    integration: Optional[GithubIntegration] = None,
    reviewer: Optional[BaseReviewer] = None,
) -> FastAPI:
    """Build the webhook application and the context it shares across requests."""
    config = validate_config(config if config is not None else load_config())
    if integration is None:
        integration = get_app_integration(config.get("github_app_id"), config.get("github_private_key"))
    if reviewer is None:
        check_api_key(config)
        reviewer = get_reviewer(config)

    if not config.get("webhook_secret"):
        if config.get("allow_unverified_webhooks"):
            logger.warning("GITHUB_WEBHOOK_SECRET is not set; accepting unsigned webhook deliveries")
        else:
            logger.error("GITHUB_WEBHOOK_SECRET is not set; every webhook delivery will be rejected")

    app = FastAPI(title="reviewbot")
    app.state.bot = BotContext(config=config, integration=integration, reviewer=reviewer)

    @app.get("/")
    async def health():
        return {"status": "ok"}

    @app.post(WEBHOOK_PATH)
    async def github_webhook(
        request: Request,
        x_github_event: Optional[str] = Header(None),
        x_hub_signature_256: Optional[str] = Header(None),
        x_github_delivery: Optional[str] = Header(None),
    ):
        """Handle GitHub webhook events"""
        bot: BotContext = request.app.state.bot
        body = await request.body()

        secret = bot.config.get("webhook_secret")
        if secret or not bot.config.get("allow_unverified_webhooks"):
            if not verify_signature(body, x_hub_signature_256, secret):
                logger.warning("Rejected delivery %s: invalid signature", x_github_delivery)
                return JSONResponse({"error": "Invalid signature"}, status_code=401)

        try:
            payload = json.loads(body) if body else None
        except ValueError:
            logger.warning("Delivery %s has a body that is not valid JSON", x_github_delivery)
            payload = None

        logger.info("GitHub webhook received - event: %s, delivery: %s", x_github_event, x_github_delivery)

        target = match_trigger(x_github_event, payload)
        if target is None:
            return JSONResponse({"message": "Event processed"})

        logger.info("Review requested for %s#%d", target.full_name, target.pull_number)
        try:
            await run_in_threadpool(bot.review, target)
        except Exception:
            logger.exception("Error processing webhook for %s#%d", target.full_name, target.pull_number)
            return JSONResponse({"error": "Internal server error"}, status_code=500)

        return JSONResponse({"message": "Code review completed"})

    @app.api_route(WEBHOOK_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def webhook_method_not_allowed():
        return JSONResponse({"error": "Method not allowed"}, status_code=405)

    return app
