from __future__ import annotations

from anthropic import Anthropic
from anthropic.types import TextBlock

from reviewbot_core.providers.base import BaseReviewer


class AnthropicReviewer(BaseReviewer):
    MODEL = "claude-sonnet-4-20250514"
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        # Retries are left to the webhook sender, so the SDK must not retry either.
        self.client = Anthropic(api_key=api_key, timeout=self.timeout, max_retries=0)

    def _call_api(self, system_prompt: str, messages: list[dict]) -> tuple[str, bool]:
        response = self.client.messages.create(
            model=self.MODEL,
            system=system_prompt,
            messages=messages,
            temperature=self.TEMPERATURE,
            max_tokens=self.max_tokens,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks), response.stop_reason != "max_tokens"
