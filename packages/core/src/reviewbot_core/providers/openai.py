from __future__ import annotations

from openai import OpenAI

from reviewbot_core.providers.base import BaseReviewer

CONTINUE_PROMPT = "Your review was cut off. Continue exactly where you stopped, without repeating anything."


class OpenAIReviewer(BaseReviewer):
    MODEL = "gpt-4o"
    TEMPERATURE = 0.2
    CONTINUATION_SEPARATOR = " "

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        self.client = OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)

    def _call_api(self, system_prompt: str, messages: list[dict]) -> tuple[str, bool]:
        response = self.client.chat.completions.create(
            model=self.MODEL,
            messages=[{"role": "system", "content": system_prompt}, *messages],
            temperature=self.TEMPERATURE,
            max_tokens=self.max_tokens,
        )
        choice = response.choices[0]
        return choice.message.content or "", choice.finish_reason != "length"

    def _build_continuation(self, user_prompt: str, partial_answer: str) -> list[dict]:
        # Chat Completions starts a fresh reply after an assistant message, so ask for the rest explicitly.
        return [
            *super()._build_continuation(user_prompt, partial_answer),
            {"role": "user", "content": CONTINUE_PROMPT},
        ]
