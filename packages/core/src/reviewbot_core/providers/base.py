"""Base reviewer implementing the Template Method pattern.

All providers share the same review algorithm:
    review() → _build_system_prompt() + _build_user_prompt()
             → _call_api() once per turn, up to max_turns
             → joined, stripped review text

Subclasses implement two things only:
  - __init__: build and store the SDK client
  - _call_api: make one raw API call and return (text, finished)

A turn that stops because it ran out of tokens is continued from the partial
answer until the turn budget is spent; _build_continuation decides how the
partial answer is handed back to the model. Errors propagate to the caller; there
is no retry here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# Shared defaults — subclasses may override as class attributes if needed.
_MAX_TURNS = 1
_MAX_TOKENS = 1024
_TIMEOUT = 60.0

MAX_TURNS_LIMIT = 3

SYSTEM_PROMPT = "You are an experienced senior software engineer reviewing a pull request."

REVIEW_PROMPT = """Please review this code and provide feedback on:
1. Code quality and best practices
2. Potential bugs or issues
3. Security concerns
4. Performance considerations

Here's the code to review (`{file_name}`):
```
{file_content}
```

Be concise and to the point."""


class BaseReviewer(ABC):
    MAX_TURNS: int = _MAX_TURNS
    MAX_TOKENS: int = _MAX_TOKENS
    TIMEOUT: float = _TIMEOUT
    # Inserted between a partial answer and its continuation.
    CONTINUATION_SEPARATOR: str = ""

    def __init__(self, max_turns: int | None = None, max_tokens: int | None = None, timeout: float | None = None):
        self.max_turns = max_turns or self.MAX_TURNS
        self.max_tokens = max_tokens or self.MAX_TOKENS
        self.timeout = timeout or self.TIMEOUT
        if not 1 <= self.max_turns <= MAX_TURNS_LIMIT:
            raise ValueError(f"max_turns must be between 1 and {MAX_TURNS_LIMIT}, got {self.max_turns}")

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def review(self, file_name: str, file_content: str) -> str:
        """Return the model's review of one file, or an empty string.

        Raises whatever the SDK raises on API errors and timeouts; the check
        that calls this turns the failure into a finding.
        """
        system = self._build_system_prompt()
        user = self._build_user_prompt(file_name, file_content)
        messages = [{"role": "user", "content": user}]

        answer = ""
        for turn in range(1, self.max_turns + 1):
            text, finished = self._call_api(system, messages)
            if turn > 1:
                answer += self.CONTINUATION_SEPARATOR
            answer += text or ""
            if finished:
                break
            if turn < self.max_turns:
                logger.debug("%s: response truncated, continuing (turn %d/%d)", self.name, turn, self.max_turns)
                # The partial answer is sent back without trailing whitespace.
                answer = answer.rstrip()
                messages = self._build_continuation(user, answer)
        return answer.strip()

    @property
    def name(self) -> str:
        return self.__class__.__name__

    # ------------------------------------------------------------------ #
    # Abstract — implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, system_prompt: str, messages: list[dict]) -> tuple[str, bool]:
        """Make a single API call.

        Returns the generated text and whether the model finished its answer
        (False when it stopped on the token limit).
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _build_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def _build_user_prompt(self, file_name: str, file_content: str) -> str:
        return REVIEW_PROMPT.format(file_name=file_name, file_content=file_content)

    def _build_continuation(self, user_prompt: str, partial_answer: str) -> list[dict]:
        """Messages for the next turn after a truncated answer.

        The default prefills the partial answer as the assistant turn so the
        model resumes mid-answer. Providers that cannot resume a trailing
        assistant message override this.
        """
        return [
            {"role": "user", "content": user_prompt},
            {"role": "assistant", "content": partial_answer},
        ]
