"""OpenAI chat completions rewriter."""

from __future__ import annotations

import logging
from typing import Optional

import openai

from ..errors import RefinementError
from ..models.config import DEFAULT_REFINE_PROMPT

logger = logging.getLogger(__name__)


class OpenAIRewriter:
    """
    Sends Markdown to a chat model for formatting cleanup.

    Example:
        rewriter = OpenAIRewriter(api_key="sk-...", timeout=60)
        tidy = await rewriter.rewrite(markdown)
        await rewriter.close()
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.3,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        system_prompt: str = DEFAULT_REFINE_PROMPT,
        client: Optional[openai.AsyncOpenAI] = None,
    ) -> None:
        """
        Args:
            api_key: OpenAI API key
            model: Chat model name
            temperature: Sampling temperature
            base_url: Alternative API base URL (SDK default if None)
            timeout: Per-request timeout in seconds
            system_prompt: Editing instruction sent with the text
            client: Prebuilt client (built from the arguments above if None)
        """
        self._client = client or openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self._model = model
        self._temperature = temperature
        self._system_prompt = system_prompt

    def _build_messages(self, text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self._system_prompt},
            {"role": "user", "content": f"{self._system_prompt}\n\nOriginal content:\n{text}"},
        ]

    async def rewrite(self, text: str) -> str:
        """
        Rewrite ``text`` through the chat model.

        Raises:
            RefinementError: On any API error or a response without
                message content
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=self._build_messages(text),
                temperature=self._temperature,
            )
        except openai.OpenAIError as e:
            raise RefinementError(f"Refinement request failed: {e}") from e

        if not response.choices:
            raise RefinementError("Refinement response contained no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise RefinementError("Refinement response contained no text")
        return content

    async def close(self) -> None:
        """Release the underlying HTTP connections."""
        await self._client.close()
