"""
Native Google Gemini client using google-genai SDK.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from google import genai
from google.genai import types

from energy_wise.llm_base_client import LlmClient, ProviderResponseError
from energy_wise.messages import (
    LlmAIMessage,
    LlmHumanMessage,
    LlmSystemMessage,
)

logger = logging.getLogger(__name__)


def _build_contents(
    messages: List[Union[LlmSystemMessage, LlmHumanMessage, LlmAIMessage]],
) -> Tuple[Optional[str], List[types.Content]]:
    """Convert internal messages to google-genai Content format.

    Gemini takes the system instruction separately from the turn list, so
    system messages are lifted out. Assistant turns use the "model" role.

    Returns:
        Tuple of (system_instruction, list of Content objects)
    """
    system_instruction = None
    contents: List[types.Content] = []

    for m in messages:
        if isinstance(m, LlmSystemMessage):
            system_instruction = m.content
        elif isinstance(m, LlmHumanMessage):
            contents.append(types.Content(
                role="user",
                parts=[types.Part.from_text(text=m.content)],
            ))
        elif isinstance(m, LlmAIMessage):
            contents.append(types.Content(
                role="model",
                parts=[types.Part.from_text(text=m.content)],
            ))

    return system_instruction, contents


def _extract_text(response_parts) -> str:
    """Join the text parts of a response candidate."""
    text_parts = []
    for part in response_parts or []:
        if getattr(part, "text", None):
            text_parts.append(part.text)
    return "".join(text_parts)


def _to_ai_message(response) -> LlmAIMessage:
    if not response.candidates or not response.candidates[0].content:
        raise ProviderResponseError("Gemini returned no candidates")

    text = _extract_text(response.candidates[0].content.parts)

    metadata = {}
    if getattr(response, "usage_metadata", None):
        metadata = {
            "input_tokens": getattr(response.usage_metadata, "prompt_token_count", 0),
            "output_tokens": getattr(response.usage_metadata, "candidates_token_count", 0),
        }

    return LlmAIMessage(content=text, response_metadata=metadata)


class GoogleClient(LlmClient):
    """Native Google Gemini client using google-genai SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> None:
        super().__init__(model, temperature, max_tokens)
        self._api_key = api_key
        self._client = genai.Client(api_key=api_key)

    def _build_config(self, system_instruction: Optional[str]) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            system_instruction=system_instruction,
        )

    # ── synchronous invoke ──────────────────────────────────────────────── #

    def invoke(
        self,
        messages: List[Union[LlmSystemMessage, LlmHumanMessage, LlmAIMessage]],
    ) -> LlmAIMessage:
        system_instruction, contents = _build_contents(messages)

        response = self._client.models.generate_content(
            model=self.model,
            contents=contents,
            config=self._build_config(system_instruction),
        )
        return _to_ai_message(response)

    # ── async invoke ────────────────────────────────────────────────────── #

    async def ainvoke(
        self,
        messages: List[Union[LlmSystemMessage, LlmHumanMessage, LlmAIMessage]],
    ) -> LlmAIMessage:
        system_instruction, contents = _build_contents(messages)

        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=self._build_config(system_instruction),
        )
        result = _to_ai_message(response)
        logger.debug(f"[GOOGLE] {self.model} usage: {result.response_metadata}")
        return result
