"""Google Gemini provider.

Reference: https://github.com/googleapis/python-genai

Gemini occasionally returns empty candidates (safety filtering or service
hiccups); non-streaming calls are retried a few times when that happens.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import types

from ..base import LLMProvider
from ..models import LLMMessage, LLMResponse, StreamingResponse, usage_dict

# Relaxed so that security-related source code is not blocked
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]


def _text_of(response: Any) -> str:
    """Join the text parts of the first candidate; empty if there is none."""
    if not response.candidates:
        return ""
    content = response.candidates[0].content
    if not content or not content.parts:
        return ""
    return "".join(part.text for part in content.parts if getattr(part, "text", None))


class GeminiProvider(LLMProvider):
    """Google Gemini provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        max_retries: int = 3,
        **client_kwargs: Any
    ):
        self._model = model
        self._max_retries = max_retries
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    def _prepare(
        self,
        messages: list[LLMMessage],
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> tuple[list[types.Content], types.GenerateContentConfig]:
        system_parts = []
        contents = []
        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
            else:
                role = "model" if msg.role == "assistant" else "user"
                contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))

        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction="\n\n".join(system_parts) or None,
            safety_settings=DEFAULT_SAFETY_SETTINGS,
            # Source code in prompts otherwise triggers UNEXPECTED_TOOL_CALL
            tool_config=types.ToolConfig(
                function_calling_config=types.FunctionCallingConfig(mode="NONE")
            ),
            **kwargs
        )
        if max_tokens is not None:
            config.max_output_tokens = max_tokens
        return contents, config

    @staticmethod
    def _usage(metadata: Any) -> dict[str, int] | None:
        if not metadata:
            return None
        return usage_dict(metadata.prompt_token_count, metadata.candidates_token_count)

    async def chat_completion(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        model_to_use = model or self._model
        contents, config = self._prepare(messages, temperature, max_tokens, **kwargs)

        content = ""
        usage = None
        for attempt in range(self._max_retries):
            response = await self._client.aio.models.generate_content(
                model=model_to_use, contents=contents, config=config
            )
            usage = self._usage(response.usage_metadata)
            content = _text_of(response)
            if content:
                break
            if attempt < self._max_retries - 1:
                await asyncio.sleep(0.5 * (attempt + 1))

        return LLMResponse(content=content, model=model_to_use, usage=usage)

    async def chat_completion_stream(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        contents, config = self._prepare(messages, temperature, max_tokens, **kwargs)
        stream = await self._client.aio.models.generate_content_stream(
            model=model or self._model, contents=contents, config=config
        )
        return StreamingResponse.wrap(lambda response: self._iter_chunks(stream, response))

    async def _iter_chunks(self, stream: Any, response: StreamingResponse) -> AsyncIterator[str]:
        async for chunk in stream:
            usage = self._usage(chunk.usage_metadata)
            if usage:
                response.set_usage(usage)
            text = _text_of(chunk)
            if text:
                yield text

    async def close(self) -> None:
        # genai.Client holds no resources that need explicit closing
        pass
