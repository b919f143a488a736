"""Anthropic Claude provider.

Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import AsyncAnthropic

from ..base import LLMProvider
from ..models import LLMMessage, LLMResponse, StreamingResponse, usage_dict

# Anthropic requires max_tokens on every request
DEFAULT_MAX_TOKENS = 4096


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider.

    Hidden design decisions:
    - The system message is passed separately from the conversation
    - Usage is assembled from message_start and message_delta events
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncAnthropic(api_key=api_key, base_url=base_url, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    def _request_params(
        self,
        messages: list[LLMMessage],
        model: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        system_parts = [msg.content for msg in messages if msg.role == "system"]
        params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [
                {"role": msg.role, "content": msg.content}
                for msg in messages
                if msg.role != "system"
            ],
            "temperature": temperature,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
            **kwargs
        }
        if system_parts:
            params["system"] = "\n\n".join(system_parts)
        return params

    async def chat_completion(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        response = await self._client.messages.create(**params)

        usage = None
        if response.usage:
            usage = usage_dict(response.usage.input_tokens, response.usage.output_tokens)

        content = "".join(
            block.text for block in response.content if getattr(block, "text", None)
        )
        return LLMResponse(content=content, model=response.model, usage=usage)

    async def chat_completion_stream(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        stream = await self._client.messages.create(**params, stream=True)
        return StreamingResponse.wrap(lambda response: self._iter_events(stream, response))

    async def _iter_events(self, stream: Any, response: StreamingResponse) -> AsyncIterator[str]:
        input_tokens = 0
        output_tokens = 0

        async for event in stream:
            if event.type == "message_start":
                input_tokens = event.message.usage.input_tokens
            elif event.type == "message_delta":
                output_tokens = event.usage.output_tokens
            elif event.type == "content_block_delta" and getattr(event.delta, "text", None):
                yield event.delta.text

        response.set_usage(usage_dict(input_tokens, output_tokens))

    async def close(self) -> None:
        await self._client.close()
