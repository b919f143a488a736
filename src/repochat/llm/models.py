from collections.abc import AsyncIterator, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Async iterator over streamed completion text that also records usage.

    Token usage is only known once the provider's stream has finished, so
    it is set by the provider's generator and read after iteration.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for chunk in stream:
            ...
        print(stream.usage)
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        self._iter = async_iter
        self._usage: dict[str, int] | None = None

    @classmethod
    def wrap(
        cls,
        generator_factory: Callable[["StreamingResponse"], AsyncIterator[str]]
    ) -> "StreamingResponse":
        """Build a response whose generator can report usage back to it.

        Args:
            generator_factory: Called with the new response, returns the chunk iterator
        """
        response = cls.__new__(cls)
        response._usage = None
        response._iter = generator_factory(response)
        return response

    @property
    def usage(self) -> dict[str, int] | None:
        """Token usage (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, int]) -> None:
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        return await self._iter.__anext__()


class LLMMessage(BaseModel):
    """A message sent to an LLM provider."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


def usage_dict(prompt_tokens: Any, completion_tokens: Any) -> dict[str, int]:
    """Normalize provider token counts into the usage mapping."""
    prompt = int(prompt_tokens or 0)
    completion = int(completion_tokens or 0)
    return {
        "prompt_tokens": prompt,
        "completion_tokens": completion,
        "total_tokens": prompt + completion,
    }
