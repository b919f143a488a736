"""Unit tests for the LLM module."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from repochat.llm import (
    AnthropicProvider,
    DeepSeekProvider,
    LLMMessage,
    LLMProvider,
    OpenAIProvider,
    StreamingResponse,
    create_llm_provider,
)


def _chunk(content=None, usage=None):
    choices = [SimpleNamespace(delta=SimpleNamespace(content=content))] if content is not None else []
    return SimpleNamespace(choices=choices, usage=usage)


async def _aiter(items):
    for item in items:
        yield item


class TestLLMProviderInterface:
    """Tests for the abstract LLMProvider interface."""

    def test_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore


class TestStreamingResponse:
    """Tests for StreamingResponse."""

    @pytest.mark.asyncio
    async def test_iterates_chunks(self):
        """Test iterating a streaming response."""
        response = StreamingResponse(_aiter(["a", "b"]))

        assert [chunk async for chunk in response] == ["a", "b"]
        assert response.usage is None

    @pytest.mark.asyncio
    async def test_wrap_lets_generator_set_usage(self):
        """Test that a wrapped generator can record usage."""
        async def _gen(response):
            yield "text"
            response.set_usage({"total_tokens": 3})

        response = StreamingResponse.wrap(_gen)

        assert [chunk async for chunk in response] == ["text"]
        assert response.usage == {"total_tokens": 3}


class TestOpenAIProvider:
    """Tests for OpenAIProvider with a mocked client."""

    @pytest.mark.asyncio
    async def test_stream_yields_content_and_usage(self):
        """Test that the stream yields content and captures usage."""
        provider = OpenAIProvider(api_key="fake-key")
        usage = SimpleNamespace(prompt_tokens=10, completion_tokens=4)
        provider._client.chat.completions.create = AsyncMock(
            return_value=_aiter([_chunk("The "), _chunk(""), _chunk("answer"), _chunk(usage=usage)])
        )

        stream = await provider.chat_completion_stream([LLMMessage(role="user", content="q")])

        assert [chunk async for chunk in stream] == ["The ", "answer"]
        assert stream.usage == {"prompt_tokens": 10, "completion_tokens": 4, "total_tokens": 14}
        kwargs = provider._client.chat.completions.create.await_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["messages"] == [{"role": "user", "content": "q"}]

    @pytest.mark.asyncio
    async def test_stream_request_errors_raise_before_iteration(self):
        """Test that request errors surface before iteration starts."""
        provider = OpenAIProvider(api_key="fake-key")
        provider._client.chat.completions.create = AsyncMock(side_effect=ConnectionError("refused"))

        with pytest.raises(ConnectionError):
            await provider.chat_completion_stream([LLMMessage(role="user", content="q")])

    @pytest.mark.asyncio
    async def test_chat_completion(self):
        """Test a non-streaming chat completion."""
        provider = OpenAIProvider(api_key="fake-key", model="gpt-4o-mini")
        completion = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="summary"))],
            model="gpt-4o-mini",
            usage=SimpleNamespace(prompt_tokens=5, completion_tokens=2),
        )
        provider._client.chat.completions.create = AsyncMock(return_value=completion)

        response = await provider.chat_completion(
            [LLMMessage(role="user", content="q")], max_tokens=50
        )

        assert response.content == "summary"
        assert response.usage["total_tokens"] == 7
        assert provider._client.chat.completions.create.await_args.kwargs["max_tokens"] == 50


class TestLLMFactory:
    """Tests for create_llm_provider."""

    def test_create_deepseek_provider(self):
        """Test creating a DeepSeek provider via factory."""
        provider = create_llm_provider("deepseek", api_key="fake-key")
        assert isinstance(provider, DeepSeekProvider)
        assert provider.model == "deepseek-chat"

    def test_create_openai_provider_with_model(self):
        """Test creating an OpenAI provider with a custom model."""
        provider = create_llm_provider("openai", api_key="fake-key", model="gpt-4o")
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o"

    def test_claude_alias(self):
        """Test that "claude" selects the Anthropic provider."""
        assert isinstance(create_llm_provider("claude", api_key="fake-key"), AnthropicProvider)

    def test_unknown_provider_raises(self):
        """Test that an unknown provider name is rejected."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("unknown", api_key="fake-key")

    def test_missing_api_key_raises(self):
        """Test that the factory requires an API key."""
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("openai")
