"""Unit tests for the embedding module."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import numpy as np
import pytest

from repochat.embedding import (
    EmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)


class TestEmbeddingProviderInterface:
    """Tests for the abstract EmbeddingProvider interface."""

    def test_provider_is_abstract(self):
        """Test that EmbeddingProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            EmbeddingProvider()  # type: ignore


class TestOpenAIEmbeddingProvider:
    """Tests for OpenAIEmbeddingProvider."""

    def test_dimension_property(self):
        """Test the dimension reported for a known model."""
        small = OpenAIEmbeddingProvider(api_key="fake-key", model="text-embedding-3-small")
        large = OpenAIEmbeddingProvider(api_key="fake-key", model="text-embedding-3-large")

        assert small.dimension == 1536
        assert large.dimension == 3072
        assert small.model == "text-embedding-3-small"

    def test_unknown_model_raises_error(self):
        """Test that an unknown embedding model is rejected."""
        with pytest.raises(ValueError, match="Unknown model"):
            OpenAIEmbeddingProvider(api_key="fake-key", model="unknown-model")

    @pytest.mark.asyncio
    async def test_embed_batch_preserves_input_order(self):
        """Test that batch results are ordered by input index."""
        provider = OpenAIEmbeddingProvider(api_key="fake-key")
        provider._client.embeddings.create = AsyncMock(return_value=SimpleNamespace(data=[
            SimpleNamespace(index=1, embedding=[0.0, 1.0]),
            SimpleNamespace(index=0, embedding=[1.0, 0.0]),
        ]))

        vectors = await provider.embed_batch(["first", "second"])

        assert vectors[0].tolist() == [1.0, 0.0]
        assert vectors[1].tolist() == [0.0, 1.0]
        assert vectors[0].dtype == np.float32

    @pytest.mark.asyncio
    async def test_embed_batch_empty(self):
        """Test that an empty batch makes no request."""
        provider = OpenAIEmbeddingProvider(api_key="fake-key")
        assert await provider.embed_batch([]) == []

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_embed_text_real_api(self):
        """Test embedding against the real API."""
        import os

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            pytest.skip("OPENAI_API_KEY not set")

        async with OpenAIEmbeddingProvider(api_key=api_key) as provider:
            embedding = await provider.embed_text("def login(user): ...")

        assert embedding.shape == (1536,)
        assert not np.all(embedding == 0)


class TestEmbeddingFactory:
    """Tests for create_embedding_provider."""

    def test_create_openai_provider(self):
        """Test creating an OpenAI provider via factory."""
        provider = create_embedding_provider("openai", api_key="fake-key")
        assert isinstance(provider, OpenAIEmbeddingProvider)

    def test_unknown_provider_raises(self):
        """Test that an unknown provider name is rejected."""
        with pytest.raises(ValueError, match="Unsupported embedding provider"):
            create_embedding_provider("unknown", api_key="fake-key")

    def test_missing_api_key_raises(self):
        """Test that the factory requires an API key."""
        with pytest.raises(TypeError):
            create_embedding_provider("openai")
