"""Provider factory functions for CLI.

Centralizes creation of embedder and LLM instances from environment variables
and loading of saved project indexes. Hides configuration details from
command implementations.
"""

import os
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from ..embedding import EmbeddingProvider, create_embedding_provider
from ..llm import LLMProvider, create_llm_provider
from ..service import ProjectIndex

# Default console for output
_console = Console()

# Environment variable holding the API key, per LLM provider
_LLM_KEYS = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

# Environment variable overriding the model, per LLM provider
_LLM_MODELS = {
    "openai": ("OPENAI_CHAT_MODEL", "gpt-4o-mini"),
    "anthropic": ("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
    "claude": ("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
    "gemini": ("GEMINI_MODEL", "gemini-2.5-flash"),
}


def llm_provider_name() -> str:
    return os.getenv("LLM_PROVIDER", "deepseek").lower()


def llm_key_variable(provider: str) -> str | None:
    """Name of the environment variable holding the provider's API key."""
    return _LLM_KEYS.get(provider)


def get_embedder(console: Console | None = None) -> EmbeddingProvider:
    """Create embedding provider from environment variables.

    Raises:
        typer.Exit: If OPENAI_API_KEY is not set

    Environment variables:
        OPENAI_API_KEY: OpenAI API key (required)
        EMBEDDING_MODEL: Embedding model (default: text-embedding-3-small)
    """
    con = console or _console
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        con.print("[red]Error: OPENAI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)

    model = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
    return create_embedding_provider("openai", api_key=api_key, model=model)


def get_llm(console: Console | None = None) -> LLMProvider | None:
    """Create LLM provider from environment variables.

    Returns:
        LLM provider instance, or None if not configured

    Environment variables:
        LLM_PROVIDER: Provider type (openai, deepseek, anthropic, gemini; default: deepseek)
        OPENAI_API_KEY / OPENAI_CHAT_MODEL: OpenAI key and model (default: gpt-4o-mini)
        DEEPSEEK_API_KEY: DeepSeek API key
        ANTHROPIC_API_KEY / ANTHROPIC_MODEL: Anthropic key and model
        GEMINI_API_KEY / GEMINI_MODEL: Gemini key and model (default: gemini-2.5-flash)
    """
    con = console or _console
    provider = llm_provider_name()

    key_var = llm_key_variable(provider)
    if key_var is None:
        con.print(f"[red]Error: Unknown LLM provider: {provider}[/red]")
        return None

    api_key = os.getenv(key_var)
    if not api_key:
        con.print(f"[yellow]Warning: {key_var} not set, LLM features disabled[/yellow]")
        return None

    config = {"api_key": api_key}
    if provider in _LLM_MODELS:
        model_var, default_model = _LLM_MODELS[provider]
        config["model"] = os.getenv(model_var, default_model)
    return create_llm_provider(provider, **config)


def require_llm(console: Console | None = None) -> LLMProvider:
    """Get LLM provider, exiting if it is not configured.

    Raises:
        typer.Exit: If LLM provider is not configured
    """
    con = console or _console
    llm = get_llm(con)
    if not llm:
        con.print("[red]Error: LLM provider not configured[/red]")
        raise typer.Exit(code=1)
    return llm


async def open_providers(
    console: Console | None = None,
) -> tuple[LLMProvider, EmbeddingProvider]:
    """Create the LLM and embedding providers used by a command.

    The LLM client is closed again if the embedder is not configured.

    Raises:
        typer.Exit: If either provider is not configured
    """
    llm = require_llm(console)
    try:
        embedder = get_embedder(console)
    except typer.Exit:
        await llm.close()
        raise
    return llm, embedder


def load_index(path: Path, console: Console | None = None) -> ProjectIndex:
    """Load a saved project index, exiting with an error if it is unusable.

    Raises:
        typer.Exit: If the file is missing or not a valid index
    """
    con = console or _console
    try:
        return ProjectIndex.load(path)
    except FileNotFoundError:
        con.print(f"[red]Error: Index file not found: {path}[/red]")
        raise typer.Exit(code=1)
    except ValidationError as e:
        con.print(f"[red]Error: {path} is not a valid index ({e.error_count()} errors)[/red]")
        raise typer.Exit(code=1)
