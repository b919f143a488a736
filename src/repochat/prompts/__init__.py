"""Prompt templates.

Prompts are plain text files so they can be tuned without touching code.
A file at ./prompts/{name}.txt in the working directory overrides the
packaged one.
"""

from functools import lru_cache
from pathlib import Path

_PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt by name (without the .txt extension).

    Raises:
        FileNotFoundError: If the prompt exists in neither location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_answer_prompt() -> str:
    """System prompt for answering questions about a codebase."""
    return load_prompt("answer")


def get_summary_prompt() -> str:
    """System prompt for summarizing one source file during indexing."""
    return load_prompt("summary")


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "get_answer_prompt",
    "get_summary_prompt",
    "clear_cache",
]
