"""Project indexing: summarize each file and embed the summaries."""

import time
from collections.abc import Callable
from pathlib import Path

from ..conversation.models import Source
from ..embedding import EmbeddingProvider
from ..llm import LLMMessage, LLMProvider
from .models import IndexedSource, IndexingResult, ProjectIndex

IGNORED_DIRECTORIES = frozenset({
    ".git", ".hg", ".svn", ".venv", "venv", "env", "node_modules",
    "__pycache__", ".mypy_cache", ".pytest_cache", ".tox", "dist", "build",
})

DEFAULT_MAX_FILE_BYTES = 100_000
# Characters of a file sent to the LLM when summarizing it
SUMMARY_INPUT_LIMIT = 12_000


class ProjectIndexer:
    """Builds a ProjectIndex from a directory.

    Hidden design decisions:
    - Which files are considered (pattern, ignored directories, size cap)
    - That the summary, not the code, is what gets embedded
    - Per-file failures are collected instead of aborting the run
    """

    def __init__(
        self,
        llm: LLMProvider,
        embedder: EmbeddingProvider,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        batch_size: int = 16,
        summary_prompt: str | None = None,
    ) -> None:
        if summary_prompt is None:
            from ..prompts import get_summary_prompt
            summary_prompt = get_summary_prompt()

        self._llm = llm
        self._embedder = embedder
        self._max_file_bytes = max_file_bytes
        self._batch_size = batch_size
        self._summary_prompt = summary_prompt
        self._debug_callback: Callable[[str, str, str], None] | None = None

    def set_debug_callback(self, callback: Callable[[str, str, str], None] | None) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Index", message)

    def collect_files(self, directory: Path, pattern: str = "**/*") -> list[Path]:
        """List candidate files under directory, sorted by path."""
        files = []
        for path in sorted(directory.glob(pattern)):
            if not path.is_file():
                continue
            relative = path.relative_to(directory)
            if any(
                part in IGNORED_DIRECTORIES or part.startswith(".")
                for part in relative.parts[:-1]
            ):
                continue
            files.append(path)
        return files

    async def summarize(self, file_name: str, code: str) -> str:
        """Ask the LLM for a short description of one file."""
        if len(code) > SUMMARY_INPUT_LIMIT:
            code = code[:SUMMARY_INPUT_LIMIT] + "\n... (truncated)"
        messages = [
            LLMMessage(role="system", content=self._summary_prompt),
            LLMMessage(role="user", content=f"File: {file_name}\n\n{code}"),
        ]
        response = await self._llm.chat_completion(messages, temperature=0.2, max_tokens=300)
        return response.content.strip()

    async def _embed_batch(self, batch: list[Source], failed: list[str]) -> list[IndexedSource]:
        """Embed one batch of summaries, falling back to one file at a time."""
        try:
            embeddings = await self._embedder.embed_batch([source.summary for source in batch])
            return [
                IndexedSource(source=source, embedding=embedding.tolist())
                for source, embedding in zip(batch, embeddings, strict=True)
            ]
        except Exception as e:
            self._debug("warning", f"Batch embedding failed, retrying per file: {e}")

        entries = []
        for source in batch:
            try:
                embedding = await self._embedder.embed_text(source.summary)
            except Exception as e:
                failed.append(f"{source.file_name}: {e}")
                self._debug("warning", f"Failed to embed {source.file_name}: {e}")
                continue
            entries.append(IndexedSource(source=source, embedding=embedding.tolist()))
        return entries

    async def index_directory(
        self,
        directory: Path,
        project_id: str | None = None,
        pattern: str = "**/*",
        on_progress: Callable[[int, int], None] | None = None,
    ) -> IndexingResult:
        """Index every matching text file under directory.

        Args:
            directory: Project root
            project_id: Identifier stored in the index (default: directory name)
            pattern: Glob pattern relative to directory
            on_progress: Optional callback (files_done, files_total)

        Raises:
            NotADirectoryError: If directory does not exist
        """
        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        start_time = time.time()
        project_id = project_id or directory.resolve().name
        files = self.collect_files(directory, pattern)
        total = len(files)
        self._debug("info", f"Indexing {total} file(s) from {directory}")

        sources: list[Source] = []
        failed: list[str] = []
        skipped: list[str] = []

        for i, path in enumerate(files, 1):
            file_name = path.relative_to(directory).as_posix()
            try:
                if path.stat().st_size > self._max_file_bytes:
                    skipped.append(file_name)
                    continue
                try:
                    code = path.read_text(encoding="utf-8")
                except UnicodeDecodeError:
                    skipped.append(file_name)
                    continue
                if not code.strip():
                    skipped.append(file_name)
                    continue

                summary = await self.summarize(file_name, code) or file_name
                sources.append(
                    Source(file_name=file_name, summary=summary, source_code=code, similarity=0.0)
                )
                self._debug("debug", f"Summarized {file_name}")
            except Exception as e:
                failed.append(f"{file_name}: {e}")
                self._debug("warning", f"Failed to index {file_name}: {e}")
            finally:
                if on_progress:
                    on_progress(i, total)

        entries = []
        for offset in range(0, len(sources), self._batch_size):
            batch = sources[offset:offset + self._batch_size]
            entries.extend(await self._embed_batch(batch, failed))

        index = ProjectIndex(
            project_id=project_id,
            root=str(directory.resolve()),
            embedding_model=getattr(self._embedder, "model", ""),
            entries=entries,
        )
        self._debug("info", f"Indexed {len(entries)} file(s), {len(failed)} failed")

        return IndexingResult(
            index=index,
            failed_files=failed,
            skipped_files=skipped,
            processing_time_seconds=time.time() - start_time,
        )
