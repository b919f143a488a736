"""Tests for project indexing."""
from unittest.mock import AsyncMock, Mock

import pytest

from conftest import FakeEmbedder
from repochat.llm import LLMProvider, LLMResponse
from repochat.service import ProjectIndexer


def _mock_llm(summary: str = "Summary of the file") -> Mock:
    llm = Mock(spec=LLMProvider)
    llm.chat_completion = AsyncMock(
        return_value=LLMResponse(content=f"  {summary}\n", model="test-model")
    )
    return llm


class RejectingEmbedder(FakeEmbedder):
    """Embedder that refuses empty input and a set of rejected texts."""

    def __init__(self, rejected: set[str] | None = None):
        super().__init__()
        self.rejected = rejected or set()

    async def embed_text(self, text: str, **kwargs):
        if not text:
            raise ValueError("input must be non-empty")
        if text in self.rejected:
            raise ValueError("input rejected")
        return await super().embed_text(text)


@pytest.fixture
def project_dir(tmp_path, sample_python_code):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "calc.py").write_text(sample_python_code)
    (tmp_path / "README.md").write_text("# Calculator\n")
    (tmp_path / "empty.py").write_text("   \n")
    (tmp_path / "logo.bin").write_bytes(b"\xff\xfe\x00\x81")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("[core]\n")
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "index.js").write_text("module.exports = {}\n")
    return tmp_path


class TestProjectIndexer:
    """Tests for ProjectIndexer."""

    def test_collect_files_skips_hidden_and_vendor_dirs(self, project_dir):
        """Test that hidden and vendor directories are skipped."""
        indexer = ProjectIndexer(_mock_llm(), FakeEmbedder(), summary_prompt="S")

        files = indexer.collect_files(project_dir)

        names = sorted(p.relative_to(project_dir).as_posix() for p in files)
        assert names == ["README.md", "empty.py", "logo.bin", "src/calc.py"]

    def test_collect_files_with_pattern(self, project_dir):
        """Test collecting files with a glob pattern."""
        indexer = ProjectIndexer(_mock_llm(), FakeEmbedder(), summary_prompt="S")

        files = indexer.collect_files(project_dir, "**/*.py")

        assert [p.name for p in files] == ["empty.py", "calc.py"]

    @pytest.mark.asyncio
    async def test_index_directory_builds_entries(self, project_dir):
        """Test indexing a directory into embedded entries."""
        embedder = FakeEmbedder()
        indexer = ProjectIndexer(_mock_llm(), embedder, summary_prompt="S")

        result = await indexer.index_directory(project_dir, project_id="calc")

        index = result.index
        assert index.project_id == "calc"
        assert index.embedding_model == "fake-embedding"
        assert sorted(e.source.file_name for e in index.entries) == ["README.md", "src/calc.py"]
        calc = next(e for e in index.entries if e.source.file_name == "src/calc.py")
        assert calc.source.summary == "Summary of the file"
        assert "class Calculator" in calc.source.source_code
        assert len(calc.embedding) == embedder.dimension
        assert sorted(result.skipped_files) == ["empty.py", "logo.bin"]
        assert result.failed_files == []

    @pytest.mark.asyncio
    async def test_project_id_defaults_to_directory_name(self, project_dir):
        """Test that the project id defaults to the directory name."""
        indexer = ProjectIndexer(_mock_llm(), FakeEmbedder(), summary_prompt="S")

        result = await indexer.index_directory(project_dir, pattern="*.md")

        assert result.index.project_id == project_dir.name

    @pytest.mark.asyncio
    async def test_oversized_files_skipped(self, project_dir):
        """Test that files over the size limit are skipped."""
        indexer = ProjectIndexer(_mock_llm(), FakeEmbedder(), max_file_bytes=20, summary_prompt="S")

        result = await indexer.index_directory(project_dir, pattern="**/*.py")

        assert "src/calc.py" in result.skipped_files
        assert result.index.entries == []

    @pytest.mark.asyncio
    async def test_summary_failure_collected(self, project_dir):
        """Test that a summary failure is collected per file."""
        llm = _mock_llm()
        llm.chat_completion.side_effect = [RuntimeError("rate limited"), LLMResponse(content="ok", model="m")]
        indexer = ProjectIndexer(llm, FakeEmbedder(), summary_prompt="S")

        result = await indexer.index_directory(project_dir, pattern="**/*.md")

        assert result.failed_files == ["README.md: rate limited"]
        assert result.index.entries == []

    @pytest.mark.asyncio
    async def test_embeddings_requested_in_batches(self, tmp_path):
        """Test that summaries are embedded in batches."""
        for i in range(5):
            (tmp_path / f"m{i}.py").write_text(f"x = {i}\n")
        embedder = FakeEmbedder()
        indexer = ProjectIndexer(_mock_llm(), embedder, batch_size=2, summary_prompt="S")

        await indexer.index_directory(tmp_path)

        assert [len(batch) for batch in embedder.batches] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_progress_reported_per_file(self, project_dir):
        """Test that progress is reported once per file."""
        indexer = ProjectIndexer(_mock_llm(), FakeEmbedder(), summary_prompt="S")
        progress = []

        await indexer.index_directory(
            project_dir, on_progress=lambda done, total: progress.append((done, total))
        )

        assert progress == [(1, 4), (2, 4), (3, 4), (4, 4)]

    @pytest.mark.asyncio
    async def test_not_a_directory_raises(self, tmp_path):
        """Test that a missing directory raises."""
        indexer = ProjectIndexer(_mock_llm(), FakeEmbedder(), summary_prompt="S")

        with pytest.raises(NotADirectoryError):
            await indexer.index_directory(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_summary_prompt_sent_as_system_message(self, tmp_path):
        """Test that the summary prompt is the system message."""
        (tmp_path / "a.py").write_text("x = 1\n")
        llm = _mock_llm()
        indexer = ProjectIndexer(llm, FakeEmbedder(), summary_prompt="SUMMARIZE")

        await indexer.index_directory(tmp_path)

        messages = llm.chat_completion.await_args.args[0]
        assert messages[0].role == "system"
        assert messages[0].content == "SUMMARIZE"
        assert "File: a.py" in messages[1].content

    @pytest.mark.asyncio
    async def test_blank_summary_falls_back_to_file_name(self, tmp_path):
        """Test that a blank LLM summary is embedded as the file name."""
        (tmp_path / "a.py").write_text("x = 1\n")
        (tmp_path / "b.py").write_text("y = 2\n")
        llm = _mock_llm()
        llm.chat_completion.side_effect = [
            LLMResponse(content="Defines x", model="m"),
            LLMResponse(content="   ", model="m"),
        ]
        embedder = RejectingEmbedder()
        indexer = ProjectIndexer(llm, embedder, summary_prompt="S")

        result = await indexer.index_directory(tmp_path)

        assert [e.source.summary for e in result.index.entries] == ["Defines x", "b.py"]
        assert result.failed_files == []

    @pytest.mark.asyncio
    async def test_embedding_failure_collected_per_file(self, tmp_path):
        """Test that a failing batch is retried per file and only the bad file fails."""
        (tmp_path / "a.py").write_text("x = 1\n")
        (tmp_path / "b.py").write_text("y = 2\n")
        llm = _mock_llm()
        llm.chat_completion.side_effect = [
            LLMResponse(content="Defines x", model="m"),
            LLMResponse(content="REJECT", model="m"),
        ]
        embedder = RejectingEmbedder(rejected={"REJECT"})
        indexer = ProjectIndexer(llm, embedder, summary_prompt="S")

        result = await indexer.index_directory(tmp_path)

        assert [e.source.file_name for e in result.index.entries] == ["a.py"]
        assert result.failed_files == ["b.py: input rejected"]
