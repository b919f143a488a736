"""Data models for project indexes."""

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from ..conversation.models import Source


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IndexedSource(BaseModel):
    """A project file with its summary embedding."""

    source: Source
    embedding: list[float] = Field(description="Embedding of the file summary")


class ProjectIndex(BaseModel):
    """All indexed files of one project."""

    project_id: str = Field(min_length=1)
    root: str = Field(default="", description="Directory the index was built from")
    embedding_model: str = Field(default="", description="Model that produced the embeddings")
    created_at: datetime = Field(default_factory=_utcnow)
    entries: list[IndexedSource] = Field(default_factory=list)

    def save(self, path: str | Path) -> Path:
        """Write the index as JSON, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: str | Path) -> "ProjectIndex":
        """Read an index written by save().

        Raises:
            FileNotFoundError: If path does not exist
            pydantic.ValidationError: If the file is not a valid index
        """
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


class IndexingResult(BaseModel):
    """Outcome of indexing a directory."""

    index: ProjectIndex
    failed_files: list[str] = Field(default_factory=list)
    skipped_files: list[str] = Field(default_factory=list)
    processing_time_seconds: float = 0.0
