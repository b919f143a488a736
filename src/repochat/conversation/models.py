"""Data models for the conversation state machine.

Messages are immutable snapshots. The store replaces the open message with
an updated copy on every mutation, so a renderer holding an older snapshot
never sees it change underneath it.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Source(BaseModel):
    """A cited code excerpt supplied by the answer service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(alias="fileName", description="Path of the cited file")
    summary: str = Field(default="", description="Short description of the file")
    source_code: str = Field(alias="sourceCode", description="The cited code")
    similarity: float = Field(description="Relevance score, higher is more relevant")


class MessageStatus(str, Enum):
    """Lifecycle state of a chat message."""

    OPEN = "open"            # Still receiving answer fragments
    COMPLETE = "complete"    # Stream ended (normally or after a mid-stream error)
    FAILED = "failed"        # Service call failed before producing a stream


class ChatMessage(BaseModel):
    """One conversational turn."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(description="The user's question")
    answer: str = Field(default="", description="Answer text accumulated so far")
    sources: tuple[Source, ...] = Field(default=(), description="Cited sources")
    status: MessageStatus = Field(default=MessageStatus.OPEN)

    @property
    def is_open(self) -> bool:
        return self.status is MessageStatus.OPEN


class ContextEntry(BaseModel):
    """A prior (query, answer) exchange sent as conversational context."""

    model_config = ConfigDict(frozen=True)

    query: str
    answer: str


ContextWindow = list[ContextEntry]


class ChangeKind(str, Enum):
    """Kind of mutation a store subscriber is notified about."""

    APPENDED = "appended"
    SOURCES_SET = "sources_set"
    FRAGMENT_APPENDED = "fragment_appended"
    CLOSED = "closed"
    CLEARED = "cleared"


class ConversationEvent(BaseModel):
    """Notification delivered to store subscribers after each mutation."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    index: int | None = Field(default=None, description="Affected message position")
    message: ChatMessage | None = Field(default=None, description="Snapshot after the change")


class QueryInput(BaseModel):
    """A query as typed by the user, validated before submission."""

    query: str = Field(min_length=1, description="Non-empty question text")
    project_id: str = Field(min_length=1)
