"""Errors raised by the conversation state machine."""


class ConversationError(Exception):
    """Base class for conversation state errors."""


class OpenMessageError(ConversationError):
    """Raised when a new message is appended while another is still open."""

    def __init__(self, open_index: int) -> None:
        super().__init__(
            f"Message {open_index} is still receiving an answer; "
            f"wait for it to complete before submitting another query"
        )
        self.open_index = open_index


class MessageNotOpenError(ConversationError):
    """Raised when writing to a message that is not the open message."""

    def __init__(self, index: int, open_index: int | None) -> None:
        if open_index is None:
            detail = "no message is open"
        else:
            detail = f"the open message is {open_index}"
        super().__init__(f"Message {index} is not open ({detail})")
        self.index = index
        self.open_index = open_index
