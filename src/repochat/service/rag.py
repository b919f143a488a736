"""Retrieval-augmented answer service."""

from collections.abc import Callable

from ..conversation.models import ContextWindow, Source
from ..llm import LLMMessage, LLMProvider
from .base import AnswerResponse, AnswerService
from .retriever import DEFAULT_RETRIEVAL_LIMIT, SourceRetriever

# Character limits applied when building the prompt
HISTORY_ANSWER_LIMIT = 1500
SOURCE_CODE_LIMIT = 8000


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "\n... (truncated)"


class RetrievalAnswerService(AnswerService):
    """Answers questions from the most similar project files.

    Hidden design decisions:
    - Prompt layout (history turns, then cited files and question)
    - How much of each file and prior answer is sent
    - The cited files are exactly the files shown to the model
    """

    def __init__(
        self,
        llm: LLMProvider,
        retriever: SourceRetriever,
        system_prompt: str | None = None,
        retrieval_limit: int = DEFAULT_RETRIEVAL_LIMIT,
        temperature: float = 0.3,
    ) -> None:
        """Initialize the service.

        Args:
            llm: Provider that generates the streamed answer
            retriever: Finds the files to cite
            system_prompt: Overrides the packaged answer prompt
            retrieval_limit: Maximum number of cited files
            temperature: Sampling temperature for the answer
        """
        if system_prompt is None:
            from ..prompts import get_answer_prompt
            system_prompt = get_answer_prompt()

        self._llm = llm
        self._retriever = retriever
        self._system_prompt = system_prompt
        self._retrieval_limit = retrieval_limit
        self._temperature = temperature
        self._debug_callback: Callable[[str, str, str], None] | None = None

    def set_debug_callback(self, callback: Callable[[str, str, str], None] | None) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Answer", message)

    async def answer(
        self,
        query_text: str,
        project_id: str,
        history: ContextWindow,
    ) -> AnswerResponse:
        citations = await self._retriever.retrieve(
            project_id, query_text, limit=self._retrieval_limit
        )
        self._debug(
            "info",
            f"Retrieved {len(citations)} source(s) for project '{project_id}'"
        )

        messages = self.build_messages(query_text, history, citations)
        self._debug("debug", f"Prompt: {sum(len(m.content) for m in messages)} chars")

        stream = await self._llm.chat_completion_stream(messages, temperature=self._temperature)
        return AnswerResponse(citations=citations, stream=stream)

    def build_messages(
        self,
        query_text: str,
        history: ContextWindow,
        citations: list[Source],
    ) -> list[LLMMessage]:
        """Build the LLM conversation for one question.

        Prior exchanges become alternating user and assistant turns, oldest
        first. An exchange without an answer still gets an assistant turn so
        the roles keep alternating.
        """
        messages = [LLMMessage(role="system", content=self._system_prompt)]
        for entry in history:
            messages.append(LLMMessage(role="user", content=entry.query))
            answer = _truncate(entry.answer, HISTORY_ANSWER_LIMIT) if entry.answer else "(no answer)"
            messages.append(LLMMessage(role="assistant", content=answer))

        sections = []
        if citations:
            files = ["Relevant files:"]
            for source in citations:
                files.append(
                    f"--- {source.file_name} (similarity {source.similarity:.2f})\n"
                    f"Summary: {source.summary}\n"
                    f"```\n{_truncate(source.source_code, SOURCE_CODE_LIMIT)}\n```"
                )
            sections.append("\n\n".join(files))
        else:
            sections.append("No files in the project matched this question.")

        sections.append(f"Question: {query_text}")

        messages.append(LLMMessage(role="user", content="\n\n".join(sections)))
        return messages

    async def close(self) -> None:
        await self._llm.close()
