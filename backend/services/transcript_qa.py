"""Transcript question answering: format, prompt, dispatch."""
import time
import logging
from dataclasses import dataclass
from typing import Any, Optional

from models.interview import AnalyticsRecord, CallAnalysisRecord
from services.context_formatter import ContextFormatter
from services.errors import QueryError, TranscriptQueryError
from services.prompt_builder import PromptBuilder
from services.query_dispatcher import QueryDispatcher

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Outcome of one question: either an answer or a structured error."""
    answer: Optional[str] = None
    error: Optional[QueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, answer: str) -> "QueryResult":
        return cls(answer=answer)

    @classmethod
    def failure(cls, error: QueryError) -> "QueryResult":
        return cls(error=error)


class TranscriptQAService:
    """Answers one question about one interview session.

    Each call is independent: only the freshly formatted context and the
    current question reach the model.
    """

    def __init__(self, dispatcher: QueryDispatcher, encoder: Optional[Any] = None):
        """
        Args:
            dispatcher: Sends prompts to the language model
            encoder: Optional tiktoken encoding used to log context size
        """
        self.dispatcher = dispatcher
        self.encoder = encoder

    async def answer(
        self,
        transcript: str,
        question: str,
        subject_name: Optional[str] = None,
        analytics: Optional[AnalyticsRecord] = None,
        call_analysis: Optional[CallAnalysisRecord] = None
    ) -> QueryResult:
        """
        Answer a question about the interview.

        Returns:
            QueryResult.success with the answer text, or QueryResult.failure
            carrying an INVALID_INPUT, BACKEND_UNAVAILABLE or BACKEND_REJECTED error
        """
        start_time = time.time()

        try:
            context = ContextFormatter.format(transcript, analytics, call_analysis)
            messages = PromptBuilder.build(context, question, subject_name)

            if self.encoder is not None:
                context_tokens = len(self.encoder.encode(context, disallowed_special=()))
                logger.info(f"Context prepared: tokens={context_tokens}, chars={len(context)}")

            answer = await self.dispatcher.dispatch(messages)
        except TranscriptQueryError as e:
            logger.warning(f"Transcript query failed: code={e.error.code}, message={e.error.message}")
            return QueryResult.failure(e.error)

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Transcript query answered in {latency_ms}ms")
        return QueryResult.success(answer)
