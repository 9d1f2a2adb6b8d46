"""Client-side chat flow for one interview viewing session."""
import logging
from typing import Optional

from models.conversation import Message, Role
from models.interview import AnalyticsRecord, CallAnalysisRecord
from services.conversation_state import ConversationState
from services.transcript_qa import TranscriptQAService

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "I'm sorry, I couldn't process your question. Please try again."


class ChatSession:
    """Drives the chat panel for one interview.

    Holds the interview payloads fetched by the host page, serializes
    submissions and records every turn in a ConversationState.
    """

    def __init__(
        self,
        service: TranscriptQAService,
        transcript: str,
        subject_name: Optional[str] = None,
        analytics: Optional[AnalyticsRecord] = None,
        call_analysis: Optional[CallAnalysisRecord] = None,
        state: Optional[ConversationState] = None
    ):
        self.service = service
        self.transcript = transcript
        self.subject_name = subject_name
        self.analytics = analytics
        self.call_analysis = call_analysis
        self.state = state if state is not None else ConversationState()
        self.is_loading = False

    async def submit(self, question: str) -> Optional[Message]:
        """
        Ask a question and record the exchange.

        Args:
            question: Raw input; surrounding whitespace is trimmed

        Returns:
            The assistant message appended to the state, or None when the
            input was empty or another submission is still in flight
        """
        question = (question or "").strip()
        if not question or self.is_loading:
            return None

        self.state.append(Message(role=Role.USER, content=question))
        self.is_loading = True
        try:
            result = await self.service.answer(
                self.transcript,
                question,
                subject_name=self.subject_name,
                analytics=self.analytics,
                call_analysis=self.call_analysis
            )
            if result.ok:
                reply = Message(role=Role.ASSISTANT, content=result.answer)
            else:
                logger.error(f"Error getting AI response: {result.error.code}")
                reply = Message(role=Role.ASSISTANT, content=APOLOGY_MESSAGE)
        except Exception as e:
            logger.error(f"Unexpected error getting AI response: {e}", exc_info=True)
            reply = Message(role=Role.ASSISTANT, content=APOLOGY_MESSAGE)
        finally:
            self.is_loading = False

        self.state.append(reply)
        return reply

    def reset(self) -> None:
        """Clear the conversation, e.g. when switching to another interview."""
        self.state.clear()
