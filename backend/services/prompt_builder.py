"""Prompt builder for interview transcript questions."""
import logging
from typing import List, Optional

from models.conversation import Message, Role
from services.errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "the candidate"

SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant helping HR professionals analyze interview transcripts.
You have access to the interview transcript and analytics data.
Answer only from the transcript and analytics provided; if they do not contain the answer, say so.
Provide concise, insightful answers.
Focus on being helpful and objective in your analysis.
When discussing the candidate, use their name ({subject})."""


class PromptBuilder:
    """Builds the system and user messages for a single transcript question."""

    @staticmethod
    def system_prompt(subject_name: Optional[str] = None) -> str:
        """Return the system instruction naming the interview subject."""
        subject = subject_name.strip() if subject_name and subject_name.strip() else DEFAULT_SUBJECT
        return SYSTEM_PROMPT_TEMPLATE.format(subject=subject)

    @staticmethod
    def build(
        context_document: str,
        question: str,
        subject_name: Optional[str] = None
    ) -> List[Message]:
        """
        Build the two-message sequence sent to the model.

        Args:
            context_document: Output of ContextFormatter.format
            question: The user's question, passed through verbatim
            subject_name: Candidate name; "the candidate" when absent

        Returns:
            [system message, user message]

        Raises:
            InvalidInputError: If the question is empty after trimming
        """
        if not question or not question.strip():
            raise InvalidInputError(
                "Question is required and cannot be empty",
                details={"field": "question"}
            )

        return [
            Message(role=Role.SYSTEM, content=PromptBuilder.system_prompt(subject_name)),
            Message(role=Role.USER, content=f"{context_document}\n\nUser Question: {question}"),
        ]
