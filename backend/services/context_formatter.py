"""Context formatter that renders interview data as one prompt document."""
import logging
from typing import Any, List, Optional

from models.interview import AnalyticsRecord, CallAnalysisRecord, QuestionSummary

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


class ContextFormatter:
    """Renders transcript, analytics and call analysis into a labeled document.

    Formatting is total: any missing field is rendered as ``N/A``.
    """

    @staticmethod
    def format(
        transcript: str,
        analytics: Optional[AnalyticsRecord] = None,
        call_analysis: Optional[CallAnalysisRecord] = None
    ) -> str:
        """
        Build the context document.

        Args:
            transcript: Flattened transcript text (may be empty)
            analytics: Interview analytics, if computed
            call_analysis: Call-level analysis, if available

        Returns:
            Document with the Interview Transcript, Analytics Summary,
            Call Analysis and Question Summaries sections, in that order
        """
        analytics = analytics or AnalyticsRecord()
        call_analysis = call_analysis or CallAnalysisRecord()
        communication = analytics.communication

        sections = [
            "Interview Transcript:\n" + (transcript or ""),
            "Analytics Summary:\n" + "\n".join([
                _line("Overall Hiring Score", analytics.overall_score, "%"),
                _line("Overall Feedback", analytics.overall_feedback),
                _line("Communication Score", communication.score if communication else None, "/10"),
                _line("Communication Feedback", communication.feedback if communication else None),
                _line("General Intelligence", analytics.general_intelligence),
            ]),
            "Call Analysis:\n" + "\n".join([
                _line("User Sentiment", call_analysis.user_sentiment),
                _line("Call Summary", call_analysis.call_summary),
                _line("Completion Rating", call_analysis.call_completion_rating),
                _line("Task Completion", call_analysis.agent_task_completion_rating),
            ]),
            "Question Summaries:\n" + _question_summaries(analytics.question_summaries),
        ]

        document = "\n\n".join(sections)
        logger.debug(f"Formatted context document: {len(document)} chars")
        return document


def _render(value: Any) -> Optional[str]:
    """Render a scalar, returning None when the value counts as missing."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, int):
        return str(value)
    text = str(value)
    return text if text.strip() else None


def _line(label: str, value: Any, suffix: str = "") -> str:
    rendered = _render(value)
    if rendered is None:
        return f"- {label}: {NOT_AVAILABLE}"
    return f"- {label}: {rendered}{suffix}"


def _question_summaries(summaries: Optional[List[QuestionSummary]]) -> str:
    if not summaries:
        return NOT_AVAILABLE
    blocks = []
    for index, item in enumerate(summaries, 1):
        question = _render(getattr(item, "question", None)) or NOT_AVAILABLE
        summary = _render(getattr(item, "summary", None)) or NOT_AVAILABLE
        blocks.append(f"Q{index}: {question}\nAnswer Summary: {summary}")
    return "\n\n".join(blocks)
