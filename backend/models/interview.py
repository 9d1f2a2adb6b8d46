"""Interview record models supplied by the hosting application."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Score = Union[int, float, str]


def _mapping(value: Any) -> Dict[str, Any]:
    """Return value if it is a dict, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


@dataclass
class QuestionSummary:
    """Summary of the candidate's answer to one interview question."""
    question: Optional[str] = None
    summary: Optional[str] = None


@dataclass
class CommunicationAssessment:
    """Communication rating on a 0-10 scale."""
    score: Optional[Score] = None
    feedback: Optional[str] = None


@dataclass
class AnalyticsRecord:
    """Computed analytics for a completed interview."""
    overall_score: Optional[Score] = None  # 0-100
    overall_feedback: Optional[str] = None
    communication: Optional[CommunicationAssessment] = None
    general_intelligence: Optional[str] = None
    question_summaries: List[QuestionSummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["AnalyticsRecord"]:
        """
        Build a record from the analytics payload (camelCase keys).

        Missing keys and malformed nested values become None rather
        than raising.

        Args:
            data: Analytics payload, or None

        Returns:
            AnalyticsRecord, or None when no payload was given
        """
        if data is None:
            return None
        data = _mapping(data)

        communication = None
        if isinstance(data.get("communication"), dict):
            comm = data["communication"]
            communication = CommunicationAssessment(
                score=comm.get("score"),
                feedback=comm.get("feedback")
            )

        summaries = data.get("questionSummaries")
        if not isinstance(summaries, list):
            summaries = []

        return cls(
            overall_score=data.get("overallScore"),
            overall_feedback=data.get("overallFeedback"),
            communication=communication,
            general_intelligence=data.get("generalIntelligence"),
            question_summaries=[
                QuestionSummary(
                    question=_mapping(item).get("question"),
                    summary=_mapping(item).get("summary")
                )
                for item in summaries
            ]
        )


@dataclass
class CallAnalysisRecord:
    """Call-level analysis produced by the voice agent provider."""
    user_sentiment: Optional[str] = None  # Positive | Neutral | Negative
    call_summary: Optional[str] = None
    call_completion_rating: Optional[str] = None
    agent_task_completion_rating: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CallAnalysisRecord"]:
        """Build a record from the call analysis payload (snake_case keys)."""
        if data is None:
            return None
        data = _mapping(data)
        return cls(
            user_sentiment=data.get("user_sentiment"),
            call_summary=data.get("call_summary"),
            call_completion_rating=data.get("call_completion_rating"),
            agent_task_completion_rating=data.get("agent_task_completion_rating")
        )
