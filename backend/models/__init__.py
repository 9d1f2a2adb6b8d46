"""Data models for the Interview Insights chat service."""
from .interview import AnalyticsRecord, CallAnalysisRecord, CommunicationAssessment, QuestionSummary
from .conversation import Message, Role
from .api import AnalyzeTranscriptRequest, AnalyzeTranscriptResponse, ErrorResponse

__all__ = [
    "AnalyticsRecord",
    "CallAnalysisRecord",
    "CommunicationAssessment",
    "QuestionSummary",
    "Message",
    "Role",
    "AnalyzeTranscriptRequest",
    "AnalyzeTranscriptResponse",
    "ErrorResponse",
]
