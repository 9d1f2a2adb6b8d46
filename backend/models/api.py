"""Request and response schemas for the HTTP API."""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class AnalyzeTranscriptRequest(BaseModel):
    """Body of POST /api/analyze-transcript.

    Fields are lenient: a missing question surfaces as INVALID_INPUT from the
    prompt builder, and malformed analytics degrade to N/A in the context.
    """
    model_config = ConfigDict(populate_by_name=True)

    transcript: Optional[str] = None
    question: Optional[str] = None
    candidate_name: Optional[str] = Field(default=None, alias="candidateName")
    analytics: Optional[Any] = None
    call_analysis: Optional[Any] = Field(default=None, alias="callAnalysis")


class AnalyzeTranscriptResponse(BaseModel):
    """Successful answer."""
    answer: str


class ErrorResponse(BaseModel):
    """Failure body returned with status 500."""
    error: str
    details: str
