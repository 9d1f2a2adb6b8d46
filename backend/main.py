"""Main entry point for the Interview Insights chat API."""
import logging
import tiktoken
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import (
    CORS_ORIGINS,
    GROQ_API_KEY,
    LLM_BASE_URL,
    LLM_MODEL,
    LLM_TIMEOUT_SECONDS,
    LOG_FORMAT,
    LOG_LEVEL,
    PORT,
    TOKEN_ENCODING,
)
from logger import setup_logging
from models.api import AnalyzeTranscriptRequest, AnalyzeTranscriptResponse, ErrorResponse
from models.interview import AnalyticsRecord, CallAnalysisRecord
from services.query_dispatcher import QueryDispatcher
from services.transcript_qa import TranscriptQAService

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Interview Insights Chat",
    description="Ask questions about a completed interview's transcript and analytics",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

FAILURE_MESSAGE = "Failed to analyze transcript"

# Initialize services (will be done on startup)
qa_service: TranscriptQAService = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global qa_service

    logger.info("Initializing Interview Insights chat services...")

    try:
        # Context size is logged only; a missing encoding must not block startup
        encoder = None
        try:
            encoder = tiktoken.get_encoding(TOKEN_ENCODING)
            logger.info(f"Initialized tiktoken encoder ({TOKEN_ENCODING})")
        except Exception as e:
            logger.warning(f"Token counting disabled, could not load {TOKEN_ENCODING}: {e}")

        dispatcher = QueryDispatcher(
            api_key=GROQ_API_KEY,
            model=LLM_MODEL,
            base_url=LLM_BASE_URL,
            timeout=LLM_TIMEOUT_SECONDS
        )
        qa_service = TranscriptQAService(dispatcher, encoder=encoder)
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Interview Insights Chat API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "interview-insights-chat",
        "version": "1.0.0",
        "model": LLM_MODEL
    }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report unreadable request bodies in the same shape as other failures."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    details = "Invalid request body: " + "; ".join(problems)
    logger.error(f"Error analyzing transcript: {details}", extra={"error_code": "INVALID_INPUT"})
    return _failure(details)


@app.post(
    "/api/analyze-transcript",
    response_model=AnalyzeTranscriptResponse,
    responses={500: {"model": ErrorResponse}}
)
async def analyze_transcript(request: AnalyzeTranscriptRequest):
    """
    Answer a question about an interview transcript.

    Args:
        request: Transcript, question, optional candidate name, analytics
            and call analysis

    Returns:
        {"answer": ...} on success, or status 500 with {"error", "details"}
    """
    logger.info("analyze-transcript request received")

    try:
        logger.info(f"Processing question: {(request.question or '')[:100]}")

        result = await qa_service.answer(
            request.transcript,
            request.question,
            subject_name=request.candidate_name,
            analytics=AnalyticsRecord.from_dict(request.analytics),
            call_analysis=CallAnalysisRecord.from_dict(request.call_analysis)
        )
    except Exception as e:
        logger.error(f"Error analyzing transcript: {e}", exc_info=True)
        return _failure("Unknown error")

    if not result.ok:
        logger.error(
            f"Error analyzing transcript: {result.error.message}",
            extra={"error_code": result.error.code}
        )
        return _failure(result.error.message)

    logger.info("Transcript analysis completed successfully")
    return AnalyzeTranscriptResponse(answer=result.answer)


def _failure(details: str) -> JSONResponse:
    body = ErrorResponse(error=FAILURE_MESSAGE, details=details)
    return JSONResponse(status_code=500, content=body.model_dump())


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Interview Insights Chat API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
