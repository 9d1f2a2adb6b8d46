"""Services for the Interview Insights chat service."""
from .errors import (
    QueryError,
    TranscriptQueryError,
    InvalidInputError,
    BackendUnavailableError,
    BackendRejectedError,
)
from .context_formatter import ContextFormatter
from .prompt_builder import PromptBuilder
from .query_dispatcher import QueryDispatcher
from .conversation_state import ConversationState
from .transcript_qa import TranscriptQAService, QueryResult
from .chat_session import ChatSession

__all__ = ['QueryError', 'TranscriptQueryError', 'InvalidInputError', 'BackendUnavailableError', 'BackendRejectedError', 'ContextFormatter', 'PromptBuilder', 'QueryDispatcher', 'ConversationState', 'TranscriptQAService', 'QueryResult', 'ChatSession']
