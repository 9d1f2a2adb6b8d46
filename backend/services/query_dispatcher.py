"""Query dispatcher for the Groq chat-completions API."""
import time
import logging
from typing import Any, Dict, List, Optional

from groq import AsyncGroq
from groq import APIConnectionError, APIError, APIResponseValidationError, APIStatusError

from config import FALLBACK_ANSWER, LLM_MODEL, MAX_TOKENS, TEMPERATURE
from models.conversation import Message
from services.errors import BackendRejectedError, BackendUnavailableError

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"


class QueryDispatcher:
    """Sends a prepared message sequence to the language model.

    Exactly one outbound request is made per dispatch: the SDK's own retry
    loop is disabled and nothing is cached.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = LLM_MODEL,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize the dispatcher.

        Args:
            api_key: Bearer credential for the backend. A missing key is
                allowed; the backend will reject the request.
            model: Model identifier sent with every request
            base_url: Optional override of the API endpoint
            timeout: Optional request timeout in seconds (SDK default otherwise)
            client: Pre-built async client, e.g. a test double
        """
        self.api_key = api_key or ""
        self.model = model

        if client is None:
            options: Dict[str, Any] = {"api_key": self.api_key, "max_retries": 0}
            if base_url:
                options["base_url"] = base_url
            if timeout is not None:
                options["timeout"] = timeout
            client = AsyncGroq(**options)
        self.client = client

        if not self.api_key:
            logger.warning("QueryDispatcher initialized without an API key; requests will be rejected")
        logger.info(f"QueryDispatcher initialized: model={model}")

    async def dispatch(self, messages: List[Message]) -> str:
        """
        Request a completion and return the answer text.

        Args:
            messages: Sequence produced by PromptBuilder.build

        Returns:
            Content of the first choice, or the fallback answer when the
            backend returned no content

        Raises:
            BackendUnavailableError: Transport failure (network, DNS, TLS, timeout)
            BackendRejectedError: Non-success status or malformed response
        """
        start_time = time.time()

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[message.to_dict() for message in messages],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS
            )
        except APIConnectionError as e:
            latency_ms = _elapsed_ms(start_time)
            error = BackendUnavailableError(
                "Could not reach the language model backend.",
                details={
                    "model": self.model,
                    "latency_ms": latency_ms,
                    "error_type": type(e).__name__,
                    "original_error": self._redact(str(e))
                }
            )
            logger.error(
                f"Backend unavailable: model={self.model}, latency={latency_ms}ms, error={type(e).__name__}",
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error from e
        except APIStatusError as e:
            latency_ms = _elapsed_ms(start_time)
            backend_message = self._backend_message(e)
            error = BackendRejectedError(
                f"Language model backend returned status {e.status_code}: {backend_message}",
                status_code=e.status_code,
                details={
                    "model": self.model,
                    "latency_ms": latency_ms,
                    "backend_message": backend_message
                }
            )
            logger.error(
                f"Backend rejected request: model={self.model}, status={e.status_code}, latency={latency_ms}ms",
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error from e
        except APIResponseValidationError as e:
            raise self._malformed(start_time, status_code=e.status_code) from e
        except ValueError as e:
            # JSON content type with an undecodable body
            raise self._malformed(start_time) from e
        except APIError as e:
            latency_ms = _elapsed_ms(start_time)
            error = BackendRejectedError(
                "Language model backend request failed.",
                details={
                    "model": self.model,
                    "latency_ms": latency_ms,
                    "error_type": type(e).__name__,
                    "original_error": self._redact(str(e))
                }
            )
            logger.error(
                f"Backend API error: model={self.model}, latency={latency_ms}ms, error={type(e).__name__}",
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error from e

        answer = self._extract_answer(response, start_time)
        logger.info(
            f"Dispatched query: model={self.model}, latency={_elapsed_ms(start_time)}ms, "
            f"answer_chars={len(answer)}"
        )
        return answer

    def _extract_answer(self, response: Any, start_time: float) -> str:
        """Pull the first choice's content out of a completion response."""
        choices = getattr(response, "choices", None)
        if not isinstance(choices, (list, tuple)):
            raise self._malformed(start_time)
        if not choices:
            logger.warning("Backend response contained no choices; returning fallback answer")
            return FALLBACK_ANSWER

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if content is None or content == "":
            logger.warning("Backend response contained no content; returning fallback answer")
            return FALLBACK_ANSWER
        if not isinstance(content, str):
            raise self._malformed(start_time)
        return content

    def _malformed(self, start_time: float, status_code: Optional[int] = None) -> BackendRejectedError:
        latency_ms = _elapsed_ms(start_time)
        error = BackendRejectedError(
            "Language model backend returned a malformed response.",
            status_code=status_code,
            details={"model": self.model, "latency_ms": latency_ms}
        )
        logger.error(
            f"Malformed backend response: model={self.model}, latency={latency_ms}ms",
            extra={"error_code": error.error.code, "error_details": error.error.details}
        )
        return error

    def _backend_message(self, error: APIStatusError) -> str:
        """Short error message reported by the backend, without the raw body."""
        body = error.body
        if isinstance(body, dict):
            nested = body.get("error")
            if isinstance(nested, dict):
                body = nested
            message = body.get("message")
            if isinstance(message, str) and message.strip():
                return self._redact(message)
        return "request was rejected"

    def _redact(self, text: str) -> str:
        if self.api_key:
            text = text.replace(self.api_key, REDACTED)
        return text


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
