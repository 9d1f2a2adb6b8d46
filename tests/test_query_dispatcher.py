"""Unit tests for QueryDispatcher."""
import sys
sys.path.insert(0, 'backend')

import asyncio
import json
import httpx
import pytest
from unittest.mock import AsyncMock, Mock, patch
from groq import (
    APIConnectionError,
    APIResponseValidationError,
    APITimeoutError,
    AsyncGroq,
    AuthenticationError,
    InternalServerError,
    RateLimitError,
)

from config import FALLBACK_ANSWER, MAX_TOKENS, TEMPERATURE
from models.conversation import Message, Role
from services.errors import BackendRejectedError, BackendUnavailableError, BACKEND_REJECTED, BACKEND_UNAVAILABLE
from services.query_dispatcher import QueryDispatcher

API_KEY = "gsk_test_secret_key"
ENDPOINT = "https://api.groq.com/openai/v1/chat/completions"

MESSAGES = [
    Message(role=Role.SYSTEM, content="You are an AI assistant."),
    Message(role=Role.USER, content="CONTEXT\n\nUser Question: Strengths?"),
]


def make_request() -> httpx.Request:
    return httpx.Request("POST", ENDPOINT)


def make_client(result=None, side_effect=None) -> Mock:
    """Build a stand-in for AsyncGroq."""
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=result, side_effect=side_effect)
    return client


def completion(content) -> Mock:
    return Mock(choices=[Mock(message=Mock(content=content))])


def dispatch(dispatcher: QueryDispatcher, messages=MESSAGES) -> str:
    return asyncio.run(dispatcher.dispatch(messages))


class TestQueryDispatcher:
    """Test suite for QueryDispatcher with a stubbed client."""

    @patch('services.query_dispatcher.AsyncGroq')
    def test_client_built_without_retries(self, mock_groq_class):
        """Test the SDK client is created with the key and retries disabled."""
        QueryDispatcher(api_key=API_KEY)

        mock_groq_class.assert_called_once_with(api_key=API_KEY, max_retries=0)

    @patch('services.query_dispatcher.AsyncGroq')
    def test_client_options_forwarded(self, mock_groq_class):
        """Test base URL and timeout overrides reach the SDK client."""
        QueryDispatcher(api_key=API_KEY, base_url="http://localhost:9999/v1", timeout=12.5)

        mock_groq_class.assert_called_once_with(
            api_key=API_KEY,
            max_retries=0,
            base_url="http://localhost:9999/v1",
            timeout=12.5
        )

    @patch('services.query_dispatcher.AsyncGroq')
    def test_missing_api_key_does_not_raise(self, mock_groq_class):
        """Test construction succeeds without a credential."""
        dispatcher = QueryDispatcher(api_key=None)

        assert dispatcher.api_key == ""
        mock_groq_class.assert_called_once_with(api_key="", max_retries=0)

    def test_dispatch_success(self):
        """Test the first choice's content is returned."""
        client = make_client(completion("Strong system design skills."))
        dispatcher = QueryDispatcher(api_key=API_KEY, model="llama-3.1-8b-instant", client=client)

        answer = dispatch(dispatcher)

        assert answer == "Strong system design skills."

    def test_dispatch_request_parameters(self):
        """Test one request carrying model, messages and fixed generation parameters."""
        client = make_client(completion("Answer"))
        dispatcher = QueryDispatcher(api_key=API_KEY, model="llama-3.1-8b-instant", client=client)

        dispatch(dispatcher)

        client.chat.completions.create.assert_awaited_once_with(
            model="llama-3.1-8b-instant",
            messages=[
                {"role": "system", "content": "You are an AI assistant."},
                {"role": "user", "content": "CONTEXT\n\nUser Question: Strengths?"},
            ],
            temperature=0.7,
            max_tokens=500
        )
        assert TEMPERATURE == 0.7
        assert MAX_TOKENS == 500

    def test_empty_choices_returns_fallback(self):
        """Test an empty candidate list yields the fallback answer."""
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(Mock(choices=[])))

        assert dispatch(dispatcher) == FALLBACK_ANSWER
        assert FALLBACK_ANSWER == "I couldn't generate a response."

    @pytest.mark.parametrize("content", [None, ""])
    def test_empty_content_returns_fallback(self, content):
        """Test a choice without content yields the fallback answer."""
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(completion(content)))

        assert dispatch(dispatcher) == FALLBACK_ANSWER

    def test_connection_error_is_backend_unavailable(self):
        """Test transport failures raise BackendUnavailableError."""
        client = make_client(side_effect=APIConnectionError(request=make_request()))
        dispatcher = QueryDispatcher(api_key=API_KEY, client=client)

        with pytest.raises(BackendUnavailableError) as exc_info:
            dispatch(dispatcher)

        error = exc_info.value.error
        assert error.code == BACKEND_UNAVAILABLE
        assert error.details["error_type"] == "APIConnectionError"
        assert isinstance(error.details["latency_ms"], int)
        client.chat.completions.create.assert_awaited_once()

    def test_timeout_is_backend_unavailable(self):
        """Test timeouts are transport failures."""
        client = make_client(side_effect=APITimeoutError(request=make_request()))
        dispatcher = QueryDispatcher(api_key=API_KEY, client=client)

        with pytest.raises(BackendUnavailableError):
            dispatch(dispatcher)

    @pytest.mark.parametrize("error_class,status_code", [
        (AuthenticationError, 401),
        (RateLimitError, 429),
        (InternalServerError, 500),
    ])
    def test_status_error_is_backend_rejected(self, error_class, status_code):
        """Test non-success statuses raise BackendRejectedError with the status."""
        side_effect = error_class(
            f"Error code: {status_code}",
            response=httpx.Response(status_code, request=make_request()),
            body={"message": "Request failed", "type": "invalid_request_error"}
        )
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(side_effect=side_effect))

        with pytest.raises(BackendRejectedError) as exc_info:
            dispatch(dispatcher)

        assert exc_info.value.status_code == status_code
        error = exc_info.value.error
        assert error.code == BACKEND_REJECTED
        assert error.details["status_code"] == status_code
        assert str(status_code) in error.message
        assert "Request failed" in error.message

    def test_rejection_does_not_leak_api_key(self):
        """Test the credential is redacted from surfaced messages."""
        side_effect = AuthenticationError(
            f"Error code: 401 - Invalid API Key {API_KEY}",
            response=httpx.Response(401, request=make_request()),
            body={"error": {"message": f"Invalid API Key: {API_KEY}"}}
        )
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(side_effect=side_effect))

        with pytest.raises(BackendRejectedError) as exc_info:
            dispatch(dispatcher)

        error = exc_info.value.error
        assert API_KEY not in error.message
        assert API_KEY not in json.dumps(error.details)
        assert API_KEY not in str(exc_info.value)
        assert "Invalid API Key" in error.message

    def test_rejection_without_body_message(self):
        """Test a status error with no parsable body still reports the status."""
        side_effect = InternalServerError(
            "Error code: 503",
            response=httpx.Response(503, request=make_request()),
            body=None
        )
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(side_effect=side_effect))

        with pytest.raises(BackendRejectedError) as exc_info:
            dispatch(dispatcher)

        assert "503" in exc_info.value.error.message
        assert "request was rejected" in exc_info.value.error.message

    def test_validation_error_is_backend_rejected(self):
        """Test SDK response validation failures count as malformed."""
        side_effect = APIResponseValidationError(
            response=httpx.Response(200, request=make_request()),
            body=None
        )
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(side_effect=side_effect))

        with pytest.raises(BackendRejectedError) as exc_info:
            dispatch(dispatcher)

        assert "malformed" in exc_info.value.error.message

    @pytest.mark.parametrize("response", [
        "<html>Bad Gateway</html>",
        Mock(spec=[]),
        Mock(choices=None),
    ])
    def test_response_without_choices_is_backend_rejected(self, response):
        """Test bodies lacking a choices list are malformed."""
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(response))

        with pytest.raises(BackendRejectedError) as exc_info:
            dispatch(dispatcher)

        assert "malformed" in exc_info.value.error.message

    def test_non_text_content_is_backend_rejected(self):
        """Test a choice whose content is not text is malformed."""
        dispatcher = QueryDispatcher(api_key=API_KEY, client=make_client(completion({"text": "x"})))

        with pytest.raises(BackendRejectedError):
            dispatch(dispatcher)


class TestQueryDispatcherOverHTTP:
    """Exercise the dispatcher through the real SDK with a mocked transport."""

    def make_dispatcher(self, handler) -> QueryDispatcher:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = AsyncGroq(api_key=API_KEY, max_retries=0, http_client=http_client)
        return QueryDispatcher(api_key=API_KEY, model="llama-3.1-8b-instant", client=client)

    def test_success_round_trip(self):
        """Test the outbound request body and the parsed answer."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["auth"] = request.headers["authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "chatcmpl-1",
                "object": "chat.completion",
                "created": 1700000000,
                "model": "llama-3.1-8b-instant",
                "choices": [{
                    "index": 0,
                    "finish_reason": "stop",
                    "message": {"role": "assistant", "content": "Clear communicator."}
                }]
            })

        answer = dispatch(self.make_dispatcher(handler))

        assert answer == "Clear communicator."
        assert captured["auth"] == f"Bearer {API_KEY}"
        assert captured["body"]["model"] == "llama-3.1-8b-instant"
        assert captured["body"]["temperature"] == 0.7
        assert captured["body"]["max_tokens"] == 500
        assert [m["role"] for m in captured["body"]["messages"]] == ["system", "user"]

    def test_empty_choices_round_trip(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": "chatcmpl-2", "choices": []})

        assert dispatch(self.make_dispatcher(handler)) == FALLBACK_ANSWER

    def test_error_status_single_attempt(self):
        """Test a 500 is surfaced after exactly one request."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"error": {"message": "upstream failure"}})

        with pytest.raises(BackendRejectedError) as exc_info:
            dispatch(self.make_dispatcher(handler))

        assert exc_info.value.status_code == 500
        assert len(calls) == 1

    def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        with pytest.raises(BackendUnavailableError):
            dispatch(self.make_dispatcher(handler))

    def test_non_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy error</html>", headers={"content-type": "text/html"})

        with pytest.raises(BackendRejectedError):
            dispatch(self.make_dispatcher(handler))
