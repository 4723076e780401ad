"""Tests for the chat-completion HTTP client."""

import requests

from config.settings import settings
from signal_engine.llm import LLMClient


class _Response:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text


class _Session:
    """requests.Session stand-in recording the last request."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class TestLLMClient:
    """Tests for authentication, URL handling and error reporting."""

    def test_successful_post(self) -> None:
        """Test a 200 response returns the body with a bearer header."""
        session = _Session(_Response(200, '{"choices": []}'))
        client = LLMClient(api_key="sk-test-key-0123456789abcdef", base_url="https://llm.example/v1",
                           timeout=5, session=session)

        ok, body = client.post("chat/completions", {"model": "m"})

        assert ok is True
        assert body == '{"choices": []}'
        sent = session.requests[0]
        assert sent["url"] == "https://llm.example/v1/chat/completions"
        assert sent["headers"]["Authorization"] == "Bearer sk-test-key-0123456789abcdef"
        assert sent["timeout"] == 5

    def test_http_error(self) -> None:
        """Test a non-200 status is reported as a failure."""
        session = _Session(_Response(429, "rate limited"))
        client = LLMClient(api_key="sk-test", session=session)

        assert client.post("chat/completions", {}) == (False, "rate limited")

    def test_network_error(self) -> None:
        """Test request exceptions are caught and reported."""
        session = _Session(error=requests.ConnectionError("connection refused"))
        client = LLMClient(api_key="sk-test", session=session)

        ok, body = client.post("chat/completions", {})

        assert ok is False
        assert "connection refused" in body

    def test_missing_key(self, monkeypatch) -> None:
        """Test no key means no request at all."""
        monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
        session = _Session(_Response(200, "{}"))
        client = LLMClient(session=session)

        assert client.enabled is False
        assert client.post("chat/completions", {}) == (False, "LLM API key not configured")
        assert session.requests == []


class TestSettings:
    """Tests for API key masking."""

    def test_mask_api_key(self) -> None:
        """Test only the first and last four characters are shown."""
        assert settings.mask_api_key("sk-abcdefgh1234") == "sk-a...1234"
        assert settings.mask_api_key("short") == "****"
