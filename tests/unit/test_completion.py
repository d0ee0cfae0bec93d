"""Tests for saralcredit.core.completion - the Gemini gateway.

Tests cover:
- Gateway construction is skipped without an API key or without the SDK.
- SDK construction errors are logged and yield no client.
- A successful call returns the extracted text.
- Missing text is an empty-string success.
- Exceptions, timeouts and malformed responses become UPSTREAM_ERROR.
- A missing client is GATEWAY_UNAVAILABLE with no outbound call.

Implementation Note
-------------------
``initialize_gateway()`` imports ``google.genai`` lazily inside the function
body.  To control that import we inject a mock ``google`` package into
``sys.modules`` rather than using ``@patch``.  The gateway's coroutines are
driven with ``asyncio.run`` so no async test plugin is required.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from saralcredit.core.completion import (
    CompletionClient,
    CompletionFailure,
    CompletionResult,
    complete,
    initialize_gateway,
)
from saralcredit.core.config import SaralCreditConfig

# ---------------------------------------------------------------------------
# Helpers.
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_google(monkeypatch) -> MagicMock:
    """Inject a mock ``google`` package exposing ``genai``."""
    google = MagicMock()
    monkeypatch.setitem(sys.modules, "google", google)
    monkeypatch.setitem(sys.modules, "google.genai", google.genai)
    return google


def _config(**overrides) -> SaralCreditConfig:
    values = {"_env_file": None, "gemini_model": "gemini-test", "request_timeout": 5.0}
    values.update(overrides)
    return SaralCreditConfig(**values)


def _client_returning(response=None, side_effect=None, timeout: float = 5.0) -> CompletionClient:
    sdk = MagicMock()
    sdk.aio.models.generate_content = AsyncMock(return_value=response, side_effect=side_effect)
    return CompletionClient(sdk_client=sdk, model="gemini-test", timeout=timeout)


# ---------------------------------------------------------------------------
# initialize_gateway
# ---------------------------------------------------------------------------


class TestInitializeGateway:
    """Construction of the client handle."""

    def test_builds_client_with_key(self, mock_google):
        client = initialize_gateway(_config(gemini_api_key="test-key"))

        assert isinstance(client, CompletionClient)
        assert client.model == "gemini-test"
        assert client.timeout == 5.0
        assert client.sdk_client is mock_google.genai.Client.return_value
        mock_google.genai.Client.assert_called_once_with(
            api_key="test-key",
            http_options={"timeout": 5000},
        )

    def test_strips_key_whitespace(self, mock_google):
        initialize_gateway(_config(gemini_api_key="  test-key\n"))
        assert mock_google.genai.Client.call_args.kwargs["api_key"] == "test-key"

    @pytest.mark.parametrize("api_key", [None, "", "   "])
    def test_missing_key_disables_gateway(self, mock_google, caplog, api_key):
        with caplog.at_level(logging.ERROR):
            client = initialize_gateway(_config(gemini_api_key=api_key))

        assert client is None
        mock_google.genai.Client.assert_not_called()
        assert "GEMINI_API_KEY" in caplog.text

    def test_missing_sdk_disables_gateway(self, monkeypatch, caplog):
        """A failed ``google.genai`` import should be logged, not raised."""
        monkeypatch.setitem(sys.modules, "google", None)

        with caplog.at_level(logging.ERROR):
            client = initialize_gateway(_config(gemini_api_key="test-key"))

        assert client is None
        assert "google-genai" in caplog.text

    def test_sdk_error_disables_gateway(self, mock_google, caplog):
        mock_google.genai.Client.side_effect = ValueError("bad key format")

        with caplog.at_level(logging.ERROR):
            client = initialize_gateway(_config(gemini_api_key="test-key"))

        assert client is None
        assert "bad key format" in caplog.text


# ---------------------------------------------------------------------------
# complete
# ---------------------------------------------------------------------------


class TestComplete:
    """The single outbound generation call."""

    def test_success(self):
        client = _client_returning(SimpleNamespace(text="ok"))

        result = asyncio.run(complete(client, "rendered prompt"))

        assert result == CompletionResult.success("ok")
        assert result.ok
        client.sdk_client.aio.models.generate_content.assert_awaited_once_with(
            model="gemini-test",
            contents="rendered prompt",
        )

    def test_missing_text_is_empty_success(self):
        result = asyncio.run(complete(_client_returning(SimpleNamespace(text=None)), "p"))
        assert result.ok
        assert result.text == ""

    def test_response_without_text_attribute_is_empty_success(self):
        result = asyncio.run(complete(_client_returning(object()), "p"))
        assert result.ok
        assert result.text == ""

    def test_no_client(self):
        result = asyncio.run(complete(None, "p"))
        assert not result.ok
        assert result.failure is CompletionFailure.GATEWAY_UNAVAILABLE

    def test_upstream_exception(self, caplog):
        client = _client_returning(side_effect=RuntimeError("quota exceeded for project 42"))

        with caplog.at_level(logging.ERROR):
            result = asyncio.run(complete(client, "p"))

        assert result.failure is CompletionFailure.UPSTREAM_ERROR
        assert result.text == ""
        assert "quota exceeded for project 42" in caplog.text

    def test_malformed_text(self):
        """Non-string text is treated as a malformed response."""
        result = asyncio.run(complete(_client_returning(SimpleNamespace(text=12)), "p"))
        assert result.failure is CompletionFailure.UPSTREAM_ERROR

    def test_timeout(self, caplog):
        async def _slow(**kwargs):
            await asyncio.sleep(1)

        client = _client_returning(side_effect=_slow, timeout=0.01)

        with caplog.at_level(logging.ERROR):
            result = asyncio.run(complete(client, "p"))

        assert result.failure is CompletionFailure.UPSTREAM_ERROR
        assert "timed out" in caplog.text


class TestCompletionResult:
    def test_failed_result_has_no_text(self):
        result = CompletionResult.failed(CompletionFailure.UPSTREAM_ERROR)
        assert not result.ok
        assert result.text == ""

    def test_is_immutable(self):
        result = CompletionResult.success("ok")
        with pytest.raises(Exception):
            result.text = "changed"  # type: ignore[misc]
