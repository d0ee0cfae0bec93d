"""Gemini completion gateway for the SaralCredit relay.

This module owns the single credentialed connection to the Gemini API and
the one operation the relay performs against it: turning a rendered prompt
into generated text.

Key Responsibilities
--------------------
- **Construct once** - :func:`initialize_gateway` is called from the FastAPI
  lifespan at process start.  It returns a :class:`CompletionClient` or
  ``None``; the result is never rebuilt for the lifetime of the process.
- **Degrade, never crash** - a missing ``google-genai`` package, a missing
  API key, or an SDK construction error is logged and yields ``None``.  The
  server keeps running and answers completion requests with a 500.
- **Failures as values** - :func:`complete` never raises.  It returns a
  :class:`CompletionResult` holding either the generated text or a
  :class:`CompletionFailure` classification.  The underlying exception is
  logged here and never travels further, so provider error detail cannot
  leak into an HTTP response.
- **Bounded calls** - each generation call is wrapped in
  ``asyncio.wait_for`` using ``request_timeout`` from the configuration, and
  the same bound is passed to the SDK's HTTP transport.

Usage
-----
::

    from saralcredit.core.config import config
    from saralcredit.core.completion import complete, initialize_gateway

    client = initialize_gateway(config)
    result = await complete(client, "Summarise this loan agreement: ...")
    if result.ok:
        print(result.text)

Empty responses
---------------
When Gemini returns a response with no text (for example a candidate that was
blocked by a safety filter) the result is a *success* carrying an empty
string.  Existing front ends rely on this.  Callers that need to tell the
two cases apart should check ``result.text``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from saralcredit.core.config import SaralCreditConfig

logger = logging.getLogger(__name__)


class CompletionFailure(str, Enum):
    """Classified reasons a completion could not be produced."""

    GATEWAY_UNAVAILABLE = "gateway_unavailable"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a single :func:`complete` call.

    Exactly one of ``text`` and ``failure`` is meaningful: a successful
    result has ``failure is None`` and a (possibly empty) ``text``.
    """

    text: str = ""
    failure: CompletionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, text: str) -> CompletionResult:
        return cls(text=text)

    @classmethod
    def failed(cls, failure: CompletionFailure) -> CompletionResult:
        return cls(failure=failure)


@dataclass(frozen=True)
class CompletionClient:
    """Read-only handle to the Gemini generation service.

    Attributes:
        sdk_client: The ``google.genai.Client`` instance.
        model: Gemini model identifier sent with every request.
        timeout: Upper bound in seconds on one generation call.
    """

    sdk_client: Any
    model: str
    timeout: float

    async def generate(self, prompt: str) -> Any:
        """Send *prompt* to Gemini and return the raw SDK response."""
        return await asyncio.wait_for(
            self.sdk_client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            ),
            timeout=self.timeout,
        )


def initialize_gateway(config: SaralCreditConfig) -> CompletionClient | None:
    """Build the Gemini client handle, or return ``None`` if that is not possible.

    Construction is attempted only when the ``google-genai`` package can be
    imported and ``config.gemini_api_key`` is non-blank.  Every failure is
    logged at ERROR level; nothing is raised to the caller.

    Args:
        config: Application configuration.  Reads ``gemini_api_key``,
            ``gemini_model`` and ``request_timeout``.

    Returns:
        A :class:`CompletionClient`, or ``None`` when the gateway is disabled.
    """
    # --- Import the SDK here (lazy) ----------------------------------------
    try:
        from google import genai
    except ImportError:
        logger.error(
            "The 'google-genai' package is not installed; completions are disabled. "
            "Install it with: pip install google-genai"
        )
        return None

    api_key = (config.gemini_api_key or "").strip()
    if not api_key:
        logger.error("GEMINI_API_KEY is not set; completions are disabled.")
        return None

    try:
        # The SDK expects its HTTP timeout in milliseconds.
        sdk_client = genai.Client(
            api_key=api_key,
            http_options={"timeout": int(config.request_timeout * 1000)},
        )
    except Exception as e:
        logger.error(f"Could not initialize Gemini client. Is the API key valid? {e}", exc_info=True)
        return None

    logger.info("Gemini client initialized (model=%s).", config.gemini_model)
    return CompletionClient(
        sdk_client=sdk_client,
        model=config.gemini_model,
        timeout=config.request_timeout,
    )


def _extract_text(response: Any) -> str:
    """Return the generated text of an SDK response, ``""`` when there is none."""
    text = getattr(response, "text", None)
    if text is None:
        return ""
    if not isinstance(text, str):
        raise TypeError(f"Unexpected response text type: {type(text).__name__}")
    return text


async def complete(client: CompletionClient | None, rendered_prompt: str) -> CompletionResult:
    """Run one generation call for *rendered_prompt*.

    Args:
        client: Handle from :func:`initialize_gateway`.  ``None`` short-circuits
            to ``GATEWAY_UNAVAILABLE`` without any outbound call.
        rendered_prompt: Fully rendered instruction string.

    Returns:
        A successful :class:`CompletionResult` with the generated text (which
        may be empty), or a failed one classified as ``GATEWAY_UNAVAILABLE``
        or ``UPSTREAM_ERROR``.
    """
    if client is None:
        return CompletionResult.failed(CompletionFailure.GATEWAY_UNAVAILABLE)

    try:
        response = await client.generate(rendered_prompt)
        text = _extract_text(response)
    except asyncio.TimeoutError:
        logger.error("Gemini request timed out after %.1fs.", client.timeout)
        return CompletionResult.failed(CompletionFailure.UPSTREAM_ERROR)
    except Exception as e:
        logger.error(f"Gemini request failed: {e}", exc_info=True)
        return CompletionResult.failed(CompletionFailure.UPSTREAM_ERROR)

    return CompletionResult.success(text)
