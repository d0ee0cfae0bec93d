"""Pydantic request and response models for the SaralCredit API.

Models
------
CompletionRequest
    Payload for ``POST /api/gemini``.  Both fields are optional at the schema
    level: the route itself reports missing fields so the client receives the
    relay's ``{"error": ...}`` envelope rather than a framework validation
    error.
CompletionResponse
    Success envelope, ``{"response": ...}``.
ErrorResponse
    Failure envelope, ``{"error": ...}``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CompletionRequest(BaseModel):
    """Request body for the ``POST /api/gemini`` endpoint.

    Attributes:
        prompt: Free-form user text to insert into the selected template.
        type: Template selector, one of the values listed by
            :func:`~saralcredit.api.prompt_templates.available_types`.
    """

    prompt: str | None = Field(
        default=None,
        description="User text inserted into the prompt template.",
    )
    type: str | None = Field(
        default=None,
        description="Prompt template type (e.g. 'chat', 'simplify').",
    )


class CompletionResponse(BaseModel):
    """Successful completion: the text generated by Gemini (may be empty)."""

    response: str


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing API route."""

    error: str
