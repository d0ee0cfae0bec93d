"""Prompt templates for the SaralCredit relay.

Every completion request names a *type* that selects one fixed instruction
template.  The user's prompt is inserted into the template as a literal
substring; nothing is escaped or trimmed.

Types
-----
==================  =======================================================
Type                Instruction
==================  =======================================================
``chat``            Short answers from a lending-app financial assistant.
``analysis``        Bullet-point credit insights from applicant text.
``simplify``        Plain-language bullet points for loan agreement text.
``eligibility``     Non-binding assessment opening with Good, Moderate or
                    Challenging.
``emi_advice``      Affordability, tenure and tips for given loan details.
``fraud_analysis``  Red flags, risk summary and verification steps for
                    underwriter notes.
==================  =======================================================

Any other value is rejected: :func:`render_prompt` returns ``None`` and the
API answers with a 400.  There is no fallback template.

Usage
-----
::

    rendered = render_prompt("simplify", "The borrower shall indemnify ...")
    if rendered is None:
        ...  # unknown type
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from types import MappingProxyType

# Country named in the templates that address an end user.
_COUNTRY = "India"


class PromptType(str, Enum):
    """Closed set of request types accepted by ``POST /api/gemini``."""

    CHAT = "chat"
    ANALYSIS = "analysis"
    SIMPLIFY = "simplify"
    ELIGIBILITY = "eligibility"
    EMI_ADVICE = "emi_advice"
    FRAUD_ANALYSIS = "fraud_analysis"

    @classmethod
    def parse(cls, value: object) -> PromptType | None:
        """Return the member whose value is *value*, or ``None``."""
        try:
            return cls(value)
        except ValueError:
            return None


def _chat(prompt: str) -> str:
    return (
        f"You are a helpful financial assistant for a loan app in {_COUNTRY}. "
        f'Keep answers simple and short. User\'s question: "{prompt}"'
    )


def _analysis(prompt: str) -> str:
    return (
        f"Analyze this unstructured text from a loan applicant in {_COUNTRY}. "
        "Provide a concise credit insights summary in bullet points. "
        f'Text data: "{prompt}"'
    )


def _simplify(prompt: str) -> str:
    return (
        "Simplify this complex loan agreement text into simple bullet points "
        "for someone with low financial literacy. "
        f'Text to simplify: "{prompt}"'
    )


def _eligibility(prompt: str) -> str:
    return (
        "You are an AI loan eligibility assessor. Based on this data, provide a "
        f"preliminary, non-binding assessment for a user in {_COUNTRY}. "
        "Start with a likely outcome (Good, Moderate, Challenging), then briefly "
        f'explain why. User\'s data: "{prompt}"'
    )


def _emi_advice(prompt: str) -> str:
    # Loan details arrive pre-formatted by the front end, so they are not quoted.
    return (
        f"You are an AI financial advisor. A user's loan details are: {prompt}. "
        "Provide simple, actionable advice on: 1) Affordability, "
        "2) Impact of Tenure, 3) Simple Tips."
    )


def _fraud_analysis(prompt: str) -> str:
    return (
        "You are a fraud detection analyst. Analyze these underwriter notes. "
        "Provide three sections: **Potential Red Flags**, **Summary of Risk**, "
        f'and **Recommended Verification Steps**. Notes: "{prompt}"'
    )


TEMPLATES: MappingProxyType[PromptType, Callable[[str], str]] = MappingProxyType(
    {
        PromptType.CHAT: _chat,
        PromptType.ANALYSIS: _analysis,
        PromptType.SIMPLIFY: _simplify,
        PromptType.ELIGIBILITY: _eligibility,
        PromptType.EMI_ADVICE: _emi_advice,
        PromptType.FRAUD_ANALYSIS: _fraud_analysis,
    }
)


def render_prompt(request_type: object, prompt: str) -> str | None:
    """Render *prompt* into the template selected by *request_type*.

    Args:
        request_type: One of the :class:`PromptType` values.
        prompt: User-supplied text, inserted verbatim.

    Returns:
        The rendered instruction, or ``None`` if *request_type* is not a
        known type.
    """
    prompt_type = PromptType.parse(request_type)
    if prompt_type is None:
        return None
    return TEMPLATES[prompt_type](prompt)


def available_types() -> list[str]:
    """Return the accepted type values in declaration order."""
    return [t.value for t in PromptType]
