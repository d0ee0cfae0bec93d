"""Core functionality for the SaralCredit relay.

- **SaralCreditConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)
- **CompletionClient**: Read-only handle to the Gemini generation service
- **initialize_gateway / complete**: Gateway construction and the single
  outbound generation call
"""

from saralcredit.core.completion import (
    CompletionClient,
    CompletionFailure,
    CompletionResult,
    complete,
    initialize_gateway,
)
from saralcredit.core.config import SaralCreditConfig, config

__all__ = [
    "CompletionClient",
    "CompletionFailure",
    "CompletionResult",
    "SaralCreditConfig",
    "complete",
    "config",
    "initialize_gateway",
]
