"""SaralCredit - AI relay for a lending assistant front end."""

__version__ = "1.0.0"

from saralcredit.core.config import SaralCreditConfig, config

__all__ = [
    "SaralCreditConfig",
    "config",
]
