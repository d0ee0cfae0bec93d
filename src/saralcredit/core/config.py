"""Configuration management for the SaralCredit relay.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the SARALCREDIT_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (SARALCREDIT_* prefix)
2. .env file in the working directory
3. Default values defined in SaralCreditConfig

Two settings also accept the unprefixed names that are conventional
and used by most hosting platforms:

- ``PORT`` for :attr:`SaralCreditConfig.server_port`
- ``GEMINI_API_KEY`` for :attr:`SaralCreditConfig.gemini_api_key`

Example .env file:
    GEMINI_API_KEY=your-key-here
    PORT=3000
    SARALCREDIT_GEMINI_MODEL=gemini-2.5-flash
    SARALCREDIT_REQUEST_TIMEOUT=30

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The FastAPI application reads it once when the module is imported; to change
values, set environment variables and restart.

A missing API key is not a configuration error.  The relay still starts and
serves the front end, but every completion request answers with a 500 until
the key is supplied (see :mod:`saralcredit.core.completion`).
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Front-end bundle shipped inside the package.
_PACKAGE_FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend"


class SaralCreditConfig(BaseSettings):
    """Main configuration for the SaralCredit relay.

    Attributes
    ----------
    Gemini Settings:
        gemini_api_key : str | None
            Credential for the Gemini API.  ``None`` or blank disables the
            completion gateway.
        gemini_model : str
            Gemini model identifier used for every completion.
        request_timeout : float
            Upper bound, in seconds, on a single upstream generation call.

    Server Settings:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Listen port (1024-65535).
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            Root logging level applied by the CLI entry point.

    Paths:
        frontend_dir : Path
            Directory holding ``index.html`` and the front-end assets.

    Examples
    --------
        >>> from saralcredit.core.config import config
        >>> config.server_port
        3000

        >>> custom = SaralCreditConfig(gemini_api_key="test-key", server_port=8080)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SARALCREDIT_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Gemini settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SARALCREDIT_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="Gemini API key (gateway is disabled when unset)",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model identifier",
    )
    request_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for one upstream generation call",
        gt=0,
        le=600,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("SARALCREDIT_SERVER_PORT", "PORT"),
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logging level",
    )

    # Paths
    frontend_dir: Path = Field(
        default=_PACKAGE_FRONTEND_DIR,
        description="Directory containing index.html and static assets",
    )

    @property
    def index_path(self) -> Path:
        """Path of the single-page application's entry document."""
        return self.frontend_dir / "index.html"


# Global configuration instance, loaded from SARALCREDIT_* variables, the
# unprefixed PORT / GEMINI_API_KEY aliases and the .env file.
config = SaralCreditConfig()
