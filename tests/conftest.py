"""Shared pytest fixtures for SaralCredit tests."""

import shutil
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from saralcredit.api.main import create_app
from saralcredit.core.completion import CompletionClient
from saralcredit.core.config import SaralCreditConfig

INDEX_HTML = "<!DOCTYPE html><html><head><title>SaralCredit</title></head><body>app</body></html>"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment variables out of configuration under test."""
    for name in (
        "GEMINI_API_KEY",
        "PORT",
        "SARALCREDIT_GEMINI_API_KEY",
        "SARALCREDIT_SERVER_PORT",
        "SARALCREDIT_SERVER_HOST",
        "SARALCREDIT_GEMINI_MODEL",
        "SARALCREDIT_REQUEST_TIMEOUT",
        "SARALCREDIT_FRONTEND_DIR",
        "SARALCREDIT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def frontend_dir(temp_dir: Path) -> Path:
    """Create a minimal front-end bundle: an index page and one asset."""
    frontend = temp_dir / "frontend"
    frontend.mkdir()
    (frontend / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (frontend / "app.js").write_text("console.log('saralcredit');\n", encoding="utf-8")
    return frontend


@pytest.fixture
def test_config(frontend_dir: Path) -> SaralCreditConfig:
    """Create a test configuration pointing at the temporary front end.

    Returns:
        SaralCreditConfig instance for testing
    """
    return SaralCreditConfig(
        _env_file=None,
        gemini_api_key="test-key",
        gemini_model="gemini-test",
        request_timeout=5.0,
        frontend_dir=str(frontend_dir),
    )


@pytest.fixture
def mock_sdk() -> MagicMock:
    """A stand-in for ``google.genai.Client`` whose async call returns ``"ok"``."""
    sdk = MagicMock()
    sdk.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text="ok"))
    return sdk


@pytest.fixture
def completion_client(mock_sdk: MagicMock) -> CompletionClient:
    """Completion client handle backed by :func:`mock_sdk`."""
    return CompletionClient(sdk_client=mock_sdk, model="gemini-test", timeout=5.0)


@pytest.fixture
def test_client(test_config, completion_client) -> Generator[TestClient, None, None]:
    """TestClient for an app whose gateway is initialised with the mock SDK."""
    app = create_app(test_config, gateway_factory=lambda cfg: completion_client)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def unavailable_client(test_config) -> Generator[TestClient, None, None]:
    """TestClient for an app whose gateway could not be initialised."""
    app = create_app(test_config, gateway_factory=lambda cfg: None)
    with TestClient(app) as client:
        yield client
