"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
Anti-Pattern Avoided: Fixture reuse without explicit scope
"""

import io
from pathlib import Path

import pytest
from rich.console import Console

from a2acli.core.config import Settings, get_settings


# ============================================================================
# Environment Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's env vars and config files out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("A2ACLI_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults."""
    return Settings(
        service_url="http://agent.test",
        token="test-token",
        http_timeout_seconds=5,
        log_level="DEBUG",
    )


# ============================================================================
# Output Fixtures
# ============================================================================

@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(console_buffer: io.StringIO) -> Console:
    """Non-terminal rich console writing into a buffer."""
    return Console(file=console_buffer, width=100, force_terminal=False, color_system=None)


# ============================================================================
# Protocol Payload Fixtures
# ============================================================================

@pytest.fixture
def agent_card_payload() -> dict:
    """Agent card advertising JSON-RPC and HTTP+JSON."""
    return {
        "name": "Report Agent",
        "description": "Writes reports",
        "url": "http://agent.test/a2a",
        "version": "1.0.0",
        "protocolVersion": "0.3.0",
        "preferredTransport": "JSONRPC",
        "additionalInterfaces": [
            {"url": "http://agent.test/a2a", "transport": "JSONRPC"},
            {"url": "http://agent.test/rest", "transport": "HTTP+JSON"},
        ],
        "capabilities": {"streaming": True},
        "skills": [
            {
                "id": "summarize",
                "name": "Summarize",
                "description": "Summarize a document",
                "tags": ["text"],
                "security": [{"oauth": ["read"]}],
            }
        ],
    }
