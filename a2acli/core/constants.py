"""Shared constants for the A2A CLI.

Provides centralized values for:
- Transport binding names and negotiation priority
- Terminal task states
- Preview and history limits
- Default endpoints and timeouts
"""

from enum import Enum


# =============================================================================
# Transport Bindings
# =============================================================================


class TransportBinding(str, Enum):
    """Transport bindings a remote agent can advertise.

    Values are the CLI spellings; the protocol spellings (``JSONRPC``,
    ``GRPC``, ``HTTP+JSON``) are mapped onto them by ``normalize_binding``.
    """

    GRPC = "grpc"
    JSON_RPC = "json-rpc"
    HTTP_JSON = "http+json"


# Highest priority first
TRANSPORT_PRIORITY: tuple[TransportBinding, ...] = (
    TransportBinding.GRPC,
    TransportBinding.JSON_RPC,
    TransportBinding.HTTP_JSON,
)

DEFAULT_TRANSPORT = TransportBinding.JSON_RPC

# Bindings this client ships an implementation for
CLIENT_TRANSPORTS: frozenset[TransportBinding] = frozenset(
    {TransportBinding.JSON_RPC, TransportBinding.HTTP_JSON}
)

_BINDING_ALIASES: dict[str, TransportBinding] = {
    "grpc": TransportBinding.GRPC,
    "json-rpc": TransportBinding.JSON_RPC,
    "jsonrpc": TransportBinding.JSON_RPC,
    "json_rpc": TransportBinding.JSON_RPC,
    "http+json": TransportBinding.HTTP_JSON,
    "http_json": TransportBinding.HTTP_JSON,
    "rest": TransportBinding.HTTP_JSON,
}


def normalize_binding(value: str) -> TransportBinding | None:
    """Map a binding spelling onto a TransportBinding.

    Args:
        value: Binding name as typed by a user or advertised in an agent card.

    Returns:
        The matching TransportBinding, or None if the name is not recognized.

    Example:
        >>> normalize_binding("JSONRPC")
        <TransportBinding.JSON_RPC: 'json-rpc'>
    """
    return _BINDING_ALIASES.get(value.strip().lower())


# =============================================================================
# Task Lifecycle
# =============================================================================

TERMINAL_STATES: frozenset[str] = frozenset(
    {"completed", "failed", "rejected", "canceled"}
)


# =============================================================================
# Rendering Limits
# =============================================================================

DEFAULT_HISTORY_SIZE = 15
INTERACTIVE_PREVIEW_CHARS = 200
SUMMARY_PREVIEW_CHARS = 500
INTERACTIVE_TRUNCATION_MARKER = "..."
SUMMARY_TRUNCATION_MARKER = "... (truncated)"


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_SERVICE_URL = "http://127.0.0.1:9001"
AGENT_CARD_PATH = "/.well-known/agent-card.json"
DEFAULT_HTTP_TIMEOUT_SECONDS = 900.0
DEFAULT_LOG_LEVEL = "WARNING"
