"""Transport clients for A2A services."""

from a2acli.clients.factory import create_transport
from a2acli.clients.jsonrpc import JsonRpcTransport
from a2acli.clients.negotiation import negotiate, validate_transport
from a2acli.clients.protocols import TransportClient
from a2acli.clients.rest import RestTransport

__all__ = [
    "JsonRpcTransport",
    "RestTransport",
    "TransportClient",
    "create_transport",
    "negotiate",
    "validate_transport",
]
