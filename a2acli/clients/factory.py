"""Transport client construction for a negotiated binding."""

from a2acli.a2a.models import AgentCard
from a2acli.clients.jsonrpc import JsonRpcTransport
from a2acli.clients.protocols import TransportClient
from a2acli.clients.rest import RestTransport
from a2acli.core.constants import TransportBinding
from a2acli.core.exceptions import NegotiationError
from a2acli.core.http import HTTPClientFactory


def create_transport(
    binding: TransportBinding,
    card: AgentCard,
    service_url: str,
    factory: HTTPClientFactory,
) -> TransportClient:
    """Open a transport client for the negotiated binding.

    Args:
        binding: Binding chosen by ``negotiate``.
        card: Resolved agent card, used to find the binding's endpoint.
        service_url: Fallback endpoint when the card has none.
        factory: HTTP client factory.

    Raises:
        NegotiationError: If this client has no implementation for the binding.
    """
    url = card.url_for(binding.value) or service_url
    if binding is TransportBinding.JSON_RPC:
        return JsonRpcTransport(url, factory.create_client())
    if binding is TransportBinding.HTTP_JSON:
        return RestTransport(url, factory.create_client())
    raise NegotiationError(
        f"transport {binding.value!r} is not supported by this client",
        requested=binding.value,
    )
