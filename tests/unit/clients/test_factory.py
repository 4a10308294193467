"""Unit tests for transport construction."""

import pytest

from a2acli.a2a.models import AgentCard
from a2acli.clients.factory import create_transport
from a2acli.clients.jsonrpc import JsonRpcTransport
from a2acli.clients.rest import RestTransport
from a2acli.core.constants import TransportBinding
from a2acli.core.exceptions import NegotiationError
from a2acli.core.http import HTTPClientFactory


class TestCreateTransport:
    """Tests for create_transport()."""

    @pytest.mark.asyncio
    async def test_json_rpc_uses_advertised_url(self, agent_card_payload, test_settings) -> None:
        card = AgentCard.model_validate(agent_card_payload)

        client = create_transport(
            TransportBinding.JSON_RPC, card, "http://fallback", HTTPClientFactory(test_settings)
        )
        await client.aclose()

        assert isinstance(client, JsonRpcTransport)
        assert client.url == "http://agent.test/a2a"

    @pytest.mark.asyncio
    async def test_http_json_uses_advertised_url(self, agent_card_payload, test_settings) -> None:
        card = AgentCard.model_validate(agent_card_payload)

        client = create_transport(
            TransportBinding.HTTP_JSON, card, "http://fallback", HTTPClientFactory(test_settings)
        )
        await client.aclose()

        assert isinstance(client, RestTransport)
        assert client.url == "http://agent.test/rest"

    @pytest.mark.asyncio
    async def test_card_without_url_falls_back_to_service_url(self, test_settings) -> None:
        card = AgentCard(name="bare")

        client = create_transport(
            TransportBinding.JSON_RPC, card, "http://fallback/", HTTPClientFactory(test_settings)
        )
        await client.aclose()

        assert client.url == "http://fallback"

    def test_grpc_is_not_implemented(self, test_settings) -> None:
        card = AgentCard(name="g", url="http://g")

        with pytest.raises(NegotiationError, match="grpc"):
            create_transport(TransportBinding.GRPC, card, "http://g", HTTPClientFactory(test_settings))
