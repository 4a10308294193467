"""Unit tests for the TransportClient protocol.

Acceptance Criteria Verified:
- TransportClient is runtime checkable
- Both HTTP transports and the test fake satisfy it
"""

import httpx
import pytest


class TestTransportClientProtocol:
    """Tests for TransportClient definition."""

    def test_protocol_is_runtime_checkable(self) -> None:
        from a2acli.clients.protocols import TransportClient

        assert isinstance(object(), TransportClient) is False

    @pytest.mark.asyncio
    async def test_http_transports_implement_protocol(self) -> None:
        from a2acli.clients.jsonrpc import JsonRpcTransport
        from a2acli.clients.protocols import TransportClient
        from a2acli.clients.rest import RestTransport

        for cls in (JsonRpcTransport, RestTransport):
            transport = cls("http://agent.test", httpx.AsyncClient())
            try:
                assert isinstance(transport, TransportClient)
            finally:
                await transport.aclose()

    def test_fake_implements_protocol(self) -> None:
        from a2acli.clients.protocols import TransportClient
        from tests.fakes.fake_transport import FakeTransportClient

        assert isinstance(FakeTransportClient(), TransportClient)
