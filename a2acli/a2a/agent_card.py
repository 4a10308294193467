"""A2A Agent Card resolution.

Fetches and validates the agent card a service publishes under its
well-known path. The card advertises the transport bindings the
negotiator chooses from.
"""

import httpx
from pydantic import ValidationError

from a2acli.a2a.models import AgentCard
from a2acli.core.constants import AGENT_CARD_PATH
from a2acli.core.exceptions import TransportError
from a2acli.core.http import HTTPClientFactory
from a2acli.core.logging import get_logger


logger = get_logger(__name__)

# Served by agents implementing protocol versions before 0.3
LEGACY_AGENT_CARD_PATH = "/.well-known/agent.json"


def agent_card_url(service_url: str, path: str = AGENT_CARD_PATH) -> str:
    """Well-known card URL for a service base URL.

    Example:
        >>> agent_card_url("http://localhost:9001/")
        'http://localhost:9001/.well-known/agent-card.json'
    """
    return service_url.rstrip("/") + path


async def resolve_agent_card(
    service_url: str,
    factory: HTTPClientFactory | None = None,
) -> AgentCard:
    """Fetch the agent card for a service.

    Falls back to the legacy well-known path when the current one is 404.

    Args:
        service_url: Base URL of the A2A service.
        factory: HTTP client factory; a default one is built if omitted.

    Returns:
        Validated AgentCard.

    Raises:
        TransportError: If the card cannot be fetched or parsed.
    """
    factory = factory or HTTPClientFactory()
    async with factory.get_client() as client:
        try:
            response = await client.get(agent_card_url(service_url))
            if response.status_code == httpx.codes.NOT_FOUND:
                logger.debug("Agent card not at current path, trying legacy path")
                response = await client.get(agent_card_url(service_url, LEGACY_AGENT_CARD_PATH))
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"failed to fetch agent card: HTTP {e.response.status_code}",
                code=e.response.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"failed to fetch agent card: {e}", cause=e) from e
        except ValueError as e:
            raise TransportError(f"agent card is not valid JSON: {e}", cause=e) from e

    try:
        card = AgentCard.model_validate(payload)
    except ValidationError as e:
        raise TransportError(f"invalid agent card: {e}", cause=e) from e

    logger.debug("Resolved agent card", agent=card.name, bindings=card.advertised_bindings())
    return card
