"""Transport capability negotiation.

Chooses the single transport binding a session will use, before any
stream is opened:

1. A forced binding (``--transport``) must be one of the recognized
   bindings, otherwise negotiation fails immediately.
2. Without an override, the first binding in priority order
   (grpc, json-rpc, http+json) that the agent advertises wins.
3. Nothing advertised or nothing matching falls back to json-rpc.
"""

from collections.abc import Iterable

from a2acli.core.constants import (
    DEFAULT_TRANSPORT,
    TRANSPORT_PRIORITY,
    TransportBinding,
    normalize_binding,
)
from a2acli.core.exceptions import NegotiationError


RECOGNIZED_TRANSPORTS: frozenset[TransportBinding] = frozenset(TransportBinding)


def validate_transport(override: str | None) -> TransportBinding | None:
    """Validate a forced transport value.

    Args:
        override: Value given by the user, or None.

    Returns:
        The recognized binding, or None when no override was given.

    Raises:
        NegotiationError: If the value is not a recognized binding.
    """
    if override is None or not override.strip():
        return None
    binding = normalize_binding(override)
    if binding is None:
        recognized = ", ".join(b.value for b in TRANSPORT_PRIORITY)
        raise NegotiationError(
            f"unrecognized transport {override!r} (expected one of: {recognized})",
            requested=override,
        )
    return binding


def negotiate(
    advertised: Iterable[str],
    override: str | None = None,
    available: Iterable[TransportBinding] = RECOGNIZED_TRANSPORTS,
) -> TransportBinding:
    """Select the transport binding for a session.

    Args:
        advertised: Binding names from the agent card, any spelling.
        override: Forced binding, if any.
        available: Bindings the caller is able to open.

    Returns:
        The selected binding.

    Raises:
        NegotiationError: If the override is unrecognized or not available.
    """
    usable = frozenset(available)
    forced = validate_transport(override)
    if forced is not None:
        if forced not in usable:
            raise NegotiationError(
                f"transport {forced.value!r} is not supported by this client",
                requested=override,
            )
        return forced

    offered = {normalize_binding(name) for name in advertised}
    for binding in TRANSPORT_PRIORITY:
        if binding in offered and binding in usable:
            return binding
    return DEFAULT_TRANSPORT
