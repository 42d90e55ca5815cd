from __future__ import annotations

from typing import Any, Dict, Optional

import aiohttp

from core.config import ConfigAccessor
from core.events import EventBus
from integrations.clients.transmission import TransmissionClient


def build_client(
    CONFIG: Dict[str, Any],
    *,
    session_id: Optional[str] = None,
    http_session: Optional[aiohttp.ClientSession] = None,
    event_bus: Optional[EventBus] = None,
) -> TransmissionClient:
    """Create a client from the loaded config (env overrides already applied).

    An explicit ``session_id`` (e.g. one persisted by an earlier run) wins
    over the configured one.
    """
    acc = ConfigAccessor(CONFIG)
    ep = acc.endpoint()
    debug_logging = acc.debug_logging()
    if event_bus is None:
        event_bus = EventBus(structured_logs=acc.structured_logs(), debug_logging=debug_logging)
    return TransmissionClient(
        ep['url'],
        session_id or ep.get('session_id'),
        ep.get('username'),
        ep.get('password'),
        http_session=http_session,
        request_timeout=acc.request_timeout(),
        max_concurrent=acc.max_concurrent_requests(),
        debug_logging=debug_logging,
        event_bus=event_bus,
    )


__all__ = ['TransmissionClient', 'build_client']
