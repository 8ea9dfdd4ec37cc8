"""WebSocket connection manager dependencies for FastAPI route handlers.

Usage:
    from campus_events.core.dependencies.realtime import OptionalConnectionManager

    @router.get("/ws/stats")
    async def stats(manager: OptionalConnectionManager):
        if manager is None:
            return {"websocket": "disabled"}
        return {"connections": manager.connection_count}
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from campus_events.infra.realtime import ConnectionManager


def get_ws_connection_manager() -> ConnectionManager | None:
    """Get the WebSocket connection manager, or None if it was not started.

    The import is deferred to call time so tests can swap the global.
    """
    from campus_events.infra.realtime import get_connection_manager

    try:
        return get_connection_manager()
    except RuntimeError:
        return None


OptionalConnectionManager = Annotated[ConnectionManager | None, Depends(get_ws_connection_manager)]

__all__ = ["OptionalConnectionManager", "get_ws_connection_manager"]
