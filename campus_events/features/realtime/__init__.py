"""WebSocket endpoint that delivers event announcements to connected clients."""
