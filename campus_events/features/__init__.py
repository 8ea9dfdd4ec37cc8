"""Feature packages: events, users, registrations, notifications, realtime, health, metrics."""
