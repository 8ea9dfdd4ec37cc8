"""Infrastructure adapters: logging, database, email, realtime, metrics."""
