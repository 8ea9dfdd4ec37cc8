"""Core building blocks: settings, database base classes, services, errors."""
