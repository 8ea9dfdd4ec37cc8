"""FastAPI application factory, lifespan, middleware and exception handlers."""
