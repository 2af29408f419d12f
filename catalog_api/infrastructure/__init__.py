"""Infrastructure layer - configuration, logging, database and request context."""
