"""Infrastructure layer: persistence and the HTTP API."""
