"""HTTP API for GroupScope."""
