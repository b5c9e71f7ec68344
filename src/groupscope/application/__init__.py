"""Application layer: services that load state and apply access decisions."""
