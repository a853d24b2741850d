"""Application layer: use cases and the engine facade."""
