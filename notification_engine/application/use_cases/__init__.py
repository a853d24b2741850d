"""Application use cases grouped by area."""
