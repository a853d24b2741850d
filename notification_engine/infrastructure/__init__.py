"""Infrastructure layer: database wiring and store implementations."""
