"""Domain layer: storage ports consumed by services."""
