"""Domain layer: value objects, ports and pure domain services."""
