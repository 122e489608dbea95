"""Application layer: services and commands orchestrating the domain."""
