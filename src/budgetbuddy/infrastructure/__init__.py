"""Infrastructure adapters: external providers and persistence."""
