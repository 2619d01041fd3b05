"""Infrastructure layer: SQL cache store, registry, scheduling, and wiring."""
