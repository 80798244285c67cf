"""Infrastructure layer - dependency wiring and outbound HTTP clients."""
