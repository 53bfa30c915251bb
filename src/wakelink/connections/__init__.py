"""Live device connections: handles, registry and lifecycle."""
