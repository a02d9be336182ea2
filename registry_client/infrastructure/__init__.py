"""Infrastructure: resolution cache, REST transport, and client factory."""
