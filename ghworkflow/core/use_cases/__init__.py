"""Use cases — one vertical slice per CLI command."""
