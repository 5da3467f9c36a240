"""Dashboard HTTP API."""
