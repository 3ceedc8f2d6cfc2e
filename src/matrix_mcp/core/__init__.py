"""Core infrastructure: HTTP client, errors, logging and call context."""
