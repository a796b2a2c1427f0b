"""HTTP API for the template service."""
