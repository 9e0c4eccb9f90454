"""HTTP proxy for the Opinion OpenAPI."""
