"""Settings and field constants."""
