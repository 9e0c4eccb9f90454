"""Response envelopes."""
