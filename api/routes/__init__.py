"""Proxy routers."""
