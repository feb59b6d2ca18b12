"""Logging, correlation ids and request middleware."""
