"""Boundary adapters: database, file storage and push notifications."""
