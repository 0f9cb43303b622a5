"""Shared helpers: signing, time handling and logging."""
