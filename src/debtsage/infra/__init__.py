"""Persistence infrastructure: engine, sessions and repositories."""
