"""Small CLI helpers."""
