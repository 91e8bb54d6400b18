"""Security: caller authentication helpers."""
