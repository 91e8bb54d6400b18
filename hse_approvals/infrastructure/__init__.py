"""Infrastructure layer: Realtime Database, Redis cache, token verification.

Implements the application-layer ports.
"""
