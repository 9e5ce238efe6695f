"""
Core utilities shared across the teamhub backend.

This package hosts:
- configuration helpers (env vars, data directory, log level)
- cross-cutting services such as logging setup and password hashing
- small time/identifier helpers used by the storage layer

Routers, services and repositories should depend on these primitives
instead of reading os.environ directly.
"""
