"""
High-level entry points for the teamhub API.

Routers should call EntityStorage instead of touching the entity managers or
the JSON files directly.
"""
