"""teamhub: team management backend on a JSON-file entity store."""

__version__ = "0.1.0"
