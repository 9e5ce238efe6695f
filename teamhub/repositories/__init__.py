"""
Persistence adapters.

These modules encapsulate how entities are stored/retrieved: an in-memory map
per entity type, mirrored to one JSON file per type by JsonFileStore.
Services should depend on the managers rather than touching the files.
"""
