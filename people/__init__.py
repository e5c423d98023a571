"""MongoDB-backed Person CRUD demo service."""

__version__ = "0.1.0"
