"""VaultTrack expense store and its REST API (FastAPI over SQLAlchemy)."""

__all__ = ["config", "crud", "database", "models", "schemas", "server"]
