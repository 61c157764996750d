from trafficx import config
from trafficx.storage.base import Storage
from trafficx.storage.memory import MemStorage


def create_storage(backend: str = None) -> Storage:
    """Build the configured entity store ("memory" or "database")."""
    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "memory":
        return MemStorage()
    if backend == "database":
        from trafficx.storage.database import DatabaseStorage
        return DatabaseStorage(config.DATABASE_URL)
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = ["Storage", "MemStorage", "create_storage"]
