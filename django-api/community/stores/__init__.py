from community.stores.interfaces import Repository, UnitOfWork
from community.stores.memory_store import MemoryStore, MemoryUnitOfWork

__all__ = [
    "Repository",
    "UnitOfWork",
    "MemoryStore",
    "MemoryUnitOfWork",
]
