# repositories/__init__.py
from .base import Repository
from .memory import InMemoryRepository
from .sql import SqlAlchemyRepository
from .store import Store

__all__ = [
     "Repository",
     "InMemoryRepository",
     "SqlAlchemyRepository",
     "Store",
]
