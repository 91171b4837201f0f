# repositories/base.py
"""
Storage capability the services depend on.

A repository holds one kind of model keyed by integer id. Services only ever
get, put, delete and list-by-predicate, so the lease and payment logic runs
the same against a database session or a plain dict.
"""
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

Predicate = Callable[[T], bool]


class Repository(ABC, Generic[T]):

     @abstractmethod
     def get(self, obj_id: int) -> Optional[T]:
          ...

     @abstractmethod
     def add(self, obj: T) -> T:
          """Store ``obj`` and return it with its id assigned."""
          ...

     @abstractmethod
     def delete(self, obj: T) -> None:
          ...

     @abstractmethod
     def list(
          self,
          predicate: Optional[Predicate] = None,
          descending: bool = False,
          limit: Optional[int] = None,
          **filters,
     ) -> List[T]:
          """
          Objects matching every ``column=value`` filter and ``predicate``,
          ordered by id (newest first when ``descending``), at most ``limit``.
          """
          ...

     def first(self, predicate: Optional[Predicate] = None, **filters) -> Optional[T]:
          matches = self.list(predicate, limit=1, **filters)
          return matches[0] if matches else None

     def last(self, predicate: Optional[Predicate] = None, **filters) -> Optional[T]:
          matches = self.list(predicate, descending=True, limit=1, **filters)
          return matches[0] if matches else None

     def count(self, predicate: Optional[Predicate] = None, **filters) -> int:
          return len(self.list(predicate, **filters))
