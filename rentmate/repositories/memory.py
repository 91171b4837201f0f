# repositories/memory.py
from itertools import count
from typing import Dict, List, Optional

from .base import Predicate, Repository, T


class InMemoryRepository(Repository[T]):
     """Dict-backed repository used by tests and the local demo store."""

     def __init__(self):
          self._rows: Dict[int, T] = {}
          self._ids = count(1)

     def get(self, obj_id: int) -> Optional[T]:
          return self._rows.get(obj_id)

     def add(self, obj: T) -> T:
          if getattr(obj, "id", None) is None:
               obj.id = next(self._ids)
          self._rows[obj.id] = obj
          return obj

     def delete(self, obj: T) -> None:
          self._rows.pop(obj.id, None)

     def list(
          self,
          predicate: Optional[Predicate] = None,
          descending: bool = False,
          limit: Optional[int] = None,
          **filters,
     ) -> List[T]:
          rows = []
          for obj_id in sorted(self._rows, reverse=descending):
               if limit is not None and len(rows) >= limit:
                    break
               obj = self._rows[obj_id]
               if any(getattr(obj, key) != value for key, value in filters.items()):
                    continue
               if predicate is not None and not predicate(obj):
                    continue
               rows.append(obj)
          return rows

     def count(self, predicate: Optional[Predicate] = None, **filters) -> int:
          if predicate is None and not filters:
               return len(self._rows)
          return super().count(predicate, **filters)
