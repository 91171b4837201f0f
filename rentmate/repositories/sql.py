# repositories/sql.py
from typing import List, Optional, Type

from sqlalchemy import desc
from sqlalchemy.orm import Session

from .base import Predicate, Repository, T


class SqlAlchemyRepository(Repository[T]):
     """Repository over one mapped model class within a session."""

     def __init__(self, db: Session, model: Type[T]):
          self.db = db
          self.model = model

     def get(self, obj_id: int) -> Optional[T]:
          return self.db.get(self.model, obj_id)

     def add(self, obj: T) -> T:
          self.db.add(obj)
          self.db.flush()  # Flush to get the ID without committing
          return obj

     def delete(self, obj: T) -> None:
          self.db.delete(obj)
          self.db.flush()

     def _query(self, filters):
          query = self.db.query(self.model)
          if filters:
               query = query.filter_by(**filters)
          return query

     def list(
          self,
          predicate: Optional[Predicate] = None,
          descending: bool = False,
          limit: Optional[int] = None,
          **filters,
     ) -> List[T]:
          order = desc(self.model.id) if descending else self.model.id
          query = self._query(filters).order_by(order)
          if predicate is None:
               if limit is not None:
                    query = query.limit(limit)
               return query.all()
          # Python-side predicates can't be pushed into SQL
          rows = [row for row in query if predicate(row)]
          return rows if limit is None else rows[:limit]

     def count(self, predicate: Optional[Predicate] = None, **filters) -> int:
          if predicate is None:
               return self._query(filters).count()
          return super().count(predicate, **filters)
