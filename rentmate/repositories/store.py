# repositories/store.py
from typing import Optional

from sqlalchemy.orm import Session

from rentmate.models import (
     Conversation,
     LeaseAgreement,
     LeaseApplication,
     MaintenanceComment,
     MaintenanceEvent,
     MaintenanceRequest,
     Message,
     Notification,
     Payment,
     PaymentLedger,
     Property,
     RentInstallment,
     User,
)
from .memory import InMemoryRepository
from .sql import SqlAlchemyRepository

_MODELS = {
     "users": User,
     "properties": Property,
     "applications": LeaseApplication,
     "leases": LeaseAgreement,
     "payments": Payment,
     "ledger": PaymentLedger,
     "installments": RentInstallment,
     "notifications": Notification,
     "conversations": Conversation,
     "messages": Message,
     "maintenance": MaintenanceRequest,
     "maintenance_comments": MaintenanceComment,
     "maintenance_events": MaintenanceEvent,
}


class Store:
     """
     One repository per aggregate, plus the commit point.

     Services read and write through a Store; the API builds one per request
     session, tests build an in-memory one.
     """

     def __init__(self, repositories: dict, db: Optional[Session] = None):
          self._db = db
          for name in _MODELS:
               setattr(self, name, repositories[name])

     @classmethod
     def for_session(cls, db: Session) -> "Store":
          return cls({name: SqlAlchemyRepository(db, model) for name, model in _MODELS.items()}, db=db)

     @classmethod
     def in_memory(cls) -> "Store":
          return cls({name: InMemoryRepository() for name in _MODELS})

     def commit(self) -> None:
          """Persist what has been written so far, even if the caller fails next."""
          if self._db is not None:
               self._db.commit()

     def flush(self) -> None:
          """Assign database ids to pending rows without committing."""
          if self._db is not None:
               self._db.flush()
