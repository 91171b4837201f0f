# models/lease_application.py
import enum

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum, func
from .base import Base


class ApplicationStatus(str, enum.Enum):
     PENDING = "pending"
     UNDER_REVIEW = "under_review"
     APPROVED = "approved"
     REJECTED = "rejected"
     WITHDRAWN = "withdrawn"


OPEN_APPLICATION_STATUSES = frozenset({
     ApplicationStatus.PENDING,
     ApplicationStatus.UNDER_REVIEW,
     ApplicationStatus.APPROVED,
})


class LeaseApplication(Base):
     """
     A tenant's request to rent a property. A lease agreement can only be
     drafted from an approved application.
     """
     __tablename__ = "lease_applications"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     message = Column(Text, nullable=True)
     status = Column(
          Enum(ApplicationStatus, name="application_status", create_constraint=True),
          default=ApplicationStatus.PENDING,
          nullable=False,
          index=True
     )
     rejection_reason = Column(Text, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     reviewed_at = Column(DateTime, nullable=True)

     @property
     def is_open(self) -> bool:
          return self.status in OPEN_APPLICATION_STATUSES

     def __repr__(self):
          return f"<LeaseApplication(id={self.id}, property_id={self.property_id}, status='{self.status.value}')>"
