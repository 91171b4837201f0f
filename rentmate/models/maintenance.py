# models/maintenance.py
"""
MaintenanceRequest model - a repair request a tenant raises on an active lease,
handled by the property's landlord or its assigned manager.

Lifecycle:

     OPEN -> ACCEPTED -> SCHEDULED -> IN_PROGRESS -> COMPLETED
     OPEN -> REJECTED
     OPEN -> CANCELLED (tenant)

ACCEPTED may skip scheduling, and ACCEPTED or SCHEDULED may be resolved
directly. COMPLETED and REJECTED can be reopened to OPEN. CANCELLED is final.
Every change appends a MaintenanceEvent to the request's timeline.
"""
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, ForeignKey, Enum, func

from rentmate.exceptions import InvalidTransitionError
from .base import Base


class MaintenanceStatus(str, enum.Enum):
     OPEN = "OPEN"
     ACCEPTED = "ACCEPTED"
     SCHEDULED = "SCHEDULED"
     IN_PROGRESS = "IN_PROGRESS"
     COMPLETED = "COMPLETED"
     REJECTED = "REJECTED"
     CANCELLED = "CANCELLED"


class MaintenancePriority(str, enum.Enum):
     LOW = "LOW"
     MEDIUM = "MEDIUM"
     HIGH = "HIGH"
     URGENT = "URGENT"


class ActorType(str, enum.Enum):
     TENANT = "TENANT"
     LANDLORD = "LANDLORD"
     PROPERTY_MANAGER = "PROPERTY_MANAGER"
     SYSTEM = "SYSTEM"


CLOSED_STATUSES = frozenset({
     MaintenanceStatus.COMPLETED,
     MaintenanceStatus.REJECTED,
     MaintenanceStatus.CANCELLED,
})

MAINTENANCE_TRANSITIONS = {
     MaintenanceStatus.OPEN: frozenset({
          MaintenanceStatus.ACCEPTED,
          MaintenanceStatus.REJECTED,
          MaintenanceStatus.CANCELLED,
     }),
     MaintenanceStatus.ACCEPTED: frozenset({
          MaintenanceStatus.SCHEDULED,
          MaintenanceStatus.IN_PROGRESS,
          MaintenanceStatus.COMPLETED,
     }),
     MaintenanceStatus.SCHEDULED: frozenset({MaintenanceStatus.IN_PROGRESS, MaintenanceStatus.COMPLETED}),
     MaintenanceStatus.IN_PROGRESS: frozenset({MaintenanceStatus.COMPLETED}),
     MaintenanceStatus.COMPLETED: frozenset({MaintenanceStatus.OPEN}),
     MaintenanceStatus.REJECTED: frozenset({MaintenanceStatus.OPEN}),
     MaintenanceStatus.CANCELLED: frozenset(),
}


class MaintenanceRequest(Base):
     __tablename__ = "maintenance_requests"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(Integer, ForeignKey("lease_agreements.id"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     landlord_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     title = Column(String(255), nullable=False)
     description = Column(Text, nullable=False)
     priority = Column(
          Enum(MaintenancePriority, name="maintenance_priority", create_constraint=True),
          default=MaintenancePriority.MEDIUM,
          nullable=False
     )
     status = Column(
          Enum(MaintenanceStatus, name="maintenance_status", create_constraint=True),
          default=MaintenanceStatus.OPEN,
          nullable=False,
          index=True
     )
     scheduled_for = Column(DateTime, nullable=True)
     completed_at = Column(DateTime, nullable=True)
     notes = Column(Text, nullable=True)
     rejection_reason = Column(Text, nullable=True)
     estimated_cost = Column(Numeric(12, 2), nullable=True)
     actual_cost = Column(Numeric(12, 2), nullable=True)
     assigned_contractor = Column(String(255), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     @property
     def is_closed(self) -> bool:
          return self.status in CLOSED_STATUSES

     def days_open(self, now: datetime) -> int:
          end = self.completed_at if self.status == MaintenanceStatus.COMPLETED and self.completed_at else now
          return max((end - self.created_at).days, 0)

     def transition_to(self, status: MaintenanceStatus, at: datetime) -> None:
          if status not in MAINTENANCE_TRANSITIONS[self.status]:
               raise InvalidTransitionError(
                    f"Maintenance request {self.id} cannot move from {self.status.value} to {status.value}"
               )
          self.status = status
          self.updated_at = at

     def __repr__(self):
          return f"<MaintenanceRequest(id={self.id}, status='{self.status.value}', priority='{self.priority.value}')>"


class MaintenanceComment(Base):
     __tablename__ = "maintenance_comments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     request_id = Column(
          Integer,
          ForeignKey("maintenance_requests.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
     author_role = Column(Enum(ActorType, name="maintenance_actor", create_constraint=True), nullable=False)
     content = Column(Text, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)


class MaintenanceEvent(Base):
     """One timeline entry: the status after the change and who made it."""
     __tablename__ = "maintenance_events"

     id = Column(Integer, primary_key=True, autoincrement=True)
     request_id = Column(
          Integer,
          ForeignKey("maintenance_requests.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     status = Column(Enum(MaintenanceStatus, name="maintenance_status", create_constraint=True), nullable=False)
     message = Column(Text, nullable=False)
     actor = Column(Enum(ActorType, name="maintenance_actor", create_constraint=True), nullable=False)
     actor_id = Column(Integer, ForeignKey("users.id"), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
