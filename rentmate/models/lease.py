# models/lease.py
"""
LeaseAgreement model - a proposed or executed tenancy contract between one
landlord and one tenant for one property.

Lifecycle:

     draft -> pending_tenant -> tenant_accepted -> payment_pending -> active -> terminated
                            +-> rejected                          +-> expired
                            +-> expired (response window lapsed)

rejected, expired and terminated are terminal.
"""
import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, Date, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship

from rentmate.exceptions import InvalidTransitionError, ValidationError
from .base import Base


class LeaseStatus(str, enum.Enum):
     """Enumeration for lease lifecycle states."""
     DRAFT = "draft"
     PENDING_TENANT = "pending_tenant"
     TENANT_ACCEPTED = "tenant_accepted"
     PAYMENT_PENDING = "payment_pending"
     ACTIVE = "active"
     REJECTED = "rejected"
     EXPIRED = "expired"
     TERMINATED = "terminated"


class PaymentStatus(str, enum.Enum):
     """Payment shadow state carried on the lease itself."""
     UNPAID = "unpaid"
     PROCESSING = "processing"
     PAID = "paid"


class DocumentKind(str, enum.Enum):
     PDF = "pdf"
     IMAGE = "image"


TERMINAL_STATUSES = frozenset({
     LeaseStatus.REJECTED,
     LeaseStatus.EXPIRED,
     LeaseStatus.TERMINATED,
})

# States the tenant can no longer respond from.
RESPONDED_STATUSES = frozenset({
     LeaseStatus.TENANT_ACCEPTED,
     LeaseStatus.PAYMENT_PENDING,
     LeaseStatus.ACTIVE,
     LeaseStatus.REJECTED,
     LeaseStatus.TERMINATED,
})

ALLOWED_TRANSITIONS = {
     LeaseStatus.DRAFT: frozenset({LeaseStatus.PENDING_TENANT}),
     LeaseStatus.PENDING_TENANT: frozenset({
          LeaseStatus.TENANT_ACCEPTED,
          LeaseStatus.REJECTED,
          LeaseStatus.EXPIRED,
     }),
     LeaseStatus.TENANT_ACCEPTED: frozenset({LeaseStatus.PAYMENT_PENDING}),
     LeaseStatus.PAYMENT_PENDING: frozenset({LeaseStatus.ACTIVE, LeaseStatus.EXPIRED}),
     LeaseStatus.ACTIVE: frozenset({LeaseStatus.TERMINATED}),
     LeaseStatus.REJECTED: frozenset(),
     LeaseStatus.EXPIRED: frozenset(),
     LeaseStatus.TERMINATED: frozenset(),
}


class LeaseAgreement(Base):
     """
     Lease agreement. Mutated only by its landlord (terms, documents, sending)
     or its tenant (accept, reject, pay); either party may terminate.
     """
     __tablename__ = "lease_agreements"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     landlord_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     application_id = Column(
          Integer,
          ForeignKey("lease_applications.id"),
          nullable=False,
          unique=True  # One lease per approved application
     )

     # Terms
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False)
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     security_deposit = Column(Numeric(12, 2), nullable=False)
     tenancy_terms = Column(Text, nullable=True)

     status = Column(
          Enum(LeaseStatus, name="lease_status", create_constraint=True),
          default=LeaseStatus.DRAFT,
          nullable=False,
          index=True
     )

     # Payment shadow state
     payment_status = Column(
          Enum(PaymentStatus, name="lease_payment_status", create_constraint=True),
          default=PaymentStatus.UNPAID,
          nullable=False
     )
     payment_amount = Column(Numeric(12, 2), nullable=True)
     paid_at = Column(DateTime, nullable=True)

     rejection_reason = Column(Text, nullable=True)
     termination_reason = Column(Text, nullable=True)
     terminated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
     terminated_at = Column(DateTime, nullable=True)

     # Timestamps
     sent_to_tenant_at = Column(DateTime, nullable=True)
     tenant_responded_at = Column(DateTime, nullable=True)
     acceptance_deadline = Column(DateTime, nullable=True, index=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     documents = relationship(
          "LeaseDocument",
          back_populates="lease",
          order_by="LeaseDocument.position",
          cascade="all, delete-orphan",
     )

     def __repr__(self):
          return f"<LeaseAgreement(id={self.id}, status='{self.status.value}', tenant_id={self.tenant_id})>"

     @staticmethod
     def validate_terms(
          start_date: date,
          end_date: date,
          monthly_rent: Decimal,
          security_deposit: Decimal
     ) -> None:
          """Raise ValidationError unless the terms are well formed."""
          if start_date is None or end_date is None:
               raise ValidationError("Start date and end date are required")
          if end_date <= start_date:
               raise ValidationError("End date must be after start date")
          if monthly_rent is None or Decimal(monthly_rent) <= 0:
               raise ValidationError("Monthly rent must be a positive amount")
          if security_deposit is None or Decimal(security_deposit) <= 0:
               raise ValidationError("Security deposit must be a positive amount")

     @property
     def total_due(self) -> Decimal:
          """Deposit plus first month's rent, due to activate the lease."""
          return Decimal(self.security_deposit) + Decimal(self.monthly_rent)

     @property
     def is_terminal(self) -> bool:
          return self.status in TERMINAL_STATUSES

     @property
     def is_paid(self) -> bool:
          return self.payment_status == PaymentStatus.PAID

     def deadline_passed(self, now: datetime) -> bool:
          return self.acceptance_deadline is not None and now >= self.acceptance_deadline

     def is_party(self, user_id: int) -> bool:
          return user_id in (self.tenant_id, self.landlord_id)

     def transition_to(self, status: LeaseStatus, at: datetime) -> None:
          """Move to ``status`` if the lifecycle allows it."""
          if status not in ALLOWED_TRANSITIONS[self.status]:
               raise InvalidTransitionError(
                    f"Lease {self.id} cannot move from {self.status.value} to {status.value}"
               )
          self.status = status
          self.updated_at = at


class LeaseDocument(Base):
     """Attachment shown to the tenant alongside the lease terms."""
     __tablename__ = "lease_documents"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("lease_agreements.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     name = Column(String(255), nullable=False)
     kind = Column(Enum(DocumentKind, name="document_kind", create_constraint=True), nullable=False)
     url = Column(String(1000), nullable=False)
     position = Column(Integer, nullable=False, default=0)
     uploaded_at = Column(DateTime, server_default=func.now(), nullable=False)

     lease = relationship("LeaseAgreement", back_populates="documents")

     def __repr__(self):
          return f"<LeaseDocument(id={self.id}, lease_id={self.lease_id}, name='{self.name}')>"
