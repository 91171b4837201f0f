# models/rent_installment.py
import enum

from sqlalchemy import Column, Integer, Numeric, Date, DateTime, ForeignKey, Enum, func
from .base import Base


class InstallmentStatus(str, enum.Enum):
     """Enumeration for rent installment payment status."""
     PENDING = "PENDING"
     PAID = "PAID"
     OVERDUE = "OVERDUE"
     WAIVED = "WAIVED"


class RentInstallment(Base):
     """
     One month of rent on an active lease.

     The schedule is generated when the lease activates; the first
     installment is covered by the acceptance payment.
     """
     __tablename__ = "rent_installments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("lease_agreements.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     sequence = Column(Integer, nullable=False)
     period_start = Column(Date, nullable=False)
     due_date = Column(Date, nullable=False, index=True)
     amount = Column(Numeric(12, 2), nullable=False)
     status = Column(
          Enum(InstallmentStatus, name="installment_status", create_constraint=True),
          default=InstallmentStatus.PENDING,
          nullable=False,
          index=True
     )
     paid_at = Column(DateTime, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<RentInstallment(id={self.id}, lease_id={self.lease_id}, due_date={self.due_date}, status='{self.status.value}')>"

     @property
     def is_settled(self) -> bool:
          return self.status in (InstallmentStatus.PAID, InstallmentStatus.WAIVED)

     def is_overdue(self, today) -> bool:
          """Check if installment is past due date and unpaid."""
          return self.status == InstallmentStatus.PENDING and self.due_date < today

     def mark_as_paid(self, at) -> None:
          self.status = InstallmentStatus.PAID
          self.paid_at = at

     def mark_as_overdue(self) -> None:
          self.status = InstallmentStatus.OVERDUE
