# models/payment.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, ForeignKey, Enum, func
from .base import Base


class PaymentType(str, enum.Enum):
     RENT = "RENT"
     DEPOSIT = "DEPOSIT"
     DEPOSIT_AND_FIRST_RENT = "DEPOSIT_AND_FIRST_RENT"
     LATE_FEE = "LATE_FEE"
     MAINTENANCE_FEE = "MAINTENANCE_FEE"
     OTHER = "OTHER"


class PaymentRecordStatus(str, enum.Enum):
     PENDING = "PENDING"
     COMPLETED = "COMPLETED"
     FAILED = "FAILED"
     REFUNDED = "REFUNDED"


class Payment(Base):
     """
     Payment model - money received against a lease.

     The acceptance payment (deposit + first month) activates the lease;
     later rows are rent installments or payments a landlord logs by hand.
     """
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("lease_agreements.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     payer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     installment_id = Column(Integer, ForeignKey("rent_installments.id"), nullable=True)
     amount = Column(Numeric(12, 2), nullable=False)
     type = Column(Enum(PaymentType, name="payment_type", create_constraint=True), nullable=False)
     status = Column(
          Enum(PaymentRecordStatus, name="payment_record_status", create_constraint=True),
          default=PaymentRecordStatus.COMPLETED,
          nullable=False
     )
     method = Column(String(100), nullable=True)
     description = Column(Text, nullable=True)
     paid_at = Column(DateTime, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Payment(id={self.id}, lease_id={self.lease_id}, amount={self.amount}, type='{self.type.value}')>"
