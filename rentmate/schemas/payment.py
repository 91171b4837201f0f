# schemas/payment.py
"""
Pydantic schemas for payment settlement API.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from rentmate.models.payment import PaymentType, PaymentRecordStatus
from rentmate.models.rent_installment import InstallmentStatus
from .lease import LeaseResponse


class AcceptancePaymentRequest(BaseModel):
     """Request body for POST /api/payments/lease/{id}/acceptance-payment."""

     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Deposit + first month's rent")
     payment_method: Optional[str] = Field(None, max_length=100, description="e.g. card, bank_transfer")
     description: Optional[str] = Field(None, max_length=500)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 5400.00,
                    "payment_method": "card",
               }
          }
     )


class PaymentResponse(BaseModel):
     id: int
     lease_id: int
     payer_id: int
     installment_id: Optional[int] = None
     amount: Decimal
     type: PaymentType
     status: PaymentRecordStatus
     method: Optional[str] = None
     description: Optional[str] = None
     paid_at: datetime

     model_config = ConfigDict(from_attributes=True)


class AcceptancePaymentResponse(BaseModel):
     """Response for POST /api/payments/lease/{id}/acceptance-payment."""

     payment: PaymentResponse
     lease: LeaseResponse
     transaction_hash: str = Field(..., description="Ledger transaction hash for client verification")


class PaymentSummaryResponse(BaseModel):
     lease_id: int
     status: str
     security_deposit: Decimal
     first_month_rent: Decimal
     total_due: Decimal
     total_paid: Decimal
     remaining: Decimal
     deadline: Optional[datetime] = None
     hours_remaining: Optional[int] = None
     is_expired: bool

     model_config = ConfigDict(from_attributes=True)


class LogPaymentRequest(BaseModel):
     """Landlord records a payment received outside the platform."""

     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     payment_type: PaymentType = Field(default=PaymentType.RENT)
     paid_on: date = Field(..., description="Day the money was received")
     method: Optional[str] = Field(None, max_length=100)
     description: Optional[str] = Field(None, max_length=500)


class LedgerVerificationResponse(BaseModel):
     valid: bool
     message: str
     entries_checked: Optional[int] = None


class RentInstallmentResponse(BaseModel):
     id: int
     lease_id: int
     tenant_id: int
     sequence: int
     period_start: date
     due_date: date
     amount: Decimal
     status: InstallmentStatus
     paid_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class InstallmentPayRequest(BaseModel):
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Must equal the installment amount")
     payment_method: Optional[str] = Field(None, max_length=100)
