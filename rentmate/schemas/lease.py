# schemas/lease.py
"""
Pydantic schemas for lease agreement request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from rentmate.models.lease import DocumentKind, LeaseStatus, PaymentStatus


class LeaseCreate(BaseModel):
     """Schema for drafting a lease from an approved application."""
     application_id: int = Field(..., gt=0, description="Approved application the lease is drafted from")
     start_date: date = Field(..., description="First day of the tenancy")
     end_date: date = Field(..., description="Last day of the tenancy (after start_date)")
     monthly_rent: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     security_deposit: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     tenancy_terms: Optional[str] = Field(None, description="Free-text terms shown to the tenant")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "application_id": 1,
                    "start_date": "2026-03-01",
                    "end_date": "2027-02-28",
                    "monthly_rent": 1800.00,
                    "security_deposit": 3600.00,
                    "tenancy_terms": "No pets. Tenant pays utilities."
               }
          }
     )


class LeaseTermsUpdate(BaseModel):
     """Schema for editing a draft lease. Only given fields change."""
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     monthly_rent: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     security_deposit: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     tenancy_terms: Optional[str] = None


class LeaseDocumentCreate(BaseModel):
     name: str = Field(..., min_length=1, max_length=255, description="Display name")
     kind: DocumentKind = Field(..., description="pdf or image")
     url: str = Field(..., min_length=1, max_length=1000, description="Storage locator")


class LeaseDocumentResponse(BaseModel):
     id: Optional[int] = None
     name: str
     kind: DocumentKind
     url: str
     uploaded_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class LeaseRejectRequest(BaseModel):
     reason: str = Field(..., description="Why the tenant is rejecting the lease")

     model_config = ConfigDict(
          json_schema_extra={"example": {"reason": "Found cheaper option"}}
     )


class LeaseTerminateRequest(BaseModel):
     reason: str = Field(..., description="Why the tenancy is ending")


class LeaseResponse(BaseModel):
     """Schema for lease response."""
     id: int
     property_id: int
     tenant_id: int
     landlord_id: int
     application_id: int
     start_date: date
     end_date: date
     monthly_rent: Decimal
     security_deposit: Decimal
     tenancy_terms: Optional[str] = None
     status: LeaseStatus
     payment_status: PaymentStatus
     payment_amount: Optional[Decimal] = None
     paid_at: Optional[datetime] = None
     rejection_reason: Optional[str] = None
     termination_reason: Optional[str] = None
     terminated_at: Optional[datetime] = None
     sent_to_tenant_at: Optional[datetime] = None
     tenant_responded_at: Optional[datetime] = None
     acceptance_deadline: Optional[datetime] = None
     created_at: Optional[datetime] = None
     updated_at: Optional[datetime] = None
     documents: List[LeaseDocumentResponse] = []

     model_config = ConfigDict(from_attributes=True)


class DeadlineStatusResponse(BaseModel):
     lease_id: int
     status: LeaseStatus
     deadline: Optional[datetime] = None
     hours_remaining: Optional[int] = None
     is_expired: bool
