# routers/payments.py
"""
Payment settlement API.

POST /api/payments/lease/{id}/acceptance-payment: pay deposit + first month,
activating the lease and appending a ledger record whose hash is returned.
Fund movement itself is assumed to be secured by the payment provider.
"""
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, status

from rentmate.auth import require_role, verify_token
from rentmate.dependencies import get_payment_service, get_store
from rentmate.repositories import Store
from rentmate.schemas.lease import LeaseResponse
from rentmate.schemas.payment import (
     AcceptancePaymentRequest,
     AcceptancePaymentResponse,
     LedgerVerificationResponse,
     LogPaymentRequest,
     PaymentResponse,
     PaymentSummaryResponse,
)
from rentmate.services import PaymentService
from rentmate.services.ledger_service import verify_full_chain, verify_ledger_entry

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("/lease/{lease_id}/summary", response_model=PaymentSummaryResponse)
def payment_summary(
     lease_id: int,
     service: PaymentService = Depends(get_payment_service),
     token: dict = Depends(verify_token),
):
     return PaymentSummaryResponse(**asdict(service.get_summary(token["id"], lease_id)))


@router.post("/lease/{lease_id}/acceptance-payment", response_model=AcceptancePaymentResponse)
def acceptance_payment(
     lease_id: int,
     body: AcceptancePaymentRequest,
     service: PaymentService = Depends(get_payment_service),
     token: dict = Depends(verify_token),
):
     result = service.submit_payment(
          token["id"], lease_id, body.amount, body.payment_method, body.description
     )
     return AcceptancePaymentResponse(
          payment=PaymentResponse.model_validate(result.payment),
          lease=LeaseResponse.model_validate(result.lease),
          transaction_hash=result.transaction_hash,
     )


@router.get("/lease/{lease_id}", response_model=List[PaymentResponse])
def lease_payments(
     lease_id: int,
     service: PaymentService = Depends(get_payment_service),
     token: dict = Depends(verify_token),
):
     return service.payments_for_lease(token["id"], lease_id)


@router.post("/lease/{lease_id}/log", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def log_payment(
     lease_id: int,
     body: LogPaymentRequest,
     service: PaymentService = Depends(get_payment_service),
     token: dict = Depends(require_role("landlord", "property_manager")),
):
     return service.log_payment(
          token["id"], lease_id, body.amount, body.payment_type, body.paid_on, body.method, body.description
     )


@router.get("/ledger/verify", response_model=LedgerVerificationResponse)
def verify_chain(store: Store = Depends(get_store), token: dict = Depends(require_role("admin"))):
     valid, message, checked = verify_full_chain(store)
     return LedgerVerificationResponse(valid=valid, message=message, entries_checked=checked)


@router.get("/ledger/verify/{payment_id}", response_model=LedgerVerificationResponse)
def verify_payment(payment_id: int, store: Store = Depends(get_store), token: dict = Depends(verify_token)):
     valid, message = verify_ledger_entry(store, payment_id=payment_id)
     return LedgerVerificationResponse(valid=valid, message=message)
