# routers/rent_schedule.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from rentmate.auth import verify_token
from rentmate.dependencies import get_schedule_service
from rentmate.schemas.payment import InstallmentPayRequest, PaymentResponse, RentInstallmentResponse
from rentmate.services import RentScheduleService

router = APIRouter(prefix="/api/rent", tags=["rent"])


@router.get("/lease/{lease_id}", response_model=List[RentInstallmentResponse])
def lease_installments(
     lease_id: int,
     service: RentScheduleService = Depends(get_schedule_service),
     token: dict = Depends(verify_token),
):
     return service.installments_for_lease(token["id"], lease_id)


@router.get("/lease/{lease_id}/current", response_model=Optional[RentInstallmentResponse])
def current_installment(
     lease_id: int,
     service: RentScheduleService = Depends(get_schedule_service),
     token: dict = Depends(verify_token),
):
     return service.current_installment(token["id"], lease_id)


@router.get("/upcoming", response_model=List[RentInstallmentResponse])
def upcoming(
     days: int = Query(30, ge=1, le=365),
     service: RentScheduleService = Depends(get_schedule_service),
     token: dict = Depends(verify_token),
):
     return service.upcoming_for_tenant(token["id"], days)


@router.post("/lease/{lease_id}/installments/{installment_id}/pay", response_model=PaymentResponse)
def pay_installment(
     lease_id: int,
     installment_id: int,
     body: InstallmentPayRequest,
     service: RentScheduleService = Depends(get_schedule_service),
     token: dict = Depends(verify_token),
):
     return service.pay_installment(token["id"], lease_id, installment_id, body.amount, body.payment_method)


@router.post("/lease/{lease_id}/installments/{installment_id}/waive", response_model=RentInstallmentResponse)
def waive_installment(
     lease_id: int,
     installment_id: int,
     service: RentScheduleService = Depends(get_schedule_service),
     token: dict = Depends(verify_token),
):
     return service.waive_installment(token["id"], lease_id, installment_id)
