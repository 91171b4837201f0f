# routers/leases.py
"""
Lease agreement API.

Landlords draft, edit and send leases; tenants accept or reject them within
the response window. Lifecycle errors come back as 4xx answers with a
machine-readable ``code`` (see main.py).
"""
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, status

from rentmate.auth import require_role, verify_token
from rentmate.dependencies import get_lease_service
from rentmate.schemas.lease import (
     DeadlineStatusResponse,
     LeaseCreate,
     LeaseDocumentCreate,
     LeaseDocumentResponse,
     LeaseRejectRequest,
     LeaseResponse,
     LeaseTerminateRequest,
     LeaseTermsUpdate,
)
from rentmate.services import LeaseService

router = APIRouter(prefix="/api/lease-agreements", tags=["lease-agreements"])


@router.post("", response_model=LeaseResponse, status_code=status.HTTP_201_CREATED)
def create_lease(
     body: LeaseCreate,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(require_role("landlord", "property_manager")),
):
     return service.create_lease(
          token["id"],
          body.application_id,
          body.start_date,
          body.end_date,
          body.monthly_rent,
          body.security_deposit,
          body.tenancy_terms,
     )


@router.get("/tenant", response_model=List[LeaseResponse])
def tenant_leases(service: LeaseService = Depends(get_lease_service), token: dict = Depends(verify_token)):
     return service.leases_for_tenant(token["id"])


@router.get("/landlord", response_model=List[LeaseResponse])
def landlord_leases(service: LeaseService = Depends(get_lease_service), token: dict = Depends(verify_token)):
     return service.leases_for_landlord(token["id"])


@router.get("/property/{property_id}", response_model=List[LeaseResponse])
def property_leases(
     property_id: int,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(verify_token),
):
     return service.leases_for_property(token["id"], property_id)


@router.post("/expire-lapsed")
def expire_lapsed(
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(require_role("admin")),
):
     """Sweep leases whose response or payment window has lapsed."""
     return {"expired": service.expire_lapsed_leases()}


@router.get("/{lease_id}", response_model=LeaseResponse)
def get_lease(lease_id: int, service: LeaseService = Depends(get_lease_service), token: dict = Depends(verify_token)):
     return service.get_lease_for(token["id"], lease_id)


@router.put("/{lease_id}", response_model=LeaseResponse)
def update_lease_terms(
     lease_id: int,
     body: LeaseTermsUpdate,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(verify_token),
):
     return service.update_terms(token["id"], lease_id, **body.model_dump(exclude_unset=True))


@router.post("/{lease_id}/documents", response_model=LeaseDocumentResponse, status_code=status.HTTP_201_CREATED)
def attach_document(
     lease_id: int,
     body: LeaseDocumentCreate,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(verify_token),
):
     return service.attach_document(token["id"], lease_id, body.name, body.kind, body.url)


@router.post("/{lease_id}/send", response_model=LeaseResponse)
def send_lease(lease_id: int, service: LeaseService = Depends(get_lease_service), token: dict = Depends(verify_token)):
     return service.send_to_tenant(token["id"], lease_id)


@router.post("/{lease_id}/accept", response_model=LeaseResponse)
def accept_lease(lease_id: int, service: LeaseService = Depends(get_lease_service), token: dict = Depends(verify_token)):
     return service.accept(token["id"], lease_id)


@router.post("/{lease_id}/reject", response_model=LeaseResponse)
def reject_lease(
     lease_id: int,
     body: LeaseRejectRequest,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(verify_token),
):
     return service.reject(token["id"], lease_id, body.reason)


@router.post("/{lease_id}/terminate", response_model=LeaseResponse)
def terminate_lease(
     lease_id: int,
     body: LeaseTerminateRequest,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(verify_token),
):
     return service.terminate(token["id"], lease_id, body.reason)


@router.get("/{lease_id}/deadline-status", response_model=DeadlineStatusResponse)
def deadline_status(
     lease_id: int,
     service: LeaseService = Depends(get_lease_service),
     token: dict = Depends(verify_token),
):
     return DeadlineStatusResponse(**asdict(service.deadline_status(token["id"], lease_id)))
