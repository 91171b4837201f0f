# routers/applications.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from rentmate.auth import require_role, verify_token
from rentmate.dependencies import get_application_service
from rentmate.schemas.application import ApplicationCreate, ApplicationReject, ApplicationResponse
from rentmate.services import ApplicationService

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def submit_application(
     body: ApplicationCreate,
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(require_role("tenant")),
):
     return service.submit(token["id"], body.property_id, body.message)


@router.get("/mine", response_model=List[ApplicationResponse])
def my_applications(
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(verify_token),
):
     return service.applications_for_tenant(token["id"])


@router.get("/property/{property_id}", response_model=List[ApplicationResponse])
def property_applications(
     property_id: int,
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(verify_token),
):
     return service.applications_for_property(token["id"], property_id)


@router.put("/{application_id}/review", response_model=ApplicationResponse)
def start_review(
     application_id: int,
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(verify_token),
):
     return service.start_review(token["id"], application_id)


@router.put("/{application_id}/approve", response_model=ApplicationResponse)
def approve_application(
     application_id: int,
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(verify_token),
):
     return service.approve(token["id"], application_id)


@router.put("/{application_id}/reject", response_model=ApplicationResponse)
def reject_application(
     application_id: int,
     body: Optional[ApplicationReject] = None,
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(verify_token),
):
     return service.reject(token["id"], application_id, body.reason if body else None)


@router.put("/{application_id}/withdraw", response_model=ApplicationResponse)
def withdraw_application(
     application_id: int,
     service: ApplicationService = Depends(get_application_service),
     token: dict = Depends(verify_token),
):
     return service.withdraw(token["id"], application_id)
