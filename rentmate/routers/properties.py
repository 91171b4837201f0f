# routers/properties.py
from typing import List

from fastapi import APIRouter, Depends, status

from rentmate.auth import require_role, verify_token
from rentmate.dependencies import get_property_service
from rentmate.schemas.property import AssignManagerRequest, PropertyCreate, PropertyResponse
from rentmate.services import PropertyService

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
     body: PropertyCreate,
     service: PropertyService = Depends(get_property_service),
     token: dict = Depends(require_role("landlord")),
):
     return service.create_property(token["id"], body.title, body.address, body.monthly_rent)


@router.get("", response_model=List[PropertyResponse])
def list_properties(service: PropertyService = Depends(get_property_service), token: dict = Depends(verify_token)):
     return service.list_properties()


@router.get("/mine", response_model=List[PropertyResponse])
def my_properties(
     service: PropertyService = Depends(get_property_service),
     token: dict = Depends(require_role("landlord", "property_manager")),
):
     return service.properties_for(token["id"])


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
     property_id: int,
     service: PropertyService = Depends(get_property_service),
     token: dict = Depends(verify_token),
):
     return service.get_property(property_id)


@router.put("/{property_id}/manager", response_model=PropertyResponse)
def assign_manager(
     property_id: int,
     body: AssignManagerRequest,
     service: PropertyService = Depends(get_property_service),
     token: dict = Depends(require_role("landlord")),
):
     return service.assign_manager(token["id"], property_id, body.manager_email)


@router.delete("/{property_id}/manager", response_model=PropertyResponse)
def remove_manager(
     property_id: int,
     service: PropertyService = Depends(get_property_service),
     token: dict = Depends(require_role("landlord")),
):
     return service.remove_manager(token["id"], property_id)
