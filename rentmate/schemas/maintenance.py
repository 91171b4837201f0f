# schemas/maintenance.py
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from rentmate.models.maintenance import ActorType, MaintenancePriority, MaintenanceStatus


class CreateMaintenanceRequest(BaseModel):
     lease_id: int = Field(..., gt=0)
     title: str = Field(..., min_length=1, max_length=255)
     description: str = Field(..., min_length=1)
     priority: MaintenancePriority = MaintenancePriority.MEDIUM

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "lease_id": 1,
                    "title": "Kitchen sink leaking",
                    "description": "Water pools under the sink after every use.",
                    "priority": "HIGH"
               }
          }
     )


class AcceptMaintenanceRequest(BaseModel):
     notes: Optional[str] = None
     estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class RejectMaintenanceRequest(BaseModel):
     reason: str = Field(..., min_length=1)


class ScheduleMaintenanceRequest(BaseModel):
     scheduled_for: datetime
     assigned_contractor: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None


class StartWorkRequest(BaseModel):
     assigned_contractor: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None


class ResolveMaintenanceRequest(BaseModel):
     resolution_notes: Optional[str] = None
     actual_cost: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class ReopenMaintenanceRequest(BaseModel):
     reason: str = Field(..., min_length=1)


class UpdatePriorityRequest(BaseModel):
     priority: MaintenancePriority
     reason: Optional[str] = None


class AddCommentRequest(BaseModel):
     content: str = Field(..., min_length=1)


class MaintenanceResponse(BaseModel):
     id: int
     lease_id: int
     property_id: int
     tenant_id: int
     landlord_id: int
     title: str
     description: str
     priority: MaintenancePriority
     status: MaintenanceStatus
     scheduled_for: Optional[datetime] = None
     completed_at: Optional[datetime] = None
     notes: Optional[str] = None
     rejection_reason: Optional[str] = None
     estimated_cost: Optional[Decimal] = None
     actual_cost: Optional[Decimal] = None
     assigned_contractor: Optional[str] = None
     created_at: Optional[datetime] = None
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class MaintenanceListItem(BaseModel):
     id: int
     property_id: int
     tenant_id: int
     title: str
     priority: MaintenancePriority
     status: MaintenanceStatus
     created_at: Optional[datetime] = None
     days_open: int


class MaintenanceListResponse(BaseModel):
     content: List[MaintenanceListItem]
     total_elements: int
     total_pages: int
     page: int = 0
     size: int = 20


class MaintenanceCommentResponse(BaseModel):
     id: int
     request_id: int
     author_id: int
     author_role: ActorType
     content: str
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class MaintenanceEventResponse(BaseModel):
     id: int
     status: MaintenanceStatus
     message: str
     actor: ActorType
     actor_id: Optional[int] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class PropertyMaintenanceSummaryResponse(BaseModel):
     property_id: int
     property_title: str
     open_count: int
     total_count: int

     model_config = ConfigDict(from_attributes=True)


class MaintenanceSummaryResponse(BaseModel):
     total: int
     by_status: Dict[str, int]
     open_count: int
     urgent_count: int
     avg_resolution_days: float
     by_property: List[PropertyMaintenanceSummaryResponse] = []

     model_config = ConfigDict(from_attributes=True)
