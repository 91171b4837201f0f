# schemas/application.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from rentmate.models.lease_application import ApplicationStatus


class ApplicationCreate(BaseModel):
     property_id: int = Field(..., gt=0, description="Property being applied for")
     message: Optional[str] = Field(None, max_length=2000, description="Note to the landlord")


class ApplicationReject(BaseModel):
     reason: Optional[str] = Field(None, max_length=2000)


class ApplicationResponse(BaseModel):
     id: int
     property_id: int
     tenant_id: int
     message: Optional[str] = None
     status: ApplicationStatus
     rejection_reason: Optional[str] = None
     created_at: Optional[datetime] = None
     reviewed_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
