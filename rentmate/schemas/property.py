# schemas/property.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class PropertyCreate(BaseModel):
     title: str = Field(..., min_length=1, max_length=255)
     address: Optional[str] = Field(None, max_length=500)
     monthly_rent: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)


class AssignManagerRequest(BaseModel):
     manager_email: str = Field(..., min_length=3, max_length=255, description="Email of a registered property manager")


class PropertyResponse(BaseModel):
     id: int
     landlord_id: int
     manager_id: Optional[int] = None
     title: str
     address: Optional[str] = None
     monthly_rent: Optional[Decimal] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
