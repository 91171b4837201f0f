# schemas/auth.py
"""
Pydantic schemas for registration, login and the current user.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from rentmate.models.user import UserRole


class RegisterRequest(BaseModel):
     first_name: str = Field(..., min_length=1, max_length=100)
     last_name: str = Field(..., min_length=1, max_length=100)
     email: str = Field(..., min_length=3, max_length=255)
     password: str = Field(..., min_length=8, max_length=128)
     role: UserRole = Field(default=UserRole.TENANT, description="tenant, landlord or property_manager")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "first_name": "John",
                    "last_name": "Tenant",
                    "email": "tenant@test.com",
                    "password": "password123",
                    "role": "tenant"
               }
          }
     )


class LoginRequest(BaseModel):
     email: str
     password: str


class UserResponse(BaseModel):
     id: int
     email: str
     first_name: str
     last_name: str
     role: UserRole
     avatar: Optional[str] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
     token: str
     user: UserResponse
