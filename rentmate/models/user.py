# models/user.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from .base import Base


class UserRole(str, enum.Enum):
     TENANT = "tenant"
     LANDLORD = "landlord"
     PROPERTY_MANAGER = "property_manager"
     ADMIN = "admin"


class User(Base):
     """Account holder. Password is stored as a bcrypt hash."""
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), nullable=False, unique=True, index=True)
     password = Column(String(255), nullable=False)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     role = Column(Enum(UserRole, name="user_role", create_constraint=True), nullable=False)
     avatar = Column(String(500), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}"

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
