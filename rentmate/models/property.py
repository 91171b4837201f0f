# models/property.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from .base import Base


class Property(Base):
     """
     Property model - a rentable home listed by a landlord, optionally run
     day to day by an assigned property manager.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     landlord_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     manager_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
     title = Column(String(255), nullable=False)
     address = Column(String(500), nullable=True)
     monthly_rent = Column(Numeric(12, 2), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def is_handled_by(self, user_id: int) -> bool:
          """Landlord or assigned manager."""
          return user_id is not None and user_id in (self.landlord_id, self.manager_id)

     def __repr__(self):
          return f"<Property(id={self.id}, title='{self.title}', landlord_id={self.landlord_id})>"
