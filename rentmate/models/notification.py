# models/notification.py
import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum, func
from .base import Base


class NotificationType(str, enum.Enum):
     APPLICATION = "APPLICATION"
     LEASE = "LEASE"
     MAINTENANCE = "MAINTENANCE"
     MESSAGE = "MESSAGE"
     PAYMENT = "PAYMENT"
     PROPERTY = "PROPERTY"
     SYSTEM = "SYSTEM"


class RelatedEntityType(str, enum.Enum):
     LEASE_APPLICATION = "LEASE_APPLICATION"
     LEASE_AGREEMENT = "LEASE_AGREEMENT"
     MAINTENANCE_REQUEST = "MAINTENANCE_REQUEST"
     CONVERSATION = "CONVERSATION"
     PAYMENT = "PAYMENT"
     PROPERTY = "PROPERTY"
     USER = "USER"


class Notification(Base):
     """
     In-app notification for one user. Persisted first, then pushed over the
     user's realtime queue; the list endpoint stays the source of truth.
     """
     __tablename__ = "notifications"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     type = Column(Enum(NotificationType, name="notification_type", create_constraint=True), nullable=False)
     title = Column(String(255), nullable=False)
     description = Column(Text, nullable=False)
     read = Column(Boolean, default=False, nullable=False, index=True)
     link = Column(String(500), nullable=True)
     related_entity_id = Column(Integer, nullable=True)
     related_entity_type = Column(
          Enum(RelatedEntityType, name="related_entity_type", create_constraint=True),
          nullable=True
     )
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type.value}', read={self.read})>"
