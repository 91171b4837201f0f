# models/conversation.py
import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum, UniqueConstraint, func
from .base import Base


class ConversationStatus(str, enum.Enum):
     ACTIVE = "ACTIVE"
     ARCHIVED = "ARCHIVED"


class SenderRole(str, enum.Enum):
     TENANT = "TENANT"
     LANDLORD = "LANDLORD"
     PROPERTY_MANAGER = "PROPERTY_MANAGER"


class Conversation(Base):
     """
     Message thread between a tenant and a property's landlord.
     A tenant has at most one conversation per property.
     """
     __tablename__ = "conversations"
     __table_args__ = (
          UniqueConstraint("tenant_id", "property_id", name="uq_conversations_tenant_property"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     landlord_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     subject = Column(String(255), nullable=False)
     status = Column(
          Enum(ConversationStatus, name="conversation_status", create_constraint=True),
          default=ConversationStatus.ACTIVE,
          nullable=False
     )
     last_message_at = Column(DateTime, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     def is_participant(self, user_id: int) -> bool:
          return user_id in (self.tenant_id, self.landlord_id)

     def other_party(self, user_id: int) -> int:
          return self.landlord_id if user_id == self.tenant_id else self.tenant_id

     def __repr__(self):
          return f"<Conversation(id={self.id}, property_id={self.property_id}, tenant_id={self.tenant_id})>"


class Message(Base):
     __tablename__ = "messages"

     id = Column(Integer, primary_key=True, autoincrement=True)
     conversation_id = Column(
          Integer,
          ForeignKey("conversations.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
     sender_role = Column(Enum(SenderRole, name="sender_role", create_constraint=True), nullable=False)
     content = Column(Text, nullable=False)
     read = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Message(id={self.id}, conversation_id={self.conversation_id}, sender_id={self.sender_id})>"
