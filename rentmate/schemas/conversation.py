# schemas/conversation.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from rentmate.models.conversation import ConversationStatus, SenderRole


class StartConversationRequest(BaseModel):
     property_id: int = Field(..., gt=0)
     subject: str = Field(..., min_length=1, max_length=255)
     message: str = Field(..., description="Opening message")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "subject": "Inquiry about Sunset Condos",
                    "message": "Is the unit still available in March?"
               }
          }
     )


class SendMessageRequest(BaseModel):
     content: str


class MessageResponse(BaseModel):
     id: int
     conversation_id: int
     sender_id: int
     sender_role: SenderRole
     content: str
     read: bool
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class ConversationResponse(BaseModel):
     id: int
     property_id: int
     tenant_id: int
     landlord_id: int
     subject: str
     status: ConversationStatus
     last_message: Optional[str] = None
     last_message_at: Optional[datetime] = None
     unread_count: int = 0
     created_at: Optional[datetime] = None


class ConversationDetailResponse(ConversationResponse):
     messages: List[MessageResponse] = []


class StartConversationResponse(BaseModel):
     conversation: ConversationResponse
     message: MessageResponse


class ConversationListResponse(BaseModel):
     content: List[ConversationResponse]
     total_elements: int


class MarkReadResponse(BaseModel):
     marked_as_read: int
     conversation_id: int


class ConversationExistsResponse(BaseModel):
     exists: bool
     conversation_id: Optional[int] = None


class ConversationUnreadResponse(BaseModel):
     unread_count: int
     unread_conversations: int
