# schemas/notification.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from rentmate.models.notification import NotificationType, RelatedEntityType


class NotificationResponse(BaseModel):
     id: int
     user_id: int
     type: NotificationType
     title: str
     description: str
     read: bool
     link: Optional[str] = None
     related_entity_id: Optional[int] = None
     related_entity_type: Optional[RelatedEntityType] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
     content: List[NotificationResponse]
     total_elements: int
     total_pages: int
     page: int = 0
     size: int = 20


class UnreadCountResponse(BaseModel):
     count: int


class BulkActionResponse(BaseModel):
     message: str
     count: int
