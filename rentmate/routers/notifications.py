# routers/notifications.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from rentmate.auth import verify_token
from rentmate.dependencies import get_notification_service
from rentmate.models import NotificationType, UserRole
from rentmate.schemas.notification import (
     BulkActionResponse,
     NotificationListResponse,
     NotificationResponse,
     UnreadCountResponse,
)
from rentmate.services import NotificationService, resolve_notification_link

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _with_link(notification, role: str) -> NotificationResponse:
     response = NotificationResponse.model_validate(notification)
     response.link = resolve_notification_link(notification.link, notification.type, UserRole(role))
     return response


@router.get("", response_model=NotificationListResponse)
def list_notifications(
     page: int = Query(0, ge=0),
     size: int = Query(20, ge=1, le=100),
     unread_only: bool = False,
     types: Optional[List[NotificationType]] = Query(None, alias="type"),
     service: NotificationService = Depends(get_notification_service),
     token: dict = Depends(verify_token),
):
     rows, total, total_pages = service.list_notifications(token["id"], page, size, unread_only, types)
     return NotificationListResponse(
          content=[_with_link(n, token.get("role", "tenant")) for n in rows],
          total_elements=total,
          total_pages=total_pages,
          page=page,
          size=size,
     )


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(service: NotificationService = Depends(get_notification_service), token: dict = Depends(verify_token)):
     return UnreadCountResponse(count=service.unread_count(token["id"]))


@router.put("/read-all", response_model=BulkActionResponse)
def mark_all_read(service: NotificationService = Depends(get_notification_service), token: dict = Depends(verify_token)):
     count = service.mark_all_read(token["id"])
     return BulkActionResponse(message="All notifications marked as read", count=count)


@router.delete("/read", response_model=BulkActionResponse)
def delete_all_read(service: NotificationService = Depends(get_notification_service), token: dict = Depends(verify_token)):
     count = service.delete_all_read(token["id"])
     return BulkActionResponse(message="Read notifications deleted", count=count)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
     notification_id: int,
     service: NotificationService = Depends(get_notification_service),
     token: dict = Depends(verify_token),
):
     return _with_link(service.mark_read(token["id"], notification_id), token.get("role", "tenant"))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
     notification_id: int,
     service: NotificationService = Depends(get_notification_service),
     token: dict = Depends(verify_token),
):
     service.delete(token["id"], notification_id)
