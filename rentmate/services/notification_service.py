# services/notification_service.py
"""
Notification Service - persist in-app notifications and push them to the
recipient's realtime queue.

The stored row is the source of truth; the push is best effort and is lost
if the user is not connected at that moment.
"""
import logging
import math
from typing import Iterable, List, Optional, Tuple

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import AuthorizationError, NotFoundError
from rentmate.models import Notification, NotificationType, RelatedEntityType, UserRole
from rentmate.realtime import RealtimeHub, notification_queue
from rentmate.repositories import Store
from rentmate.schemas.notification import NotificationResponse

logger = logging.getLogger(__name__)


ROLE_LINKS = {
     "applications": {
          UserRole.TENANT: "/dashboard/applications",
          UserRole.LANDLORD: "/dashboard/landlord-applications",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm-applications",
     },
     "leases": {
          UserRole.TENANT: "/dashboard/leases",
          UserRole.LANDLORD: "/dashboard/landlord-leases",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm-leases",
     },
     "maintenance": {
          UserRole.TENANT: "/dashboard/maintenance",
          UserRole.LANDLORD: "/dashboard/landlord-maintenance",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm-maintenance",
     },
     "payments": {
          UserRole.TENANT: "/dashboard/payments",
          UserRole.LANDLORD: "/dashboard/landlord-leases",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm-leases",
     },
     "messages": {
          UserRole.TENANT: "/dashboard/messages",
          UserRole.LANDLORD: "/dashboard/landlord-messages",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm-messages",
     },
     "properties": {
          UserRole.TENANT: "/dashboard/rentals",
          UserRole.LANDLORD: "/dashboard/landlord-properties",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm-properties",
     },
     "home": {
          UserRole.TENANT: "/dashboard",
          UserRole.LANDLORD: "/dashboard/landlord",
          UserRole.PROPERTY_MANAGER: "/dashboard/pm",
     },
}

TYPE_TO_FEATURE = {
     NotificationType.APPLICATION: "applications",
     NotificationType.LEASE: "leases",
     NotificationType.MAINTENANCE: "maintenance",
     NotificationType.PAYMENT: "payments",
     NotificationType.MESSAGE: "messages",
     NotificationType.PROPERTY: "properties",
     NotificationType.SYSTEM: "home",
}


def _is_role_specific_link(link: str, role: UserRole) -> bool:
     if role == UserRole.LANDLORD:
          return "/landlord-" in link or "/dashboard/landlord" in link
     if role == UserRole.PROPERTY_MANAGER:
          return "/pm-" in link or "/dashboard/pm" in link
     if role == UserRole.TENANT:
          # Tenant links carry no prefix
          return "/landlord-" not in link and "/pm-" not in link
     return True


def resolve_notification_link(
     link: Optional[str],
     notification_type: NotificationType,
     role: UserRole
) -> str:
     """
     Link a user should follow for a notification.

     Property pages and links already scoped to the user's role are kept;
     anything else falls back to the role's page for the notification type.
     Admins get the tenant-style pages.
     """
     if link and link.startswith("/properties/"):
          return link
     if link and _is_role_specific_link(link, role):
          return link
     feature = TYPE_TO_FEATURE[notification_type]
     links = ROLE_LINKS[feature]
     return links.get(role, links[UserRole.TENANT])


class NotificationService:

     def __init__(self, store: Store, hub: Optional[RealtimeHub] = None, clock: Optional[Clock] = None):
          self.store = store
          self.hub = hub
          self.clock = clock or SystemClock()

     def notify(
          self,
          user_id: int,
          notification_type: NotificationType,
          title: str,
          description: str,
          link: Optional[str] = None,
          related_entity_id: Optional[int] = None,
          related_entity_type: Optional[RelatedEntityType] = None,
     ) -> Notification:
          """Store a notification for ``user_id`` and push it to their queue."""
          notification = Notification(
               user_id=user_id,
               type=notification_type,
               title=title,
               description=description,
               read=False,
               link=link,
               related_entity_id=related_entity_id,
               related_entity_type=related_entity_type,
               created_at=self.clock.now(),
          )
          self.store.notifications.add(notification)
          logger.info(
               "Notification %s for user %s: %s",
               notification_type.value, user_id, title,
               extra={"notification_id": notification.id},
          )

          if self.hub is not None:
               payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
               self.hub.publish(notification_queue(user_id), payload)
          return notification

     def _get_own(self, user_id: int, notification_id: int) -> Notification:
          notification = self.store.notifications.get(notification_id)
          if notification is None:
               raise NotFoundError("Notification", notification_id)
          if notification.user_id != user_id:
               raise AuthorizationError("You can only manage your own notifications")
          return notification

     def list_notifications(
          self,
          user_id: int,
          page: int = 0,
          size: int = 20,
          unread_only: bool = False,
          types: Optional[Iterable[NotificationType]] = None,
     ) -> Tuple[List[Notification], int, int]:
          """One page of the user's notifications, newest first, with total count and pages."""
          wanted = set(types) if types else None

          def matches(n: Notification) -> bool:
               if unread_only and n.read:
                    return False
               return wanted is None or n.type in wanted

          rows = self.store.notifications.list(matches, user_id=user_id)
          rows.sort(key=lambda n: (n.created_at, n.id), reverse=True)
          total = len(rows)
          total_pages = math.ceil(total / size) if size else 0
          return rows[page * size:(page + 1) * size], total, total_pages

     def unread_count(self, user_id: int) -> int:
          return self.store.notifications.count(user_id=user_id, read=False)

     def mark_read(self, user_id: int, notification_id: int) -> Notification:
          notification = self._get_own(user_id, notification_id)
          notification.read = True
          return notification

     def mark_all_read(self, user_id: int) -> int:
          unread = self.store.notifications.list(user_id=user_id, read=False)
          for notification in unread:
               notification.read = True
          return len(unread)

     def delete(self, user_id: int, notification_id: int) -> None:
          notification = self._get_own(user_id, notification_id)
          self.store.notifications.delete(notification)

     def delete_all_read(self, user_id: int) -> int:
          read = self.store.notifications.list(user_id=user_id, read=True)
          for notification in read:
               self.store.notifications.delete(notification)
          return len(read)
