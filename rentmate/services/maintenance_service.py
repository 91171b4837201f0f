# services/maintenance_service.py
"""
Maintenance Service - repair requests on active leases.

A tenant raises a request against their active lease. The property's
landlord, or the manager assigned to the property, accepts or rejects it,
schedules and starts the work and resolves it. Either side may comment and
reopen a completed or rejected request. Every status change is appended to
the request's timeline and notified to the other side.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import (
     AuthorizationError,
     InvalidTransitionError,
     NotFoundError,
     ValidationError,
)
from rentmate.logging_config import LogContext
from rentmate.models import (
     ActorType,
     LeaseStatus,
     MaintenanceComment,
     MaintenanceEvent,
     MaintenancePriority,
     MaintenanceRequest,
     MaintenanceStatus,
     NotificationType,
     Property,
     RelatedEntityType,
)
from rentmate.repositories import Store
from .payment_service import to_amount

logger = logging.getLogger(__name__)

TENANT_MAINTENANCE_LINK = "/dashboard/maintenance"
LANDLORD_MAINTENANCE_LINK = "/dashboard/landlord-maintenance"


@dataclass
class PropertyMaintenanceSummary:
     property_id: int
     property_title: str
     open_count: int
     total_count: int


@dataclass
class MaintenanceSummary:
     total: int
     by_status: Dict[str, int]
     open_count: int
     urgent_count: int
     avg_resolution_days: float
     by_property: List[PropertyMaintenanceSummary] = field(default_factory=list)


class MaintenanceService:

     def __init__(self, store: Store, clock: Optional[Clock] = None, notifier=None):
          self.store = store
          self.clock = clock or SystemClock()
          self.notifier = notifier

     # ---- lookups -------------------------------------------------------

     def _request(self, request_id: int) -> MaintenanceRequest:
          request = self.store.maintenance.get(request_id)
          if request is None:
               raise NotFoundError("Maintenance request", request_id)
          return request

     def _property(self, property_id: int) -> Property:
          prop = self.store.properties.get(property_id)
          if prop is None:
               raise NotFoundError("Property", property_id)
          return prop

     def _actor_type(self, actor_id: int, request: MaintenanceRequest, prop: Property) -> Optional[ActorType]:
          if actor_id == request.tenant_id:
               return ActorType.TENANT
          if actor_id == prop.landlord_id:
               return ActorType.LANDLORD
          if actor_id == prop.manager_id:
               return ActorType.PROPERTY_MANAGER
          return None

     def _for_party(self, actor_id: int, request_id: int) -> Tuple[MaintenanceRequest, Property, ActorType]:
          request = self._request(request_id)
          prop = self._property(request.property_id)
          actor = self._actor_type(actor_id, request, prop)
          if actor is None:
               raise AuthorizationError("You are not a party to this maintenance request")
          return request, prop, actor

     def _for_handler(self, actor_id: int, request_id: int) -> Tuple[MaintenanceRequest, Property, ActorType]:
          request, prop, actor = self._for_party(actor_id, request_id)
          if actor == ActorType.TENANT:
               raise AuthorizationError("Only the landlord or property manager can do this")
          return request, prop, actor

     def get_request(self, actor_id: int, request_id: int) -> MaintenanceRequest:
          request, _, _ = self._for_party(actor_id, request_id)
          return request

     # ---- tenant side ---------------------------------------------------

     def create_request(
          self,
          actor_id: int,
          lease_id: int,
          title: str,
          description: str,
          priority: MaintenancePriority = MaintenancePriority.MEDIUM,
     ) -> MaintenanceRequest:
          """
          Tenant opens a request on their active lease.

          Raises:
               NotFoundError: no such lease
               AuthorizationError: actor is not the lease's tenant
               InvalidTransitionError: lease is not active
               ValidationError: blank title or description
          """
          lease = self.store.leases.get(lease_id)
          if lease is None:
               raise NotFoundError("Lease", lease_id)
          if lease.tenant_id != actor_id:
               raise AuthorizationError("Only the tenant of this lease can request maintenance")
          if lease.status != LeaseStatus.ACTIVE:
               raise InvalidTransitionError(
                    f"Maintenance can only be requested on an active lease (status: {lease.status.value})"
               )
          title = (title or "").strip()
          description = (description or "").strip()
          if not title or not description:
               raise ValidationError("Title and description are required")

          now = self.clock.now()
          request = MaintenanceRequest(
               lease_id=lease.id,
               property_id=lease.property_id,
               tenant_id=actor_id,
               landlord_id=lease.landlord_id,
               title=title,
               description=description,
               priority=priority,
               status=MaintenanceStatus.OPEN,
               created_at=now,
          )
          self.store.maintenance.add(request)
          self._record(request, actor_id, ActorType.TENANT, "Request submitted", now)
          with LogContext.bind(lease_id=lease.id):
               logger.info("Maintenance request %s opened (%s)", request.id, priority.value)

          prop = self._property(request.property_id)
          self._notify_handlers(
               request, prop,
               "New maintenance request",
               f"{title} ({priority.value.lower()} priority) at {prop.title}.",
          )
          return request

     def cancel(self, actor_id: int, request_id: int) -> MaintenanceRequest:
          """Tenant withdraws a request nobody has acted on yet."""
          request, prop, actor = self._for_party(actor_id, request_id)
          if actor != ActorType.TENANT:
               raise AuthorizationError("Only the tenant can cancel a maintenance request")
          self._move(request, MaintenanceStatus.CANCELLED, actor_id, actor, "Request cancelled by tenant")
          self._notify_handlers(request, prop, "Maintenance request cancelled", f"{request.title} was cancelled.")
          return request

     # ---- landlord / manager side ---------------------------------------

     def accept(
          self,
          actor_id: int,
          request_id: int,
          notes: Optional[str] = None,
          estimated_cost=None,
     ) -> MaintenanceRequest:
          request, _, actor = self._for_handler(actor_id, request_id)
          cost = self._cost(estimated_cost) if estimated_cost is not None else None
          self._move(request, MaintenanceStatus.ACCEPTED, actor_id, actor, notes or "Request accepted")
          if cost is not None:
               request.estimated_cost = cost
          if notes:
               request.notes = notes
          self._notify_tenant(request, "Maintenance request accepted", f"{request.title} was accepted.")
          return request

     def reject(self, actor_id: int, request_id: int, reason: str) -> MaintenanceRequest:
          request, _, actor = self._for_handler(actor_id, request_id)
          reason = (reason or "").strip()
          if not reason:
               raise ValidationError("A reason is required to reject a request")
          self._move(request, MaintenanceStatus.REJECTED, actor_id, actor, f"Request rejected: {reason}")
          request.rejection_reason = reason
          self._notify_tenant(request, "Maintenance request rejected", f"{request.title}: {reason}")
          return request

     def schedule(
          self,
          actor_id: int,
          request_id: int,
          scheduled_for: datetime,
          assigned_contractor: Optional[str] = None,
          notes: Optional[str] = None,
     ) -> MaintenanceRequest:
          request, _, actor = self._for_handler(actor_id, request_id)
          if scheduled_for <= self.clock.now():
               raise ValidationError("Work must be scheduled in the future")
          self._move(
               request, MaintenanceStatus.SCHEDULED, actor_id, actor,
               f"Work scheduled for {scheduled_for:%Y-%m-%d %H:%M}",
          )
          request.scheduled_for = scheduled_for
          if assigned_contractor:
               request.assigned_contractor = assigned_contractor
          if notes:
               request.notes = notes
          self._notify_tenant(
               request, "Maintenance scheduled",
               f"{request.title} is scheduled for {scheduled_for:%Y-%m-%d %H:%M}.",
          )
          return request

     def start_work(
          self,
          actor_id: int,
          request_id: int,
          assigned_contractor: Optional[str] = None,
          notes: Optional[str] = None,
     ) -> MaintenanceRequest:
          request, _, actor = self._for_handler(actor_id, request_id)
          self._move(request, MaintenanceStatus.IN_PROGRESS, actor_id, actor, notes or "Work started")
          if assigned_contractor:
               request.assigned_contractor = assigned_contractor
          if notes:
               request.notes = notes
          self._notify_tenant(request, "Maintenance in progress", f"Work on {request.title} has started.")
          return request

     def resolve(
          self,
          actor_id: int,
          request_id: int,
          resolution_notes: Optional[str] = None,
          actual_cost=None,
     ) -> MaintenanceRequest:
          request, _, actor = self._for_handler(actor_id, request_id)
          cost = self._cost(actual_cost) if actual_cost is not None else None
          self._move(request, MaintenanceStatus.COMPLETED, actor_id, actor, resolution_notes or "Request resolved")
          request.completed_at = self.clock.now()
          if cost is not None:
               request.actual_cost = cost
          if resolution_notes:
               request.notes = resolution_notes
          self._notify_tenant(request, "Maintenance completed", f"{request.title} was resolved.")
          return request

     def update_priority(
          self,
          actor_id: int,
          request_id: int,
          priority: MaintenancePriority,
          reason: Optional[str] = None,
     ) -> MaintenanceRequest:
          request, _, actor = self._for_handler(actor_id, request_id)
          if request.is_closed:
               raise InvalidTransitionError(f"Maintenance request {request.id} is closed")
          if priority == request.priority:
               return request
          message = f"Priority changed from {request.priority.value} to {priority.value}"
          if reason:
               message = f"{message}: {reason}"
          request.priority = priority
          now = self.clock.now()
          request.updated_at = now
          self._record(request, actor_id, actor, message, now)
          return request

     # ---- shared --------------------------------------------------------

     def reopen(self, actor_id: int, request_id: int, reason: str) -> MaintenanceRequest:
          """Either side reopens a completed or rejected request."""
          request, prop, actor = self._for_party(actor_id, request_id)
          reason = (reason or "").strip()
          if not reason:
               raise ValidationError("A reason is required to reopen a request")
          self._move(request, MaintenanceStatus.OPEN, actor_id, actor, f"Request reopened: {reason}")
          request.completed_at = None
          request.rejection_reason = None
          if actor == ActorType.TENANT:
               self._notify_handlers(request, prop, "Maintenance request reopened", f"{request.title}: {reason}")
          else:
               self._notify_tenant(request, "Maintenance request reopened", f"{request.title}: {reason}")
          return request

     def add_comment(self, actor_id: int, request_id: int, content: str) -> MaintenanceComment:
          request, prop, actor = self._for_party(actor_id, request_id)
          content = (content or "").strip()
          if not content:
               raise ValidationError("Comment cannot be empty")
          comment = MaintenanceComment(
               request_id=request.id,
               author_id=actor_id,
               author_role=actor,
               content=content,
               created_at=self.clock.now(),
          )
          self.store.maintenance_comments.add(comment)
          title = f"New comment on {request.title}"
          if actor == ActorType.TENANT:
               self._notify_handlers(request, prop, title, content)
          else:
               self._notify_tenant(request, title, content)
          return comment

     def comments(self, actor_id: int, request_id: int) -> List[MaintenanceComment]:
          self._for_party(actor_id, request_id)
          return self.store.maintenance_comments.list(request_id=request_id)

     def timeline(self, actor_id: int, request_id: int) -> List[MaintenanceEvent]:
          self._for_party(actor_id, request_id)
          return self.store.maintenance_events.list(request_id=request_id)

     # ---- listings ------------------------------------------------------

     def _page(self, rows, page: int, size: int):
          rows.sort(key=lambda r: (r.created_at, r.id), reverse=True)
          total = len(rows)
          total_pages = math.ceil(total / size) if size else 0
          return rows[page * size:(page + 1) * size], total, total_pages

     @staticmethod
     def _filter(status: Optional[MaintenanceStatus], priority: Optional[MaintenancePriority]):
          def matches(request: MaintenanceRequest) -> bool:
               if status is not None and request.status != status:
                    return False
               return priority is None or request.priority == priority
          return matches

     def requests_for_tenant(
          self,
          tenant_id: int,
          status: Optional[MaintenanceStatus] = None,
          priority: Optional[MaintenancePriority] = None,
          lease_id: Optional[int] = None,
          page: int = 0,
          size: int = 20,
     ) -> Tuple[List[MaintenanceRequest], int, int]:
          filters = {"tenant_id": tenant_id}
          if lease_id is not None:
               filters["lease_id"] = lease_id
          rows = self.store.maintenance.list(self._filter(status, priority), **filters)
          return self._page(rows, page, size)

     def _handled_property_ids(self, actor_id: int) -> Dict[int, Property]:
          return {prop.id: prop for prop in self.store.properties.list(lambda p: p.is_handled_by(actor_id))}

     def requests_for_handler(
          self,
          actor_id: int,
          status: Optional[MaintenanceStatus] = None,
          priority: Optional[MaintenancePriority] = None,
          property_id: Optional[int] = None,
          page: int = 0,
          size: int = 20,
     ) -> Tuple[List[MaintenanceRequest], int, int]:
          """Requests on every property the actor owns or manages."""
          properties = self._handled_property_ids(actor_id)
          if property_id is not None:
               if property_id not in properties:
                    raise AuthorizationError("You do not handle this property")
               properties = {property_id: properties[property_id]}
          matches = self._filter(status, priority)
          rows = self.store.maintenance.list(lambda r: r.property_id in properties and matches(r))
          return self._page(rows, page, size)

     def summary(self, actor_id: int) -> MaintenanceSummary:
          """Counts across the actor's properties and mean days to resolution."""
          properties = self._handled_property_ids(actor_id)
          rows = self.store.maintenance.list(lambda r: r.property_id in properties)

          by_status = {status.value: 0 for status in MaintenanceStatus}
          for request in rows:
               by_status[request.status.value] += 1

          resolved = [r for r in rows if r.status == MaintenanceStatus.COMPLETED and r.completed_at]
          avg_days = 0.0
          if resolved:
               seconds = sum((r.completed_at - r.created_at).total_seconds() for r in resolved)
               avg_days = round(seconds / len(resolved) / 86400, 1)

          by_property = []
          for prop in properties.values():
               own = [r for r in rows if r.property_id == prop.id]
               by_property.append(PropertyMaintenanceSummary(
                    property_id=prop.id,
                    property_title=prop.title,
                    open_count=sum(1 for r in own if not r.is_closed),
                    total_count=len(own),
               ))

          return MaintenanceSummary(
               total=len(rows),
               by_status=by_status,
               open_count=sum(1 for r in rows if not r.is_closed),
               urgent_count=sum(
                    1 for r in rows if r.priority == MaintenancePriority.URGENT and not r.is_closed
               ),
               avg_resolution_days=avg_days,
               by_property=by_property,
          )

     # ---- helpers -------------------------------------------------------

     @staticmethod
     def _cost(value) -> Decimal:
          cost = to_amount(value)
          if cost < 0:
               raise ValidationError("Cost cannot be negative")
          return cost

     def _move(self, request, status, actor_id, actor, message) -> None:
          now = self.clock.now()
          request.transition_to(status, now)
          self._record(request, actor_id, actor, message, now)
          logger.info("Maintenance request %s -> %s", request.id, status.value)

     def _record(self, request, actor_id, actor, message, at) -> MaintenanceEvent:
          event = MaintenanceEvent(
               request_id=request.id,
               status=request.status,
               message=message,
               actor=actor,
               actor_id=actor_id,
               created_at=at,
          )
          return self.store.maintenance_events.add(event)

     def _notify(self, user_id, request, title, description, link):
          if self.notifier is None:
               return
          self.notifier.notify(
               user_id,
               NotificationType.MAINTENANCE,
               title,
               description,
               link=link,
               related_entity_id=request.id,
               related_entity_type=RelatedEntityType.MAINTENANCE_REQUEST,
          )

     def _notify_tenant(self, request, title, description):
          self._notify(request.tenant_id, request, title, description, TENANT_MAINTENANCE_LINK)

     def _notify_handlers(self, request, prop, title, description):
          self._notify(prop.landlord_id, request, title, description, LANDLORD_MAINTENANCE_LINK)
          if prop.manager_id is not None:
               # No link: the manager's own maintenance page is resolved from their role
               self._notify(prop.manager_id, request, title, description, None)
