# services/lease_service.py
"""
Lease Service - lifecycle rules for lease agreements.

The landlord drafts a lease from an approved application, edits it while it
is a draft and sends it. The tenant then has a fixed response window to
accept or reject. Accepting opens a fresh window of the same length for the
deposit + first month payment (see payment_service). A lapsed window always
wins over a late response: the lease is marked expired and the response fails.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from rentmate import config
from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import (
     AlreadyRespondedError,
     AuthorizationError,
     DuplicateResourceError,
     InvalidTransitionError,
     LeaseExpiredError,
     NotFoundError,
     StateConflictError,
     ValidationError,
)
from rentmate.logging_config import LogContext
from rentmate.models import (
     ApplicationStatus,
     DocumentKind,
     LeaseAgreement,
     LeaseDocument,
     LeaseStatus,
     NotificationType,
     PaymentStatus,
     RelatedEntityType,
)
from rentmate.models.lease import RESPONDED_STATUSES
from rentmate.repositories import Store

logger = logging.getLogger(__name__)

# Statuses in which a response window is running.
AWAITING_STATUSES = frozenset({LeaseStatus.PENDING_TENANT, LeaseStatus.PAYMENT_PENDING})

EDITABLE_TERMS = ("start_date", "end_date", "monthly_rent", "security_deposit", "tenancy_terms")

TENANT_LEASES_LINK = "/dashboard/leases"
LANDLORD_LEASES_LINK = "/dashboard/landlord-leases"


def hours_until(deadline: Optional[datetime], now: datetime) -> Optional[int]:
     """Whole hours left before ``deadline`` (floored, never negative)."""
     if deadline is None:
          return None
     remaining = (deadline - now).total_seconds()
     if remaining <= 0:
          return 0
     return int(remaining // 3600)


def window_lapsed(lease: LeaseAgreement, now: datetime) -> bool:
     """
     Whether the running window on ``lease`` is over.

     The payment window closes when its floored hours reach 0. The response
     window closes exactly at the deadline.
     """
     if lease.status == LeaseStatus.PAYMENT_PENDING:
          return hours_until(lease.acceptance_deadline, now) == 0
     return lease.status in AWAITING_STATUSES and lease.deadline_passed(now)


@dataclass
class DeadlineStatus:
     lease_id: int
     status: LeaseStatus
     deadline: Optional[datetime]
     hours_remaining: Optional[int]
     is_expired: bool


class LeaseService:
     """Service class for lease agreement lifecycle operations."""

     def __init__(
          self,
          store: Store,
          clock: Optional[Clock] = None,
          notifier=None,
          window_hours: int = config.ACCEPTANCE_WINDOW_HOURS,
     ):
          self.store = store
          self.clock = clock or SystemClock()
          self.notifier = notifier
          self.window = timedelta(hours=window_hours)

     # ---- lookups -------------------------------------------------------

     def get_lease(self, lease_id: int) -> LeaseAgreement:
          lease = self.store.leases.get(lease_id)
          if lease is None:
               raise NotFoundError("Lease", lease_id)
          return lease

     def get_lease_for(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          """Lease visible to one of its two parties."""
          lease = self.get_lease(lease_id)
          if not lease.is_party(actor_id):
               raise AuthorizationError("You are not a party to this lease")
          return lease

     def _landlord_lease(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          lease = self.get_lease(lease_id)
          if lease.landlord_id != actor_id:
               raise AuthorizationError("Only the landlord of this lease can do that")
          return lease

     def _tenant_lease(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          lease = self.get_lease(lease_id)
          if lease.tenant_id != actor_id:
               raise AuthorizationError("Only the tenant of this lease can respond to it")
          return lease

     def leases_for_tenant(self, tenant_id: int) -> List[LeaseAgreement]:
          # Drafts stay private to the landlord
          return self.store.leases.list(
               lambda lease: lease.status != LeaseStatus.DRAFT,
               tenant_id=tenant_id,
          )

     def leases_for_landlord(self, landlord_id: int) -> List[LeaseAgreement]:
          return self.store.leases.list(landlord_id=landlord_id)

     def leases_for_property(self, actor_id: int, property_id: int) -> List[LeaseAgreement]:
          prop = self.store.properties.get(property_id)
          if prop is None:
               raise NotFoundError("Property", property_id)
          if prop.landlord_id != actor_id:
               raise AuthorizationError("Only the property's landlord can list its leases")
          return self.store.leases.list(property_id=property_id)

     # ---- landlord side -------------------------------------------------

     def create_lease(
          self,
          actor_id: int,
          application_id: int,
          start_date: date,
          end_date: date,
          monthly_rent: Decimal,
          security_deposit: Decimal,
          tenancy_terms: Optional[str] = None,
     ) -> LeaseAgreement:
          """
          Draft a lease from an approved application.

          Raises:
               NotFoundError: application or property missing
               AuthorizationError: actor is not the property's landlord
               StateConflictError: application not approved
               DuplicateResourceError: a lease already exists for the application
               ValidationError: malformed terms
          """
          application = self.store.applications.get(application_id)
          if application is None:
               raise NotFoundError("Application", application_id)
          prop = self.store.properties.get(application.property_id)
          if prop is None:
               raise NotFoundError("Property", application.property_id)
          if prop.landlord_id != actor_id:
               raise AuthorizationError("Only the property's landlord can draft a lease")
          if application.status != ApplicationStatus.APPROVED:
               raise StateConflictError(
                    f"Application {application_id} must be approved before a lease is drafted "
                    f"(status: {application.status.value})"
               )
          if self.store.leases.first(application_id=application_id) is not None:
               raise DuplicateResourceError(f"A lease already exists for application {application_id}")

          LeaseAgreement.validate_terms(start_date, end_date, monthly_rent, security_deposit)

          now = self.clock.now()
          lease = LeaseAgreement(
               property_id=prop.id,
               tenant_id=application.tenant_id,
               landlord_id=actor_id,
               application_id=application_id,
               start_date=start_date,
               end_date=end_date,
               monthly_rent=Decimal(monthly_rent),
               security_deposit=Decimal(security_deposit),
               tenancy_terms=tenancy_terms,
               status=LeaseStatus.DRAFT,
               payment_status=PaymentStatus.UNPAID,
               created_at=now,
               updated_at=now,
          )
          self.store.leases.add(lease)
          logger.info(
               "Lease %s drafted for application %s", lease.id, application_id,
               extra={"lease_id": lease.id, "property_id": prop.id},
          )
          return lease

     def _draft(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          lease = self._landlord_lease(actor_id, lease_id)
          if lease.status != LeaseStatus.DRAFT:
               raise InvalidTransitionError(
                    f"Lease {lease_id} can only be edited while it is a draft (status: {lease.status.value})"
               )
          return lease

     def update_terms(self, actor_id: int, lease_id: int, **changes) -> LeaseAgreement:
          """Change any of the draft's terms; omitted (or None) fields keep their value."""
          unknown = set(changes) - set(EDITABLE_TERMS)
          if unknown:
               raise ValidationError(f"Unknown lease fields: {', '.join(sorted(unknown))}")
          lease = self._draft(actor_id, lease_id)

          merged = {name: getattr(lease, name) for name in EDITABLE_TERMS}
          merged.update({name: value for name, value in changes.items() if value is not None})
          LeaseAgreement.validate_terms(
               merged["start_date"], merged["end_date"], merged["monthly_rent"], merged["security_deposit"]
          )
          for name, value in merged.items():
               setattr(lease, name, value)
          lease.updated_at = self.clock.now()
          return lease

     def attach_document(self, actor_id: int, lease_id: int, name: str, kind, url: str) -> LeaseDocument:
          lease = self._draft(actor_id, lease_id)
          if not name or not name.strip():
               raise ValidationError("Document name is required")
          if not url or not url.strip():
               raise ValidationError("Document url is required")
          try:
               kind = DocumentKind(kind)
          except ValueError:
               raise ValidationError(f"Unsupported document kind: {kind}")

          document = LeaseDocument(
               name=name.strip(),
               kind=kind,
               url=url.strip(),
               position=len(lease.documents),
               uploaded_at=self.clock.now(),
          )
          lease.documents.append(document)
          self.store.flush()
          return document

     def send_to_tenant(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          """Hand the draft to the tenant and start the response window."""
          lease = self._landlord_lease(actor_id, lease_id)
          now = self.clock.now()
          lease.transition_to(LeaseStatus.PENDING_TENANT, now)
          lease.sent_to_tenant_at = now
          lease.acceptance_deadline = now + self.window

          with LogContext.bind(lease_id=lease.id):
               logger.info("Lease sent to tenant %s, deadline %s", lease.tenant_id, lease.acceptance_deadline)
          self._notify(
               lease.tenant_id, lease,
               "New lease agreement",
               f"Your landlord sent a lease to review. Please respond by {lease.acceptance_deadline:%Y-%m-%d %H:%M} UTC.",
               TENANT_LEASES_LINK,
          )
          return lease

     # ---- tenant side ---------------------------------------------------

     def _check_response_window(self, lease: LeaseAgreement, now: datetime) -> None:
          """Expire and raise if the running window has lapsed; expired leases stay expired."""
          if window_lapsed(lease, now):
               self.expire(lease, now)
               # Persist the expiry even though the caller's transaction rolls back.
               self.store.commit()
               raise LeaseExpiredError(lease.id)
          if lease.status == LeaseStatus.EXPIRED:
               raise LeaseExpiredError(lease.id)

     def accept(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          """
          Tenant accepts the lease.

          Passes through tenant_accepted into payment_pending and restarts the
          window for the payment.

          Raises:
               LeaseExpiredError: the window lapsed (the lease is now expired)
               AlreadyRespondedError: the tenant already accepted or rejected
               InvalidTransitionError: the lease has not been sent
          """
          lease = self._tenant_lease(actor_id, lease_id)
          now = self.clock.now()
          self._check_response_window(lease, now)
          if lease.status in RESPONDED_STATUSES:
               raise AlreadyRespondedError(lease.id, lease.status.value)
          if lease.status != LeaseStatus.PENDING_TENANT:
               raise InvalidTransitionError(f"Lease {lease.id} has not been sent to the tenant")

          lease.transition_to(LeaseStatus.TENANT_ACCEPTED, now)
          lease.tenant_responded_at = now
          lease.transition_to(LeaseStatus.PAYMENT_PENDING, now)
          lease.acceptance_deadline = now + self.window

          with LogContext.bind(lease_id=lease.id):
               logger.info("Lease accepted, payment due by %s", lease.acceptance_deadline)
          self._notify(
               lease.landlord_id, lease,
               "Lease accepted",
               "The tenant accepted the lease. It activates once the deposit and first month's rent are paid.",
               LANDLORD_LEASES_LINK,
          )
          return lease

     def reject(self, actor_id: int, lease_id: int, reason: Optional[str]) -> LeaseAgreement:
          """Tenant turns the lease down. A non-empty reason is required."""
          lease = self._tenant_lease(actor_id, lease_id)
          now = self.clock.now()
          self._check_response_window(lease, now)
          if lease.status in RESPONDED_STATUSES:
               raise AlreadyRespondedError(lease.id, lease.status.value)
          if lease.status != LeaseStatus.PENDING_TENANT:
               raise InvalidTransitionError(f"Lease {lease.id} has not been sent to the tenant")

          reason = (reason or "").strip()
          if not reason:
               raise ValidationError("A reason is required to reject a lease")

          lease.transition_to(LeaseStatus.REJECTED, now)
          lease.tenant_responded_at = now
          lease.rejection_reason = reason

          with LogContext.bind(lease_id=lease.id):
               logger.info("Lease rejected: %s", reason)
          self._notify(
               lease.landlord_id, lease,
               "Lease rejected",
               f"The tenant rejected the lease: {reason}",
               LANDLORD_LEASES_LINK,
          )
          return lease

     # ---- expiry and termination ----------------------------------------

     def expire(self, lease: LeaseAgreement, now: Optional[datetime] = None) -> LeaseAgreement:
          now = now or self.clock.now()
          previous = lease.status
          lease.transition_to(LeaseStatus.EXPIRED, now)
          if lease.payment_status == PaymentStatus.PROCESSING:
               lease.payment_status = PaymentStatus.UNPAID

          logger.info(
               "Lease %s expired (was %s, deadline %s)", lease.id, previous.value, lease.acceptance_deadline,
               extra={"lease_id": lease.id},
          )
          description = (
               "The tenant did not respond before the deadline."
               if previous == LeaseStatus.PENDING_TENANT
               else "Payment was not received before the deadline."
          )
          self._notify(lease.landlord_id, lease, "Lease expired", description, LANDLORD_LEASES_LINK)
          self._notify(lease.tenant_id, lease, "Lease expired", description, TENANT_LEASES_LINK)
          return lease

     def expire_if_lapsed(self, lease: LeaseAgreement) -> bool:
          now = self.clock.now()
          if window_lapsed(lease, now):
               self.expire(lease, now)
               return True
          return False

     def expire_lapsed_leases(self) -> int:
          """Sweep every lease whose window has lapsed. Returns how many expired."""
          now = self.clock.now()
          lapsed = self.store.leases.list(
               lambda lease: window_lapsed(lease, now)
          )
          for lease in lapsed:
               self.expire(lease, now)
          if lapsed:
               logger.info("Expired %d lapsed leases", len(lapsed))
          return len(lapsed)

     def deadline_status(self, actor_id: int, lease_id: int) -> DeadlineStatus:
          lease = self.get_lease_for(actor_id, lease_id)
          now = self.clock.now()
          running = lease.status in AWAITING_STATUSES
          return DeadlineStatus(
               lease_id=lease.id,
               status=lease.status,
               deadline=lease.acceptance_deadline,
               hours_remaining=hours_until(lease.acceptance_deadline, now) if running else None,
               is_expired=lease.status == LeaseStatus.EXPIRED or window_lapsed(lease, now),
          )

     def terminate(self, actor_id: int, lease_id: int, reason: Optional[str]) -> LeaseAgreement:
          """Either party ends an active lease early."""
          lease = self.get_lease_for(actor_id, lease_id)
          reason = (reason or "").strip()
          if not reason:
               raise ValidationError("A reason is required to terminate a lease")

          now = self.clock.now()
          lease.transition_to(LeaseStatus.TERMINATED, now)
          lease.termination_reason = reason
          lease.terminated_by = actor_id
          lease.terminated_at = now

          with LogContext.bind(lease_id=lease.id):
               logger.info("Lease terminated by user %s: %s", actor_id, reason)
          if actor_id == lease.tenant_id:
               self._notify(lease.landlord_id, lease, "Lease terminated",
                            f"The tenant ended the lease: {reason}", LANDLORD_LEASES_LINK)
          else:
               self._notify(lease.tenant_id, lease, "Lease terminated",
                            f"The landlord ended the lease: {reason}", TENANT_LEASES_LINK)
          return lease

     def _notify(self, user_id: int, lease: LeaseAgreement, title: str, description: str, link: str) -> None:
          if self.notifier is None:
               return
          self.notifier.notify(
               user_id,
               NotificationType.LEASE,
               title,
               description,
               link=link,
               related_entity_id=lease.id,
               related_entity_type=RelatedEntityType.LEASE_AGREEMENT,
          )


