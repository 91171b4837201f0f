# services/payment_service.py
"""
Payment Service - settle the deposit + first month that activates a lease.

After the tenant accepts, the lease sits in payment_pending with a deadline.
One payment of at least the total due (security deposit + first month's
rent), made while a whole hour of the window remains, activates it. Amounts
are compared as exact decimals; partial payments are refused and leave the
lease untouched.
Paying a lease that is already active returns the original settlement.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import (
     AuthorizationError,
     InsufficientPaymentError,
     InvalidTransitionError,
     LeaseExpiredError,
     RentmateError,
     StateConflictError,
     ValidationError,
)
from rentmate.logging_config import LogContext
from rentmate.models import (
     LeaseAgreement,
     LeaseStatus,
     NotificationType,
     Payment,
     PaymentRecordStatus,
     PaymentStatus,
     PaymentType,
     RelatedEntityType,
)
from rentmate.repositories import Store
from .ledger_service import append_payment_record, find_entry_for_payment
from .lease_service import AWAITING_STATUSES, LeaseService, hours_until, window_lapsed
from .rent_schedule_service import RentScheduleService

logger = logging.getLogger(__name__)

# No payment summary before the tenant has accepted.
NO_SUMMARY_STATUSES = frozenset({LeaseStatus.DRAFT, LeaseStatus.PENDING_TENANT, LeaseStatus.REJECTED})


def to_amount(value) -> Decimal:
     """Exact decimal for an amount given as Decimal, str, int or float."""
     if isinstance(value, Decimal):
          amount = value
     else:
          try:
               # str() keeps 5400.0 as 5400.0 instead of its binary expansion
               amount = Decimal(str(value))
          except (InvalidOperation, ValueError):
               raise ValidationError(f"Invalid amount: {value!r}")
     if not amount.is_finite():
          raise ValidationError(f"Invalid amount: {value!r}")
     return amount


@dataclass
class PaymentSummary:
     lease_id: int
     status: str
     security_deposit: Decimal
     first_month_rent: Decimal
     total_due: Decimal
     total_paid: Decimal
     remaining: Decimal
     deadline: Optional[datetime]
     hours_remaining: Optional[int]
     is_expired: bool


@dataclass
class AcceptancePaymentResult:
     payment: Payment
     lease: LeaseAgreement
     transaction_hash: str


class PaymentService:

     def __init__(
          self,
          store: Store,
          clock: Optional[Clock] = None,
          notifier=None,
          leases: Optional[LeaseService] = None,
          schedule: Optional[RentScheduleService] = None,
     ):
          self.store = store
          self.clock = clock or SystemClock()
          self.notifier = notifier
          self.leases = leases or LeaseService(store, self.clock, notifier)
          self.schedule = schedule or RentScheduleService(store, self.clock, notifier)

     def _acceptance_payment(self, lease: LeaseAgreement) -> Optional[Payment]:
          return self.store.payments.first(
               lease_id=lease.id,
               type=PaymentType.DEPOSIT_AND_FIRST_RENT,
               status=PaymentRecordStatus.COMPLETED,
          )

     def compute_summary(self, lease: LeaseAgreement) -> PaymentSummary:
          """
          What the tenant owes to activate ``lease`` and how long is left.

          ``hours_remaining`` is floored and ``is_expired`` is true once it
          reaches 0.
          """
          if lease.status in NO_SUMMARY_STATUSES:
               raise StateConflictError(
                    f"No payment summary for lease {lease.id} in status {lease.status.value}"
               )

          now = self.clock.now()
          total_due = lease.total_due
          payment = self._acceptance_payment(lease)
          total_paid = Decimal(payment.amount) if payment is not None else Decimal("0")
          remaining = max(total_due - total_paid, Decimal("0"))

          running = lease.status in AWAITING_STATUSES
          return PaymentSummary(
               lease_id=lease.id,
               status=lease.status.value,
               security_deposit=Decimal(lease.security_deposit),
               first_month_rent=Decimal(lease.monthly_rent),
               total_due=total_due,
               total_paid=total_paid,
               remaining=remaining,
               deadline=lease.acceptance_deadline,
               hours_remaining=hours_until(lease.acceptance_deadline, now) if running else None,
               is_expired=lease.status == LeaseStatus.EXPIRED or window_lapsed(lease, now),
          )

     def get_summary(self, actor_id: int, lease_id: int) -> PaymentSummary:
          return self.compute_summary(self.leases.get_lease_for(actor_id, lease_id))

     def submit_payment(
          self,
          actor_id: int,
          lease_id: int,
          amount,
          method: Optional[str] = None,
          description: Optional[str] = None,
     ) -> AcceptancePaymentResult:
          """
          Pay the deposit and first month's rent and activate the lease.

          Raises:
               AuthorizationError: actor is not the lease's tenant
               LeaseExpiredError: the deadline passed (the lease is now expired)
               InvalidTransitionError: lease is not awaiting payment
               InsufficientPaymentError: amount is below the total due
          """
          lease = self.leases.get_lease(lease_id)
          if lease.tenant_id != actor_id:
               raise AuthorizationError("Only the tenant of this lease can pay for it")
          amount = to_amount(amount)

          if lease.status == LeaseStatus.ACTIVE and lease.is_paid:
               payment = self._acceptance_payment(lease)
               entry = find_entry_for_payment(self.store, payment.id)
               logger.info("Lease %s already paid; returning original payment %s", lease.id, payment.id)
               return AcceptancePaymentResult(payment, lease, entry.transaction_hash)

          now = self.clock.now()
          if window_lapsed(lease, now):
               self.leases.expire(lease, now)
               # Persist the expiry even though the caller's transaction rolls back.
               self.store.commit()
               raise LeaseExpiredError(lease.id)
          if lease.status == LeaseStatus.EXPIRED:
               raise LeaseExpiredError(lease.id)
          if lease.status != LeaseStatus.PAYMENT_PENDING:
               raise InvalidTransitionError(
                    f"Lease {lease.id} is not awaiting payment (status: {lease.status.value})"
               )

          total_due = lease.total_due
          if amount < total_due:
               raise InsufficientPaymentError(amount, total_due)

          with LogContext.bind(lease_id=lease.id):
               lease.payment_status = PaymentStatus.PROCESSING
               payment = Payment(
                    lease_id=lease.id,
                    payer_id=actor_id,
                    amount=amount,
                    type=PaymentType.DEPOSIT_AND_FIRST_RENT,
                    status=PaymentRecordStatus.COMPLETED,
                    method=method,
                    description=description or "Security deposit and first month's rent",
                    paid_at=now,
                    created_at=now,
               )
               try:
                    self.store.payments.add(payment)
                    entry = append_payment_record(self.store, payment, now)
               except RentmateError:
                    lease.payment_status = PaymentStatus.UNPAID
                    logger.exception("Recording acceptance payment failed")
                    raise

               lease.transition_to(LeaseStatus.ACTIVE, now)
               lease.payment_status = PaymentStatus.PAID
               lease.payment_amount = amount
               lease.paid_at = now
               self.schedule.generate_schedule(lease)

               logger.info(
                    "Lease activated by payment of %s (due %s)", amount, total_due,
                    extra={"payment_id": payment.id},
               )

          self._notify_activation(lease, payment)
          return AcceptancePaymentResult(payment, lease, entry.transaction_hash)

     def _notify_activation(self, lease: LeaseAgreement, payment: Payment) -> None:
          if self.notifier is None:
               return
          self.notifier.notify(
               lease.landlord_id,
               NotificationType.PAYMENT,
               "Payment received",
               f"The tenant paid {payment.amount}. The lease is now active.",
               link="/dashboard/landlord-leases",
               related_entity_id=payment.id,
               related_entity_type=RelatedEntityType.PAYMENT,
          )
          self.notifier.notify(
               lease.tenant_id,
               NotificationType.LEASE,
               "Lease active",
               f"Your lease starting {lease.start_date} is now active.",
               link="/dashboard/leases",
               related_entity_id=lease.id,
               related_entity_type=RelatedEntityType.LEASE_AGREEMENT,
          )

     def log_payment(
          self,
          actor_id: int,
          lease_id: int,
          amount,
          payment_type: PaymentType,
          paid_on,
          method: Optional[str] = None,
          description: Optional[str] = None,
     ) -> Payment:
          """Landlord or property manager records money received outside the platform on an active lease."""
          lease = self.leases.get_lease(lease_id)
          prop = self.store.properties.get(lease.property_id)
          if actor_id != lease.landlord_id and (prop is None or not prop.is_handled_by(actor_id)):
               raise AuthorizationError("Only the landlord or the property manager can log payments for this lease")
          if lease.status != LeaseStatus.ACTIVE:
               raise InvalidTransitionError(f"Lease {lease.id} is not active (status: {lease.status.value})")
          if payment_type == PaymentType.DEPOSIT_AND_FIRST_RENT:
               raise ValidationError("The acceptance payment is made by the tenant, not logged")
          amount = to_amount(amount)
          if amount <= 0:
               raise ValidationError("Amount must be positive")

          now = self.clock.now()
          payment = Payment(
               lease_id=lease.id,
               payer_id=lease.tenant_id,
               amount=amount,
               type=payment_type,
               status=PaymentRecordStatus.COMPLETED,
               method=method,
               description=description,
               paid_at=datetime.combine(paid_on, time.min),
               created_at=now,
          )
          self.store.payments.add(payment)
          append_payment_record(self.store, payment, now)
          logger.info(
               "User %s logged %s payment of %s on lease %s", actor_id, payment_type.value, amount, lease.id,
               extra={"payment_id": payment.id},
          )
          return payment

     def payments_for_lease(self, actor_id: int, lease_id: int) -> List[Payment]:
          self.leases.get_lease_for(actor_id, lease_id)
          return self.store.payments.list(lease_id=lease_id)
