# services/rent_schedule_service.py
"""
Rent Schedule Service - monthly rent installments for active leases.

The schedule is generated once, when the lease activates: one installment per
month from start_date up to end_date, due on the first day of its period.
Installment 1 is settled by the acceptance payment.
"""
import logging
from calendar import monthrange
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import (
     AuthorizationError,
     InvalidTransitionError,
     NotFoundError,
     PaymentError,
     StateConflictError,
)
from rentmate.models import (
     InstallmentStatus,
     LeaseAgreement,
     LeaseStatus,
     NotificationType,
     Payment,
     PaymentRecordStatus,
     PaymentType,
     RelatedEntityType,
     RentInstallment,
)
from rentmate.repositories import Store
from .ledger_service import append_payment_record

logger = logging.getLogger(__name__)

UNSETTLED = (InstallmentStatus.PENDING, InstallmentStatus.OVERDUE)


def add_months(start: date, months: int) -> date:
     """``start`` moved by whole months, clamped to the last day of short months."""
     month_index = start.month - 1 + months
     year = start.year + month_index // 12
     month = month_index % 12 + 1
     day = min(start.day, monthrange(year, month)[1])
     return date(year, month, day)


class RentScheduleService:

     def __init__(self, store: Store, clock: Optional[Clock] = None, notifier=None):
          self.store = store
          self.clock = clock or SystemClock()
          self.notifier = notifier

     def _lease_for(self, actor_id: int, lease_id: int) -> LeaseAgreement:
          lease = self.store.leases.get(lease_id)
          if lease is None:
               raise NotFoundError("Lease", lease_id)
          if not lease.is_party(actor_id):
               raise AuthorizationError("You are not a party to this lease")
          return lease

     def generate_schedule(self, lease: LeaseAgreement) -> List[RentInstallment]:
          """
          Create the lease's installments. Calling it again returns the
          existing schedule unchanged.
          """
          existing = self.store.installments.list(lease_id=lease.id)
          if existing:
               return existing

          installments = []
          sequence = 0
          period_start = lease.start_date
          while period_start < lease.end_date:
               sequence += 1
               installment = RentInstallment(
                    lease_id=lease.id,
                    tenant_id=lease.tenant_id,
                    sequence=sequence,
                    period_start=period_start,
                    due_date=period_start,
                    amount=Decimal(lease.monthly_rent),
                    status=InstallmentStatus.PENDING,
                    created_at=self.clock.now(),
               )
               if sequence == 1 and lease.is_paid:
                    installment.mark_as_paid(lease.paid_at)
               installments.append(self.store.installments.add(installment))
               period_start = add_months(lease.start_date, sequence)

          logger.info(
               "Generated %d rent installments for lease %s", len(installments), lease.id,
               extra={"lease_id": lease.id},
          )
          return installments

     def installments_for_lease(self, actor_id: int, lease_id: int) -> List[RentInstallment]:
          self._lease_for(actor_id, lease_id)
          rows = self.store.installments.list(lease_id=lease_id)
          return sorted(rows, key=lambda i: i.sequence)

     def current_installment(self, actor_id: int, lease_id: int) -> Optional[RentInstallment]:
          """Earliest installment still owed, or None when everything is settled."""
          for installment in self.installments_for_lease(actor_id, lease_id):
               if installment.status in UNSETTLED:
                    return installment
          return None

     def _installment(self, lease_id: int, installment_id: int) -> RentInstallment:
          installment = self.store.installments.get(installment_id)
          if installment is None or installment.lease_id != lease_id:
               raise NotFoundError("Installment", installment_id)
          return installment

     def pay_installment(
          self,
          actor_id: int,
          lease_id: int,
          installment_id: int,
          amount: Decimal,
          method: Optional[str] = None
     ) -> Payment:
          """
          Tenant pays one installment in full.

          Paying an installment that is already paid returns the original
          payment. The amount must match the installment exactly.
          """
          lease = self._lease_for(actor_id, lease_id)
          if lease.tenant_id != actor_id:
               raise AuthorizationError("Only the tenant pays rent installments")
          installment = self._installment(lease_id, installment_id)

          if installment.status == InstallmentStatus.PAID:
               existing = self.store.payments.first(installment_id=installment.id)
               if existing is not None:
                    return existing
               raise StateConflictError(f"Installment {installment.id} is already settled")
          if installment.status == InstallmentStatus.WAIVED:
               raise StateConflictError(f"Installment {installment.id} was waived")
          if lease.status != LeaseStatus.ACTIVE:
               raise InvalidTransitionError(f"Lease {lease.id} is not active (status: {lease.status.value})")

          amount = Decimal(amount)
          if amount != Decimal(installment.amount):
               raise PaymentError(
                    f"Amount {amount} does not match installment amount {installment.amount}",
                    code="amount_mismatch",
               )

          now = self.clock.now()
          payment = Payment(
               lease_id=lease.id,
               payer_id=actor_id,
               installment_id=installment.id,
               amount=amount,
               type=PaymentType.RENT,
               status=PaymentRecordStatus.COMPLETED,
               method=method,
               description=f"Rent for {installment.period_start:%B %Y}",
               paid_at=now,
               created_at=now,
          )
          self.store.payments.add(payment)
          append_payment_record(self.store, payment, now)
          installment.mark_as_paid(now)

          logger.info(
               "Installment %s of lease %s paid", installment.sequence, lease.id,
               extra={"lease_id": lease.id, "payment_id": payment.id},
          )
          if self.notifier is not None:
               self.notifier.notify(
                    lease.landlord_id,
                    NotificationType.PAYMENT,
                    "Rent received",
                    f"Rent of {amount} for {installment.period_start:%B %Y} was paid.",
                    link="/dashboard/landlord-leases",
                    related_entity_id=payment.id,
                    related_entity_type=RelatedEntityType.PAYMENT,
               )
          return payment

     def waive_installment(self, actor_id: int, lease_id: int, installment_id: int) -> RentInstallment:
          lease = self._lease_for(actor_id, lease_id)
          if lease.landlord_id != actor_id:
               raise AuthorizationError("Only the landlord can waive rent")
          installment = self._installment(lease_id, installment_id)
          if installment.status == InstallmentStatus.PAID:
               raise StateConflictError(f"Installment {installment.id} is already paid")
          installment.status = InstallmentStatus.WAIVED
          return installment

     def mark_overdue(self, today: Optional[date] = None) -> int:
          """
          Mark every pending installment past its due date as overdue and tell
          the tenant. Returns the number of installments updated.
          """
          today = today or self.clock.today()
          due = self.store.installments.list(lambda i: i.is_overdue(today))
          for installment in due:
               installment.mark_as_overdue()
               if self.notifier is not None:
                    self.notifier.notify(
                         installment.tenant_id,
                         NotificationType.PAYMENT,
                         "Rent overdue",
                         f"Rent of {installment.amount} due {installment.due_date} has not been paid.",
                         link="/dashboard/payments",
                         related_entity_id=installment.lease_id,
                         related_entity_type=RelatedEntityType.LEASE_AGREEMENT,
                    )
          if due:
               logger.info("Marked %d installments overdue", len(due))
          return len(due)

     def upcoming_for_tenant(self, tenant_id: int, days: int = 30) -> List[RentInstallment]:
          horizon = self.clock.today() + timedelta(days=days)
          rows = self.store.installments.list(
               lambda i: i.status in UNSETTLED and i.due_date <= horizon,
               tenant_id=tenant_id,
          )
          return sorted(rows, key=lambda i: i.due_date)
