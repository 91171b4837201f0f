"""
Rent schedule tests.

Verifies:
- One installment per month of the lease, the first settled by activation
- Paying an installment requires the exact amount and is idempotent
- Waived and overdue installments
"""

from datetime import date
from decimal import Decimal

import pytest

from rentmate.exceptions import AuthorizationError, PaymentError, StateConflictError
from rentmate.models import InstallmentStatus, LeaseStatus
from rentmate.services.rent_schedule_service import add_months


class TestAddMonths:

    def test_simple(self):
        assert add_months(date(2026, 3, 1), 1) == date(2026, 4, 1)

    def test_crosses_year(self):
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)

    def test_clamps_short_months(self):
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)


class TestGenerateSchedule:

    def test_monthly_installments(self, schedule_service, tenant, active_lease):
        installments = schedule_service.installments_for_lease(tenant.id, active_lease.id)
        assert [i.sequence for i in installments] == list(range(1, 13))
        assert installments[0].due_date == date(2026, 3, 1)
        assert installments[-1].due_date == date(2027, 2, 1)
        assert all(i.amount == Decimal("1800.00") for i in installments)

    def test_first_installment_paid_at_activation(self, schedule_service, tenant, active_lease):
        first = schedule_service.installments_for_lease(tenant.id, active_lease.id)[0]
        assert first.status == InstallmentStatus.PAID
        assert first.paid_at == active_lease.paid_at

    def test_regenerating_is_a_no_op(self, schedule_service, store, active_lease):
        schedule_service.generate_schedule(active_lease)
        assert store.installments.count(lease_id=active_lease.id) == 12

    def test_current_installment(self, schedule_service, tenant, active_lease):
        current = schedule_service.current_installment(tenant.id, active_lease.id)
        assert current.sequence == 2

    def test_outsider_cannot_view(self, schedule_service, other_tenant, active_lease):
        with pytest.raises(AuthorizationError):
            schedule_service.installments_for_lease(other_tenant.id, active_lease.id)


class TestPayInstallment:

    def _second(self, schedule_service, tenant, lease):
        return schedule_service.installments_for_lease(tenant.id, lease.id)[1]

    def test_exact_amount_pays(self, schedule_service, store, tenant, active_lease):
        installment = self._second(schedule_service, tenant, active_lease)
        payment = schedule_service.pay_installment(tenant.id, active_lease.id, installment.id, Decimal("1800.00"))
        assert installment.status == InstallmentStatus.PAID
        assert payment.installment_id == installment.id
        assert store.ledger.count(payment_id=payment.id) == 1

    def test_amount_mismatch(self, schedule_service, tenant, active_lease):
        installment = self._second(schedule_service, tenant, active_lease)
        with pytest.raises(PaymentError) as exc_info:
            schedule_service.pay_installment(tenant.id, active_lease.id, installment.id, Decimal("1700"))
        assert exc_info.value.code == "amount_mismatch"
        assert installment.status == InstallmentStatus.PENDING

    def test_paying_twice_returns_same_payment(self, schedule_service, tenant, active_lease):
        installment = self._second(schedule_service, tenant, active_lease)
        first = schedule_service.pay_installment(tenant.id, active_lease.id, installment.id, Decimal("1800"))
        second = schedule_service.pay_installment(tenant.id, active_lease.id, installment.id, Decimal("1800"))
        assert second is first

    def test_landlord_cannot_pay(self, schedule_service, tenant, landlord, active_lease):
        installment = self._second(schedule_service, tenant, active_lease)
        with pytest.raises(AuthorizationError):
            schedule_service.pay_installment(landlord.id, active_lease.id, installment.id, Decimal("1800"))

    def test_waived_installment_cannot_be_paid(self, schedule_service, tenant, landlord, active_lease):
        installment = self._second(schedule_service, tenant, active_lease)
        schedule_service.waive_installment(landlord.id, active_lease.id, installment.id)
        assert installment.status == InstallmentStatus.WAIVED
        with pytest.raises(StateConflictError):
            schedule_service.pay_installment(tenant.id, active_lease.id, installment.id, Decimal("1800"))

    def test_paid_installment_cannot_be_waived(self, schedule_service, tenant, landlord, active_lease):
        first = schedule_service.installments_for_lease(tenant.id, active_lease.id)[0]
        with pytest.raises(StateConflictError):
            schedule_service.waive_installment(landlord.id, active_lease.id, first.id)


class TestOverdue:

    def test_mark_overdue(self, schedule_service, store, tenant, active_lease):
        updated = schedule_service.mark_overdue(today=date(2026, 5, 2))
        assert updated == 2
        statuses = [i.status for i in schedule_service.installments_for_lease(tenant.id, active_lease.id)[:4]]
        assert statuses == [
            InstallmentStatus.PAID,
            InstallmentStatus.OVERDUE,
            InstallmentStatus.OVERDUE,
            InstallmentStatus.PENDING,
        ]
        titles = [n.title for n in store.notifications.list(user_id=tenant.id)]
        assert titles.count("Rent overdue") == 2

    def test_overdue_installment_still_payable(self, schedule_service, tenant, active_lease):
        schedule_service.mark_overdue(today=date(2026, 4, 2))
        current = schedule_service.current_installment(tenant.id, active_lease.id)
        assert current.status == InstallmentStatus.OVERDUE
        schedule_service.pay_installment(tenant.id, active_lease.id, current.id, Decimal("1800.00"))
        assert current.status == InstallmentStatus.PAID
        assert active_lease.status == LeaseStatus.ACTIVE

    def test_upcoming_for_tenant(self, schedule_service, clock, tenant, active_lease):
        # Clock sits at 2026-01-01; the window reaches the first unpaid due date
        upcoming = schedule_service.upcoming_for_tenant(tenant.id, days=100)
        assert [i.due_date for i in upcoming] == [date(2026, 4, 1)]
