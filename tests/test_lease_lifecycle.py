"""
Lease lifecycle tests.

Verifies:
- Drafting only from an approved application, with well-formed terms
- Draft editing and documents
- Send / accept / reject, each response at most once
- The response window: a lapsed window expires the lease and beats a late response
- Termination of active leases
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from rentmate.exceptions import (
    AlreadyRespondedError,
    AuthorizationError,
    DuplicateResourceError,
    InvalidTransitionError,
    LeaseExpiredError,
    StateConflictError,
    ValidationError,
)
from rentmate.models import (
    ApplicationStatus,
    LeaseApplication,
    LeaseStatus,
    NotificationType,
    PaymentStatus,
)
from rentmate.services import hours_until

from conftest import T0


class TestCreateLease:

    def test_draft_from_approved_application(self, draft_lease, landlord, tenant, rental):
        assert draft_lease.status == LeaseStatus.DRAFT
        assert draft_lease.payment_status == PaymentStatus.UNPAID
        assert draft_lease.landlord_id == landlord.id
        assert draft_lease.tenant_id == tenant.id
        assert draft_lease.property_id == rental.id
        assert draft_lease.acceptance_deadline is None

    def test_end_date_must_follow_start_date(self, lease_service, landlord, approved_application):
        with pytest.raises(ValidationError):
            lease_service.create_lease(
                landlord.id, approved_application.id,
                date(2026, 3, 1), date(2026, 3, 1),
                Decimal("1800"), Decimal("3600"),
            )

    def test_end_date_before_start_date_fails(self, lease_service, landlord, approved_application):
        with pytest.raises(ValidationError):
            lease_service.create_lease(
                landlord.id, approved_application.id,
                date(2026, 3, 1), date(2026, 2, 1),
                Decimal("1800"), Decimal("3600"),
            )

    def test_non_positive_rent_fails(self, lease_service, landlord, approved_application):
        with pytest.raises(ValidationError):
            lease_service.create_lease(
                landlord.id, approved_application.id,
                date(2026, 3, 1), date(2027, 3, 1),
                Decimal("0"), Decimal("3600"),
            )

    def test_application_must_be_approved(self, lease_service, store, landlord, rental, other_tenant):
        pending = store.applications.add(
            LeaseApplication(property_id=rental.id, tenant_id=other_tenant.id, status=ApplicationStatus.PENDING)
        )
        with pytest.raises(StateConflictError):
            lease_service.create_lease(
                landlord.id, pending.id, date(2026, 3, 1), date(2027, 3, 1), Decimal("1800"), Decimal("3600")
            )

    def test_one_lease_per_application(self, lease_service, landlord, approved_application, draft_lease):
        with pytest.raises(DuplicateResourceError):
            lease_service.create_lease(
                landlord.id, approved_application.id,
                date(2026, 3, 1), date(2027, 3, 1),
                Decimal("1800"), Decimal("3600"),
            )

    def test_only_property_landlord_can_draft(self, lease_service, tenant, approved_application):
        with pytest.raises(AuthorizationError):
            lease_service.create_lease(
                tenant.id, approved_application.id,
                date(2026, 3, 1), date(2027, 3, 1),
                Decimal("1800"), Decimal("3600"),
            )


class TestDraftEditing:

    def test_update_terms(self, lease_service, landlord, draft_lease):
        lease = lease_service.update_terms(landlord.id, draft_lease.id, monthly_rent=Decimal("1750.00"))
        assert lease.monthly_rent == Decimal("1750.00")
        assert lease.security_deposit == Decimal("3600.00")

    def test_update_validates_merged_terms(self, lease_service, landlord, draft_lease):
        with pytest.raises(ValidationError):
            lease_service.update_terms(landlord.id, draft_lease.id, end_date=date(2026, 1, 1))
        assert draft_lease.end_date == date(2027, 2, 28)

    def test_sent_lease_cannot_be_edited(self, lease_service, landlord, sent_lease):
        with pytest.raises(InvalidTransitionError):
            lease_service.update_terms(landlord.id, sent_lease.id, tenancy_terms="Pets allowed")

    def test_attach_documents_in_order(self, lease_service, landlord, draft_lease):
        lease_service.attach_document(landlord.id, draft_lease.id, "Lease.pdf", "pdf", "/files/lease.pdf")
        lease_service.attach_document(landlord.id, draft_lease.id, "Floorplan", "image", "/files/plan.png")
        assert [d.name for d in draft_lease.documents] == ["Lease.pdf", "Floorplan"]
        assert [d.position for d in draft_lease.documents] == [0, 1]

    def test_unknown_document_kind(self, lease_service, landlord, draft_lease):
        with pytest.raises(ValidationError):
            lease_service.attach_document(landlord.id, draft_lease.id, "Lease.docx", "docx", "/files/lease.docx")


class TestSendToTenant:

    def test_send_starts_response_window(self, sent_lease):
        assert sent_lease.status == LeaseStatus.PENDING_TENANT
        assert sent_lease.sent_to_tenant_at == T0
        assert sent_lease.acceptance_deadline == T0 + timedelta(hours=48)

    def test_tenant_is_notified(self, store, sent_lease, tenant):
        notes = store.notifications.list(user_id=tenant.id)
        assert len(notes) == 1
        assert notes[0].type == NotificationType.LEASE
        assert notes[0].related_entity_id == sent_lease.id

    def test_cannot_send_twice(self, lease_service, landlord, sent_lease):
        with pytest.raises(InvalidTransitionError):
            lease_service.send_to_tenant(landlord.id, sent_lease.id)

    def test_drafts_hidden_from_tenant(self, lease_service, tenant, draft_lease):
        assert lease_service.leases_for_tenant(tenant.id) == []


class TestAccept:

    def test_accept_moves_to_payment_pending(self, lease_service, clock, tenant, sent_lease):
        clock.advance(hours=5)
        lease = lease_service.accept(tenant.id, sent_lease.id)
        assert lease.status == LeaseStatus.PAYMENT_PENDING
        assert lease.tenant_responded_at == T0 + timedelta(hours=5)
        assert lease.acceptance_deadline == T0 + timedelta(hours=53)

    def test_only_tenant_can_accept(self, lease_service, landlord, sent_lease):
        with pytest.raises(AuthorizationError):
            lease_service.accept(landlord.id, sent_lease.id)

    def test_cannot_accept_draft(self, lease_service, tenant, draft_lease):
        with pytest.raises(InvalidTransitionError):
            lease_service.accept(tenant.id, draft_lease.id)

    def test_second_accept_fails(self, lease_service, tenant, accepted_lease):
        with pytest.raises(AlreadyRespondedError):
            lease_service.accept(tenant.id, accepted_lease.id)

    def test_reject_after_accept_fails(self, lease_service, tenant, accepted_lease):
        with pytest.raises(StateConflictError) as exc_info:
            lease_service.reject(tenant.id, accepted_lease.id, "Changed my mind")
        assert exc_info.value.code == "already_responded"
        assert accepted_lease.rejection_reason is None

    def test_late_accept_expires_lease(self, lease_service, clock, tenant, sent_lease):
        clock.advance(hours=49)
        with pytest.raises(LeaseExpiredError):
            lease_service.accept(tenant.id, sent_lease.id)
        assert sent_lease.status == LeaseStatus.EXPIRED

    def test_accept_exactly_at_deadline_is_late(self, lease_service, clock, tenant, sent_lease):
        clock.set(sent_lease.acceptance_deadline)
        with pytest.raises(LeaseExpiredError):
            lease_service.accept(tenant.id, sent_lease.id)

    def test_accept_on_expired_lease_keeps_failing(self, lease_service, clock, tenant, sent_lease):
        clock.advance(hours=49)
        with pytest.raises(LeaseExpiredError):
            lease_service.accept(tenant.id, sent_lease.id)
        with pytest.raises(LeaseExpiredError):
            lease_service.accept(tenant.id, sent_lease.id)


class TestReject:

    def test_reject_with_reason(self, lease_service, tenant, sent_lease):
        lease = lease_service.reject(tenant.id, sent_lease.id, "Found cheaper option")
        assert lease.status == LeaseStatus.REJECTED
        assert lease.rejection_reason == "Found cheaper option"

    def test_reason_required(self, lease_service, tenant, sent_lease):
        with pytest.raises(ValidationError):
            lease_service.reject(tenant.id, sent_lease.id, "   ")
        assert sent_lease.status == LeaseStatus.PENDING_TENANT
        assert sent_lease.rejection_reason is None

    def test_accept_after_reject_fails(self, lease_service, tenant, sent_lease):
        lease_service.reject(tenant.id, sent_lease.id, "Found cheaper option")
        with pytest.raises(AlreadyRespondedError):
            lease_service.accept(tenant.id, sent_lease.id)
        assert sent_lease.status == LeaseStatus.REJECTED

    def test_landlord_notified(self, lease_service, store, tenant, landlord, sent_lease):
        lease_service.reject(tenant.id, sent_lease.id, "Found cheaper option")
        titles = [n.title for n in store.notifications.list(user_id=landlord.id)]
        assert "Lease rejected" in titles


class TestExpirySweep:

    def test_sweep_expires_only_lapsed(self, lease_service, clock, tenant, sent_lease):
        assert lease_service.expire_lapsed_leases() == 0
        clock.advance(hours=48)
        assert lease_service.expire_lapsed_leases() == 1
        assert sent_lease.status == LeaseStatus.EXPIRED
        assert lease_service.expire_lapsed_leases() == 0

    def test_sweep_covers_unpaid_leases(self, lease_service, clock, accepted_lease):
        clock.advance(hours=50)
        assert lease_service.expire_if_lapsed(accepted_lease) is True
        assert accepted_lease.status == LeaseStatus.EXPIRED


class TestDeadlineStatus:

    def test_hours_remaining_floored(self, lease_service, clock, tenant, sent_lease):
        clock.advance(hours=10, minutes=59)
        status = lease_service.deadline_status(tenant.id, sent_lease.id)
        assert status.hours_remaining == 37
        assert status.is_expired is False

    def test_expired_flag_after_deadline(self, lease_service, clock, tenant, sent_lease):
        clock.advance(hours=48, seconds=1)
        status = lease_service.deadline_status(tenant.id, sent_lease.id)
        assert status.hours_remaining == 0
        assert status.is_expired is True

    def test_hours_until(self):
        assert hours_until(None, T0) is None
        assert hours_until(T0 + timedelta(minutes=59), T0) == 0
        assert hours_until(T0 - timedelta(hours=1), T0) == 0


class TestTerminate:

    def test_either_party_terminates_active_lease(self, lease_service, tenant, active_lease):
        lease = lease_service.terminate(tenant.id, active_lease.id, "Relocating for work")
        assert lease.status == LeaseStatus.TERMINATED
        assert lease.terminated_by == tenant.id
        assert lease.termination_reason == "Relocating for work"

    def test_only_active_leases(self, lease_service, landlord, sent_lease):
        with pytest.raises(InvalidTransitionError):
            lease_service.terminate(landlord.id, sent_lease.id, "Never mind")

    def test_outsider_cannot_terminate(self, lease_service, other_tenant, active_lease):
        with pytest.raises(AuthorizationError):
            lease_service.terminate(other_tenant.id, active_lease.id, "Not mine")
