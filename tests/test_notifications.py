"""
Notification tests.

Verifies:
- Listing is newest first, paged, and filterable by read state and type
- Read / unread bookkeeping and deletion, own notifications only
- Links resolve to the page for the user's role
"""

import pytest

from rentmate.exceptions import AuthorizationError, NotFoundError
from rentmate.models import NotificationType, UserRole
from rentmate.services import resolve_notification_link


@pytest.fixture
def inbox(notifier, clock, tenant):
    """Five notifications for the tenant, one minute apart."""
    created = []
    kinds = [
        NotificationType.APPLICATION,
        NotificationType.LEASE,
        NotificationType.PAYMENT,
        NotificationType.MESSAGE,
        NotificationType.LEASE,
    ]
    for i, kind in enumerate(kinds):
        clock.advance(minutes=1)
        created.append(notifier.notify(tenant.id, kind, f"Note {i}", f"Description {i}"))
    return created


class TestListNotifications:

    def test_newest_first(self, notifier, tenant, inbox):
        rows, total, pages = notifier.list_notifications(tenant.id)
        assert [n.title for n in rows] == ["Note 4", "Note 3", "Note 2", "Note 1", "Note 0"]
        assert total == 5
        assert pages == 1

    def test_paging(self, notifier, tenant, inbox):
        rows, total, pages = notifier.list_notifications(tenant.id, page=1, size=2)
        assert [n.title for n in rows] == ["Note 2", "Note 1"]
        assert total == 5
        assert pages == 3

    def test_filter_by_type(self, notifier, tenant, inbox):
        rows, total, _ = notifier.list_notifications(tenant.id, types=[NotificationType.LEASE])
        assert [n.title for n in rows] == ["Note 4", "Note 1"]
        assert total == 2

    def test_unread_only(self, notifier, tenant, inbox):
        notifier.mark_read(tenant.id, inbox[0].id)
        rows, total, _ = notifier.list_notifications(tenant.id, unread_only=True)
        assert total == 4
        assert inbox[0] not in rows

    def test_other_users_not_listed(self, notifier, landlord, inbox):
        assert notifier.list_notifications(landlord.id) == ([], 0, 0)


class TestReadState:

    def test_unread_count(self, notifier, tenant, inbox):
        assert notifier.unread_count(tenant.id) == 5
        notifier.mark_read(tenant.id, inbox[2].id)
        assert notifier.unread_count(tenant.id) == 4

    def test_mark_all_read(self, notifier, tenant, inbox):
        assert notifier.mark_all_read(tenant.id) == 5
        assert notifier.unread_count(tenant.id) == 0
        assert notifier.mark_all_read(tenant.id) == 0

    def test_cannot_touch_others(self, notifier, landlord, inbox):
        with pytest.raises(AuthorizationError):
            notifier.mark_read(landlord.id, inbox[0].id)
        with pytest.raises(AuthorizationError):
            notifier.delete(landlord.id, inbox[0].id)

    def test_missing_notification(self, notifier, tenant):
        with pytest.raises(NotFoundError):
            notifier.mark_read(tenant.id, 999)


class TestDelete:

    def test_delete_one(self, notifier, tenant, inbox):
        notifier.delete(tenant.id, inbox[0].id)
        assert notifier.list_notifications(tenant.id)[1] == 4

    def test_delete_all_read(self, notifier, tenant, inbox):
        notifier.mark_read(tenant.id, inbox[0].id)
        notifier.mark_read(tenant.id, inbox[1].id)
        assert notifier.delete_all_read(tenant.id) == 2
        rows, total, _ = notifier.list_notifications(tenant.id)
        assert total == 3
        assert all(not n.read for n in rows)


class TestResolveLink:

    def test_property_links_kept(self):
        assert resolve_notification_link("/properties/7", NotificationType.PROPERTY, UserRole.LANDLORD) == "/properties/7"

    def test_role_specific_link_kept(self):
        link = "/dashboard/landlord-leases"
        assert resolve_notification_link(link, NotificationType.LEASE, UserRole.LANDLORD) == link

    def test_other_role_link_replaced(self):
        resolved = resolve_notification_link("/dashboard/landlord-leases", NotificationType.LEASE, UserRole.TENANT)
        assert resolved == "/dashboard/leases"

    def test_missing_link_uses_type(self):
        assert resolve_notification_link(None, NotificationType.PAYMENT, UserRole.TENANT) == "/dashboard/payments"
        assert resolve_notification_link(None, NotificationType.MESSAGE, UserRole.PROPERTY_MANAGER) == "/dashboard/pm-messages"

    def test_admin_gets_tenant_pages(self):
        assert resolve_notification_link(None, NotificationType.SYSTEM, UserRole.ADMIN) == "/dashboard"
