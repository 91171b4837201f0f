"""
HTTP and WebSocket API tests over an in-memory SQLite database.

Verifies:
- Register / login and token checks
- Application -> lease -> acceptance payment flow end to end
- Lifecycle errors map to status codes with a machine-readable code
- An expiry caused by a late payment is persisted
- The /ws push channel: connect, subscribe, receive, send, refusals
"""

from decimal import Decimal

import pytest
from starlette.websockets import WebSocketDisconnect

from rentmate.auth import create_access_token


def _register(client, email, role, first="Test"):
    response = client.post(
        "/api/register",
        json={"first_name": first, "last_name": "User", "email": email, "password": "password123", "role": role},
    )
    assert response.status_code == 201
    login = client.post("/api/login", json={"email": email, "password": "password123"})
    assert login.status_code == 200
    body = login.json()
    return {
        "id": body["user"]["id"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def parties(client):
    landlord = _register(client, "landlord@test.com", "landlord", "Lana")
    tenant = _register(client, "tenant@test.com", "tenant", "John")
    prop = client.post(
        "/api/properties",
        json={"title": "Sunset Condos 4B", "address": "12 Sunset Ave", "monthly_rent": "1800.00"},
        headers=landlord["headers"],
    )
    assert prop.status_code == 201
    return landlord, tenant, prop.json()["id"]


@pytest.fixture
def sent_lease_id(client, parties):
    landlord, tenant, property_id = parties
    application = client.post(
        "/api/applications",
        json={"property_id": property_id, "message": "Looking to move in March"},
        headers=tenant["headers"],
    ).json()
    approved = client.put(f"/api/applications/{application['id']}/approve", headers=landlord["headers"])
    assert approved.json()["status"] == "approved"

    lease = client.post(
        "/api/lease-agreements",
        json={
            "application_id": application["id"],
            "start_date": "2026-03-01",
            "end_date": "2027-02-28",
            "monthly_rent": "1800.00",
            "security_deposit": "3600.00",
            "tenancy_terms": "No pets.",
        },
        headers=landlord["headers"],
    )
    assert lease.status_code == 201
    lease_id = lease.json()["id"]
    sent = client.post(f"/api/lease-agreements/{lease_id}/send", headers=landlord["headers"])
    assert sent.json()["status"] == "pending_tenant"
    return lease_id


@pytest.fixture
def accepted_lease_id(client, parties, sent_lease_id):
    _, tenant, _ = parties
    accepted = client.post(f"/api/lease-agreements/{sent_lease_id}/accept", headers=tenant["headers"])
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "payment_pending"
    return sent_lease_id


class TestAuth:

    def test_root(self, client):
        assert client.get("/").json() == {"message": "RentMate API is running"}

    def test_missing_token(self, client):
        response = client.get("/api/lease-agreements/tenant")
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/lease-agreements/tenant", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 403

    def test_bad_password(self, client, parties):
        response = client.post("/api/login", json={"email": "tenant@test.com", "password": "wrong-password"})
        assert response.status_code == 401

    def test_duplicate_email(self, client, parties):
        response = client.post(
            "/api/register",
            json={"first_name": "J", "last_name": "T", "email": "TENANT@test.com", "password": "password123"},
        )
        assert response.status_code == 409
        assert response.json()["code"] == "duplicate"

    def test_current_user(self, client, parties):
        _, tenant, _ = parties
        me = client.get("/api/users/me", headers=tenant["headers"]).json()
        assert me["email"] == "tenant@test.com"
        assert me["role"] == "tenant"

    def test_unknown_route(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_request_id_echoed(self, client):
        response = client.get("/", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestLeaseFlow:

    def test_tenant_sees_sent_lease(self, client, parties, sent_lease_id):
        _, tenant, _ = parties
        leases = client.get("/api/lease-agreements/tenant", headers=tenant["headers"]).json()
        assert [lease["id"] for lease in leases] == [sent_lease_id]
        assert leases[0]["acceptance_deadline"] == "2026-01-03T12:00:00"

    def test_invalid_dates_rejected(self, client, parties, sent_lease_id):
        landlord, tenant, property_id = parties
        other = _register(client, "other@test.com", "tenant", "Olive")
        application = client.post(
            "/api/applications", json={"property_id": property_id}, headers=other["headers"]
        ).json()
        client.put(f"/api/applications/{application['id']}/approve", headers=landlord["headers"])
        response = client.post(
            "/api/lease-agreements",
            json={
                "application_id": application["id"],
                "start_date": "2026-03-01",
                "end_date": "2026-03-01",
                "monthly_rent": "1800.00",
                "security_deposit": "3600.00",
            },
            headers=landlord["headers"],
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_reject_blocks_payment_summary(self, client, parties, sent_lease_id):
        _, tenant, _ = parties
        rejected = client.post(
            f"/api/lease-agreements/{sent_lease_id}/reject",
            json={"reason": "Found cheaper option"},
            headers=tenant["headers"],
        ).json()
        assert rejected["status"] == "rejected"
        assert rejected["rejection_reason"] == "Found cheaper option"

        summary = client.get(f"/api/payments/lease/{sent_lease_id}/summary", headers=tenant["headers"])
        assert summary.status_code == 409

        again = client.post(f"/api/lease-agreements/{sent_lease_id}/accept", headers=tenant["headers"])
        assert again.status_code == 409
        assert again.json()["code"] == "already_responded"

    def test_deadline_status(self, client, api_clock, parties, sent_lease_id):
        _, tenant, _ = parties
        api_clock.advance(hours=10, minutes=30)
        status = client.get(f"/api/lease-agreements/{sent_lease_id}/deadline-status", headers=tenant["headers"]).json()
        assert status["hours_remaining"] == 37
        assert status["is_expired"] is False

    def test_admin_sweep(self, client, api_clock, sent_lease_id):
        admin = {"Authorization": f"Bearer {create_access_token(999, 'admin')}"}
        api_clock.advance(hours=48)
        assert client.post("/api/lease-agreements/expire-lapsed", headers=admin).json() == {"expired": 1}


class TestAcceptancePayment:

    def test_summary(self, client, parties, accepted_lease_id):
        _, tenant, _ = parties
        summary = client.get(f"/api/payments/lease/{accepted_lease_id}/summary", headers=tenant["headers"]).json()
        assert Decimal(summary["total_due"]) == Decimal("5400")
        assert summary["hours_remaining"] == 48
        assert summary["is_expired"] is False

    def test_payment_activates_lease(self, client, api_clock, parties, accepted_lease_id):
        landlord, tenant, _ = parties
        api_clock.advance(hours=47)
        url = f"/api/payments/lease/{accepted_lease_id}/acceptance-payment"
        response = client.post(url, json={"amount": "5400.00", "payment_method": "card"}, headers=tenant["headers"])
        assert response.status_code == 200
        body = response.json()
        assert body["lease"]["status"] == "active"
        assert body["lease"]["payment_status"] == "paid"
        assert body["lease"]["paid_at"] == "2026-01-03T11:00:00"
        assert len(body["transaction_hash"]) == 64

        summary = client.get(f"/api/payments/lease/{accepted_lease_id}/summary", headers=tenant["headers"]).json()
        assert Decimal(summary["total_paid"]) == Decimal("5400")

        # Paying again returns the original settlement
        api_clock.advance(minutes=5)
        repeat = client.post(url, json={"amount": "5400.00"}, headers=tenant["headers"]).json()
        assert repeat["payment"]["id"] == body["payment"]["id"]
        assert repeat["transaction_hash"] == body["transaction_hash"]
        assert repeat["lease"]["paid_at"] == "2026-01-03T11:00:00"

        installments = client.get(f"/api/rent/lease/{accepted_lease_id}", headers=landlord["headers"]).json()
        assert len(installments) == 12
        assert installments[0]["status"] == "PAID"

        verified = client.get(
            f"/api/payments/ledger/verify/{body['payment']['id']}", headers=tenant["headers"]
        ).json()
        assert verified["valid"] is True

    def test_late_payment_expires_lease(self, client, api_clock, parties, accepted_lease_id):
        _, tenant, _ = parties
        api_clock.advance(hours=49)
        response = client.post(
            f"/api/payments/lease/{accepted_lease_id}/acceptance-payment",
            json={"amount": "5400.00"},
            headers=tenant["headers"],
        )
        assert response.status_code == 409
        assert response.json()["code"] == "expired"

        lease = client.get(f"/api/lease-agreements/{accepted_lease_id}", headers=tenant["headers"]).json()
        assert lease["status"] == "expired"
        assert lease["paid_at"] is None

    def test_partial_payment_refused(self, client, parties, accepted_lease_id):
        _, tenant, _ = parties
        response = client.post(
            f"/api/payments/lease/{accepted_lease_id}/acceptance-payment",
            json={"amount": "5399.99"},
            headers=tenant["headers"],
        )
        assert response.status_code == 402
        assert response.json()["code"] == "insufficient_payment"
        lease = client.get(f"/api/lease-agreements/{accepted_lease_id}", headers=tenant["headers"]).json()
        assert lease["status"] == "payment_pending"
        assert lease["payment_status"] == "unpaid"

    def test_ledger_verify_is_admin_only(self, client, parties):
        landlord, _, _ = parties
        assert client.get("/api/payments/ledger/verify", headers=landlord["headers"]).status_code == 403


@pytest.fixture
def active_lease_id(client, parties, accepted_lease_id):
    _, tenant, _ = parties
    paid = client.post(
        f"/api/payments/lease/{accepted_lease_id}/acceptance-payment",
        json={"amount": "5400.00"},
        headers=tenant["headers"],
    )
    assert paid.json()["lease"]["status"] == "active"
    return accepted_lease_id


@pytest.fixture
def manager(client, parties):
    landlord, _, property_id = parties
    manager = _register(client, "pm@test.com", "property_manager", "Pat")
    assigned = client.put(
        f"/api/properties/{property_id}/manager",
        json={"manager_email": "pm@test.com"},
        headers=landlord["headers"],
    )
    assert assigned.status_code == 200
    assert assigned.json()["manager_id"] == manager["id"]
    return manager


class TestPropertyManagerApi:

    def test_manager_sees_property(self, client, parties, manager):
        _, _, property_id = parties
        mine = client.get("/api/properties/mine", headers=manager["headers"]).json()
        assert [p["id"] for p in mine] == [property_id]

    def test_assign_unknown_manager(self, client, parties):
        landlord, _, property_id = parties
        response = client.put(
            f"/api/properties/{property_id}/manager",
            json={"manager_email": "nobody@test.com"},
            headers=landlord["headers"],
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_manager_logs_payment(self, client, parties, manager, active_lease_id):
        response = client.post(
            f"/api/payments/lease/{active_lease_id}/log",
            json={"amount": "1800.00", "payment_type": "RENT", "paid_on": "2026-04-01"},
            headers=manager["headers"],
        )
        assert response.status_code == 201

    def test_unassigned_manager_cannot_log(self, client, parties, active_lease_id):
        outsider = _register(client, "pm@test.com", "property_manager", "Pat")
        response = client.post(
            f"/api/payments/lease/{active_lease_id}/log",
            json={"amount": "1800.00", "payment_type": "RENT", "paid_on": "2026-04-01"},
            headers=outsider["headers"],
        )
        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"


class TestMaintenanceApi:

    def _open(self, client, tenant, lease_id, priority="HIGH"):
        response = client.post(
            "/api/maintenance",
            json={"lease_id": lease_id, "title": "Kitchen sink leaking", "description": "Water pools.",
                  "priority": priority},
            headers=tenant["headers"],
        )
        assert response.status_code == 201
        return response.json()

    def test_request_lifecycle(self, client, api_clock, parties, manager, active_lease_id):
        landlord, tenant, _ = parties
        request = self._open(client, tenant, active_lease_id)
        assert request["status"] == "OPEN"
        url = f"/api/maintenance/{request['id']}"

        accepted = client.patch(f"{url}/accept", json={"estimated_cost": "150.00"}, headers=manager["headers"])
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "ACCEPTED"

        scheduled = client.patch(
            f"{url}/schedule", json={"scheduled_for": "2026-01-03T09:00:00"}, headers=landlord["headers"]
        )
        assert scheduled.json()["status"] == "SCHEDULED"

        api_clock.advance(days=2)
        assert client.patch(f"{url}/start", headers=landlord["headers"]).json()["status"] == "IN_PROGRESS"
        resolved = client.patch(f"{url}/resolve", json={"actual_cost": "120.50"}, headers=landlord["headers"])
        assert resolved.json()["status"] == "COMPLETED"
        assert Decimal(resolved.json()["actual_cost"]) == Decimal("120.50")

        timeline = client.get(f"{url}/timeline", headers=tenant["headers"]).json()
        assert [e["status"] for e in timeline] == ["OPEN", "ACCEPTED", "SCHEDULED", "IN_PROGRESS", "COMPLETED"]
        assert timeline[1]["actor"] == "PROPERTY_MANAGER"

        summary = client.get("/api/maintenance/summary", headers=landlord["headers"]).json()
        assert summary["total"] == 1
        assert summary["by_status"]["COMPLETED"] == 1

    def test_listings_and_comments(self, client, parties, active_lease_id):
        landlord, tenant, _ = parties
        request = self._open(client, tenant, active_lease_id)

        mine = client.get("/api/maintenance/my", headers=tenant["headers"]).json()
        assert mine["total_elements"] == 1
        assert mine["content"][0]["days_open"] == 0
        handled = client.get("/api/maintenance/for-landlord?status=OPEN", headers=landlord["headers"]).json()
        assert [r["id"] for r in handled["content"]] == [request["id"]]

        comment = client.post(
            f"/api/maintenance/{request['id']}/comments", json={"content": "Is Tuesday OK?"},
            headers=landlord["headers"],
        )
        assert comment.status_code == 201
        comments = client.get(f"/api/maintenance/{request['id']}/comments", headers=tenant["headers"]).json()
        assert comments[0]["author_role"] == "LANDLORD"

    def test_tenant_cannot_accept(self, client, parties, active_lease_id):
        _, tenant, _ = parties
        request = self._open(client, tenant, active_lease_id)
        response = client.patch(f"/api/maintenance/{request['id']}/accept", headers=tenant["headers"])
        assert response.status_code == 403

    def test_invalid_transition(self, client, parties, active_lease_id):
        landlord, tenant, _ = parties
        request = self._open(client, tenant, active_lease_id)
        response = client.patch(f"/api/maintenance/{request['id']}/start", headers=landlord["headers"])
        assert response.status_code == 409
        assert response.json()["code"] == "invalid_transition"

    def test_request_on_unpaid_lease_refused(self, client, parties, accepted_lease_id):
        _, tenant, _ = parties
        response = client.post(
            "/api/maintenance",
            json={"lease_id": accepted_lease_id, "title": "Leak", "description": "Dripping tap."},
            headers=tenant["headers"],
        )
        assert response.status_code == 409


class TestNotificationsApi:

    def test_tenant_notified_of_lease(self, client, parties, sent_lease_id):
        _, tenant, _ = parties
        listing = client.get("/api/notifications", params={"type": "LEASE"}, headers=tenant["headers"]).json()
        assert listing["total_elements"] == 1
        note = listing["content"][0]
        assert note["link"] == "/dashboard/leases"

        count = client.get("/api/notifications/unread-count", headers=tenant["headers"]).json()
        assert count["count"] == 2

        marked = client.put(f"/api/notifications/{note['id']}/read", headers=tenant["headers"]).json()
        assert marked["read"] is True
        assert client.delete("/api/notifications/read", headers=tenant["headers"]).json()["count"] == 1

    def test_cannot_read_others(self, client, parties, sent_lease_id):
        landlord, tenant, _ = parties
        note = client.get("/api/notifications", headers=tenant["headers"]).json()["content"][0]
        response = client.put(f"/api/notifications/{note['id']}/read", headers=landlord["headers"])
        assert response.status_code == 403


@pytest.fixture
def conversation_id(client, parties):
    _, tenant, property_id = parties
    response = client.post(
        "/api/conversations",
        json={"property_id": property_id, "subject": "Parking", "message": "Is parking included?"},
        headers=tenant["headers"],
    )
    assert response.status_code == 201
    return response.json()["conversation"]["id"]


class TestConversationsApi:

    def test_reply_and_read(self, client, parties, conversation_id):
        landlord, tenant, property_id = parties
        reply = client.post(
            f"/api/conversations/{conversation_id}/messages",
            json={"content": "Yes, spot 12."},
            headers=landlord["headers"],
        )
        assert reply.status_code == 201
        assert reply.json()["sender_role"] == "LANDLORD"

        unread = client.get("/api/conversations/unread-count", headers=tenant["headers"]).json()
        assert unread == {"unread_count": 1, "unread_conversations": 1}
        marked = client.put(f"/api/conversations/{conversation_id}/read", headers=tenant["headers"]).json()
        assert marked["marked_as_read"] == 1

        exists = client.get(f"/api/conversations/property/{property_id}", headers=tenant["headers"]).json()
        assert exists == {"exists": True, "conversation_id": conversation_id}

    def test_archived_conversation(self, client, parties, conversation_id):
        _, tenant, _ = parties
        client.delete(f"/api/conversations/{conversation_id}", headers=tenant["headers"])
        assert client.get("/api/conversations", headers=tenant["headers"]).json()["total_elements"] == 0
        archived = client.get("/api/conversations", params={"archived": True}, headers=tenant["headers"]).json()
        assert archived["total_elements"] == 1

        response = client.post(
            f"/api/conversations/{conversation_id}/messages",
            json={"content": "Hello?"},
            headers=tenant["headers"],
        )
        assert response.status_code == 409


class TestWebSocket:

    def _connect(self, websocket, token):
        websocket.send_json({"command": "connect", "token": token})
        return websocket.receive_json()

    def _subscribe(self, websocket, destination):
        websocket.send_json({"command": "subscribe", "destination": destination})
        return websocket.receive_json()

    def test_connect_subscribe_receive(self, client, parties, conversation_id):
        landlord, tenant, _ = parties
        topic = f"/topic/conversations/{conversation_id}"
        queue = f"/user/{tenant['id']}/queue/notifications"

        with client.websocket_connect("/ws") as websocket:
            assert self._connect(websocket, tenant["token"]) == {"command": "connected", "user_id": tenant["id"]}
            assert self._subscribe(websocket, topic) == {"command": "subscribed", "destination": topic}
            assert self._subscribe(websocket, queue)["command"] == "subscribed"

            client.post(
                f"/api/conversations/{conversation_id}/messages",
                json={"content": "Yes, spot 12."},
                headers=landlord["headers"],
            )
            message = websocket.receive_json()
            assert message["destination"] == topic
            assert message["body"]["content"] == "Yes, spot 12."
            notification = websocket.receive_json()
            assert notification["destination"] == queue
            assert notification["body"]["type"] == "MESSAGE"

            websocket.send_json({
                "command": "send",
                "destination": f"/app/chat.send/{conversation_id}",
                "body": {"content": "Great, thanks"},
            })
            echoed = websocket.receive_json()
            assert echoed["body"]["content"] == "Great, thanks"
            assert echoed["body"]["sender_id"] == tenant["id"]

        detail = client.get(f"/api/conversations/{conversation_id}", headers=landlord["headers"]).json()
        assert [m["content"] for m in detail["messages"]] == ["Is parking included?", "Yes, spot 12.", "Great, thanks"]

    def test_bad_token_closes(self, client):
        with client.websocket_connect("/ws") as websocket:
            frame = self._connect(websocket, "not-a-token")
            assert frame["command"] == "error"
            assert frame["code"] == "unauthenticated"
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_json()
            assert exc_info.value.code == 1008

    def test_foreign_destinations_refused(self, client, parties, conversation_id):
        landlord, tenant, _ = parties
        outsider = _register(client, "other@test.com", "tenant", "Olive")
        with client.websocket_connect("/ws") as websocket:
            self._connect(websocket, outsider["token"])
            frame = self._subscribe(websocket, f"/topic/conversations/{conversation_id}")
            assert frame["command"] == "error"
            assert frame["code"] == "forbidden"
            frame = self._subscribe(websocket, f"/user/{tenant['id']}/queue/notifications")
            assert frame["code"] == "forbidden"

    def test_bad_send_reports_error(self, client, parties, conversation_id):
        _, tenant, _ = parties
        with client.websocket_connect("/ws") as websocket:
            self._connect(websocket, tenant["token"])
            websocket.send_json({
                "command": "send",
                "destination": f"/app/chat.send/{conversation_id}",
                "body": {"content": "   "},
            })
            frame = websocket.receive_json()
            assert frame["command"] == "error"
            assert frame["code"] == "validation_error"
