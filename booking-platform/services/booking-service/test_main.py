# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the Booking Service HTTP API.
Push delivery is mocked; every test starts from an empty in-memory store.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from booking.core.config import settings
from booking.core.dependencies import get_notification_client, get_store
from main import app

client = TestClient(app)

OFFICER = {"X-Actor-Id": "officer-1", "X-Actor-Role": "booking_officer"}
PRODUCER = {"X-Actor-Id": "producer-1", "X-Actor-Role": "producer"}


def crew(staff_id: str) -> dict:
    return {"X-Actor-Id": staff_id, "X-Actor-Role": "crew"}


def production_payload(day="2024-06-01", start="09:00", end="11:00", **extra) -> dict:
    payload = {
        "name": "Morning News",
        "callTime": f"{day}T08:00:00Z",
        "startTime": f"{day}T{start}:00Z",
        "endTime": f"{day}T{end}:00Z",
        "venue": "Studio 1",
    }
    payload.update(extra)
    return payload


def register(staff_id: str, roles=("camera_operator",)) -> dict:
    response = client.post(
        "/api/v1/staff",
        json={
            "id": staff_id,
            "name": staff_id.title(),
            "email": f"{staff_id}@studio.test",
            "roles": list(roles),
        },
    )
    assert response.status_code == 201
    return response.json()


def create_production(**kwargs) -> dict:
    response = client.post("/api/v1/productions", json=production_payload(**kwargs), headers=PRODUCER)
    assert response.status_code == 201
    return response.json()


def assign(production_id: str, roster: dict, headers=OFFICER):
    return client.put(
        f"/api/v1/productions/{production_id}/assignment",
        json={"assignedStaff": roster},
        headers=headers,
    )


# ============================================
# Fixtures
# ============================================
@pytest.fixture(autouse=True)
def reset_state():
    """Empty the store and stub out push delivery for every test."""
    get_store().clear()
    with patch.object(get_notification_client(), "push", AsyncMock(return_value=True)) as push:
        yield push


# ============================================
# Health & Metrics
# ============================================
class TestHealth:
    def test_health(self):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["service"] == settings.SERVICE_NAME
        assert data["version"] == settings.SERVICE_VERSION

    def test_ready(self):
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_metrics_exposed(self):
        client.get("/api/v1/productions")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "booking_requests_total" in response.text

    def test_request_id_propagated(self):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"


# ============================================
# Productions
# ============================================
class TestCreateProduction:
    def test_producer_creates_requested_production(self):
        data = create_production()
        assert data["status"] == "requested"
        assert data["requestedById"] == "producer-1"
        assert data["date"] == "2024-06-01"
        assert data["assignedStaff"]["cameraOperators"] == []

    def test_crew_cannot_request(self):
        response = client.post("/api/v1/productions", json=production_payload(), headers=crew("alice"))
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_missing_actor_headers(self):
        response = client.post("/api/v1/productions", json=production_payload())
        assert response.status_code == 401

    def test_unknown_actor_role(self):
        headers = {"X-Actor-Id": "x", "X-Actor-Role": "admin"}
        response = client.post("/api/v1/productions", json=production_payload(), headers=headers)
        assert response.status_code == 401

    def test_end_before_start_rejected(self):
        response = client.post(
            "/api/v1/productions", json=production_payload(start="11:00", end="09:00"), headers=PRODUCER
        )
        assert response.status_code == 400

    def test_date_must_match_start_day(self):
        response = client.post(
            "/api/v1/productions", json=production_payload(date="2024-06-09"), headers=PRODUCER
        )
        assert response.status_code == 400
        assert "does not match" in response.json()["detail"]

    def test_matching_date_accepted(self):
        response = client.post(
            "/api/v1/productions", json=production_payload(date="2024-06-01"), headers=PRODUCER
        )
        assert response.status_code == 201
        assert response.json()["date"] == "2024-06-01"

    def test_outside_broadcast_needs_location(self):
        response = client.post(
            "/api/v1/productions",
            json=production_payload(venue="Location", isOutsideBroadcast=True),
            headers=PRODUCER,
        )
        assert response.status_code == 400

    def test_outside_broadcast_with_location(self):
        data = create_production(
            venue="Location", isOutsideBroadcast=True, locationDetails="Town Hall"
        )
        assert data["locationDetails"] == "Town Hall"

    def test_unknown_venue(self):
        response = client.post(
            "/api/v1/productions", json=production_payload(venue="Studio 9"), headers=PRODUCER
        )
        assert response.status_code == 400

    def test_missing_field_is_422(self):
        payload = production_payload()
        del payload["startTime"]
        response = client.post("/api/v1/productions", json=payload, headers=PRODUCER)
        assert response.status_code == 422


class TestReadProductions:
    def test_get_by_id(self):
        created = create_production()
        response = client.get(f"/api/v1/productions/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Morning News"

    def test_get_unknown(self):
        response = client.get("/api/v1/productions/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["id"] == "nope"

    def test_list_is_chronological_and_filtered(self):
        create_production(day="2024-06-03")
        create_production(day="2024-06-01")
        create_production(day="2024-06-02")

        data = client.get("/api/v1/productions").json()
        assert data["total"] == 3
        assert [p["date"] for p in data["productions"]] == ["2024-06-01", "2024-06-02", "2024-06-03"]

        ranged = client.get("/api/v1/productions?dateFrom=2024-06-02").json()
        assert ranged["total"] == 2

    def test_list_pagination(self):
        for day in ("2024-06-01", "2024-06-02", "2024-06-03"):
            create_production(day=day)
        data = client.get("/api/v1/productions?page=2&perPage=2").json()
        assert data["perPage"] == 2
        assert [p["date"] for p in data["productions"]] == ["2024-06-03"]

    def test_list_by_status(self):
        create_production()
        assert client.get("/api/v1/productions?status=confirmed").json()["total"] == 0
        assert client.get("/api/v1/productions?status=requested").json()["total"] == 1

    def test_summary(self):
        create_production()
        data = client.get("/api/v1/productions/summary").json()
        assert data["total"] == 1
        assert data["byStatus"]["requested"] == 1


# ============================================
# Availability & assignment
# ============================================
class TestAssignmentFlow:
    def test_scenario_alice(self):
        register("alice")
        p1 = create_production(start="09:00", end="11:00")
        assert assign(p1["id"], {"cameraOperators": ["alice"]}).status_code == 200

        overlapping = client.post(
            "/api/v1/availability/check",
            json={"staffIds": ["alice"], "startTime": "2024-06-01T10:00:00Z", "endTime": "2024-06-01T12:00:00Z"},
        ).json()["results"][0]
        assert overlapping["available"] is False
        assert [p["id"] for p in overlapping["conflicts"]] == [p1["id"]]

        touching = client.post(
            "/api/v1/availability/check",
            json={"staffIds": ["alice"], "startTime": "2024-06-01T11:00:00Z", "endTime": "2024-06-01T12:00:00Z"},
        ).json()["results"][0]
        assert touching["available"] is True
        assert touching["conflicts"] == []

    def test_availability_naive_times_are_utc(self):
        register("alice")
        p1 = create_production(start="09:00", end="11:00")
        assert assign(p1["id"], {"cameraOperators": ["alice"]}).status_code == 200

        response = client.post(
            "/api/v1/availability/check",
            json={"staffIds": ["alice"], "startTime": "2024-06-01T10:00:00", "endTime": "2024-06-01T12:00:00"},
        )
        assert response.status_code == 200
        result = response.json()["results"][0]
        assert result["available"] is False
        assert [p["id"] for p in result["conflicts"]] == [p1["id"]]

    def test_availability_unknown_staff(self):
        response = client.post(
            "/api/v1/availability/check",
            json={"staffIds": ["ghost"], "startTime": "2024-06-01T10:00:00Z", "endTime": "2024-06-01T12:00:00Z"},
        )
        assert response.status_code == 404

    def test_availability_bad_window(self):
        register("alice")
        response = client.post(
            "/api/v1/availability/check",
            json={"staffIds": ["alice"], "startTime": "2024-06-01T12:00:00Z", "endTime": "2024-06-01T10:00:00Z"},
        )
        assert response.status_code == 400

    def test_assignment_confirms(self):
        register("alice")
        register("bob", roles=("director",))
        p1 = create_production()

        response = assign(p1["id"], {"cameraOperators": ["alice"], "director": "bob"})
        assert response.status_code == 200
        data = response.json()
        assert data["hasConflicts"] is False
        assert data["production"]["status"] == "confirmed"
        assert data["production"]["processedById"] == "officer-1"

    def test_resubmission_clears_omitted_slots(self):
        register("alice")
        register("bob", roles=("director",))
        p1 = create_production()
        assign(p1["id"], {"cameraOperators": ["alice"], "director": "bob"})

        data = assign(p1["id"], {"cameraOperators": ["alice"]}).json()
        assert "director" not in data["production"]["assignedStaff"]
        assert data["production"]["status"] == "confirmed"

    def test_review_then_assign_anyway(self):
        register("alice")
        p1 = create_production(start="09:00", end="11:00")
        assign(p1["id"], {"cameraOperators": ["alice"]})
        p2 = create_production(start="10:00", end="12:00")

        review = client.post(
            f"/api/v1/productions/{p2['id']}/assignment/review",
            json={"assignedStaff": {"cameraOperators": ["alice"]}},
        ).json()
        assert review["hasConflicts"] is True
        assert client.get(f"/api/v1/productions/{p2['id']}").json()["status"] == "requested"

        forced = assign(p2["id"], {"cameraOperators": ["alice"]}).json()
        assert forced["hasConflicts"] is True
        assert [p["id"] for p in forced["conflicts"]["alice"]] == [p1["id"]]
        assert forced["production"]["status"] == "confirmed"

    def test_producer_cannot_assign(self):
        register("alice")
        p1 = create_production()
        response = assign(p1["id"], {"cameraOperators": ["alice"]}, headers=PRODUCER)
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "invalid_transition"
        assert body["from_status"] == "requested"

    def test_assign_unknown_staff(self):
        p1 = create_production()
        response = assign(p1["id"], {"cameraOperators": ["ghost"]})
        assert response.status_code == 404
        assert client.get(f"/api/v1/productions/{p1['id']}").json()["status"] == "requested"

    def test_assignment_pushes_notifications(self, reset_state):
        register("alice")
        p1 = create_production()
        assign(p1["id"], {"cameraOperators": ["alice"]})
        recipients = sorted(c.args[0] for c in reset_state.await_args_list)
        assert recipients == ["alice", "producer-1"]


# ============================================
# Lifecycle transitions
# ============================================
class TestLifecycle:
    def _confirmed_today(self) -> dict:
        register("alice")
        today = datetime.now(timezone.utc).date().isoformat()
        production = create_production(day=today, start="00:00", end="00:01")
        assign(production["id"], {"cameraOperators": ["alice"]})
        return production

    def test_overtime_report(self):
        production = self._confirmed_today()
        actual = production["endTime"].replace("00:01:00", "00:30:00")
        response = client.post(
            f"/api/v1/productions/{production['id']}/overtime",
            json={"actualEndTime": actual, "reason": "Extra segment"},
            headers=crew("alice"),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "overtime"
        assert data["overtimeReported"] is True
        assert data["overtimeReason"] == "Extra segment"

    def test_overtime_before_end_rejected(self):
        production = self._confirmed_today()
        response = client.post(
            f"/api/v1/productions/{production['id']}/overtime",
            json={"actualEndTime": production["startTime"]},
            headers=crew("alice"),
        )
        assert response.status_code == 409

    def test_overtime_on_another_day_rejected(self):
        register("alice")
        p1 = create_production(day="2024-06-01")
        assign(p1["id"], {"cameraOperators": ["alice"]})
        response = client.post(
            f"/api/v1/productions/{p1['id']}/overtime",
            json={"actualEndTime": "2024-06-01T12:00:00Z"},
            headers=crew("alice"),
        )
        assert response.status_code == 409
        assert "production day" in response.json()["reason"]

    def test_complete_and_terminal(self):
        production = self._confirmed_today()
        response = client.post(
            f"/api/v1/productions/{production['id']}/complete",
            json={"completionNotes": "Clean run"},
            headers=crew("alice"),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

        cancel = client.post(f"/api/v1/productions/{production['id']}/cancel", headers=OFFICER)
        assert cancel.status_code == 409

    def test_complete_requested_rejected(self):
        p1 = create_production()
        response = client.post(f"/api/v1/productions/{p1['id']}/complete", headers=OFFICER)
        assert response.status_code == 409

    def test_cancel_requested(self):
        p1 = create_production()
        response = client.post(
            f"/api/v1/productions/{p1['id']}/cancel", json={"reason": "Budget"}, headers=OFFICER
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["completionNotes"] == "Budget"
        stored = client.get(f"/api/v1/productions/{p1['id']}").json()
        assert stored["completionNotes"] == "Budget"

    def test_cancel_requires_booking_officer(self):
        p1 = create_production()
        response = client.post(f"/api/v1/productions/{p1['id']}/cancel", headers=PRODUCER)
        assert response.status_code == 409

    def test_notes_and_timeline(self):
        p1 = create_production()
        client.post(f"/api/v1/productions/{p1['id']}/cancel", headers=OFFICER)

        note = client.post(
            f"/api/v1/productions/{p1['id']}/notes", json={"content": "Rebook next week"}, headers=PRODUCER
        )
        assert note.status_code == 201
        notes = client.get(f"/api/v1/productions/{p1['id']}/notes").json()
        assert [n["content"] for n in notes] == ["Rebook next week"]

        timeline = client.get(f"/api/v1/productions/{p1['id']}/timeline").json()
        assert [e["eventType"] for e in timeline] == ["requested", "cancelled", "note_added"]

    def test_timeline_unknown_production(self):
        assert client.get("/api/v1/productions/nope/timeline").status_code == 404


# ============================================
# Staff directory
# ============================================
class TestStaff:
    def test_register_and_get(self):
        register("alice")
        data = client.get("/api/v1/staff/alice").json()
        assert data["email"] == "alice@studio.test"
        assert data["profileComplete"] is False

    def test_duplicate_email(self):
        register("alice")
        response = client.post(
            "/api/v1/staff",
            json={"name": "Other", "email": "ALICE@studio.test", "roles": ["director"]},
        )
        assert response.status_code == 400

    def test_unknown_role(self):
        response = client.post(
            "/api/v1/staff",
            json={"name": "Zed", "email": "zed@studio.test", "roles": ["juggler"]},
        )
        assert response.status_code == 400

    def test_list_by_role(self):
        register("alice")
        register("bob", roles=("director",))
        names = [s["id"] for s in client.get("/api/v1/staff?role=director").json()]
        assert names == ["bob"]

    def test_update_completes_profile(self):
        register("alice")
        response = client.patch(
            "/api/v1/staff/alice", json={"department": "News", "phoneNumber": "+44 1234"}
        )
        assert response.status_code == 200
        assert response.json()["profileComplete"] is True

    def test_update_unknown(self):
        response = client.patch("/api/v1/staff/ghost", json={"department": "News"})
        assert response.status_code == 404

    def test_names(self):
        register("alice")
        response = client.post("/api/v1/staff/names", json={"staffIds": ["alice", "ghost"]})
        assert response.json() == {"alice": "Alice"}

    def test_schedule(self):
        register("alice")
        p1 = create_production(day="2024-06-02")
        p2 = create_production(day="2024-06-01")
        assign(p1["id"], {"cameraOperators": ["alice"]})
        assign(p2["id"], {"director": "alice"})

        schedule = client.get("/api/v1/staff/alice/schedule").json()
        assert [p["id"] for p in schedule] == [p2["id"], p1["id"]]


# ============================================
# Issues
# ============================================
class TestIssues:
    def test_report_and_resolve(self):
        p1 = create_production()
        response = client.post(
            "/api/v1/issues",
            json={"productionId": p1["id"], "description": "Mic 3 crackles", "priority": "high"},
            headers=crew("alice"),
        )
        assert response.status_code == 201
        issue = response.json()
        assert issue["status"] == "pending"

        resolved = client.patch(f"/api/v1/issues/{issue['id']}/status", json={"status": "resolved"}).json()
        assert resolved["status"] == "resolved"
        assert resolved["resolvedAt"]

        lowered = client.patch(f"/api/v1/issues/{issue['id']}/priority", json={"priority": "low"}).json()
        assert lowered["priority"] == "low"

    def test_issue_for_unknown_production(self):
        response = client.post(
            "/api/v1/issues",
            json={"productionId": "nope", "description": "x"},
            headers=crew("alice"),
        )
        assert response.status_code == 404

    def test_invalid_status(self):
        p1 = create_production()
        issue = client.post(
            "/api/v1/issues", json={"productionId": p1["id"], "description": "x"}, headers=crew("alice")
        ).json()
        response = client.patch(f"/api/v1/issues/{issue['id']}/status", json={"status": "closed"})
        assert response.status_code == 422

    def test_list_filters(self):
        p1 = create_production()
        client.post("/api/v1/issues", json={"productionId": p1["id"], "description": "a"}, headers=crew("alice"))
        client.post("/api/v1/issues", json={"productionId": p1["id"], "description": "b"}, headers=crew("bob"))
        assert len(client.get(f"/api/v1/issues?production_id={p1['id']}").json()) == 2
        assert len(client.get("/api/v1/issues?reported_by=bob").json()) == 1


# ============================================
# Notification inbox
# ============================================
class TestNotifications:
    def test_inbox_flow(self):
        register("alice")
        p1 = create_production()
        assign(p1["id"], {"cameraOperators": ["alice"]})

        inbox = client.get("/api/v1/notifications/alice").json()
        assert [n["type"] for n in inbox] == ["assignment"]
        assert client.get("/api/v1/notifications/alice/unread-count").json()["unread"] == 1

        marked = client.post(f"/api/v1/notifications/read/{inbox[0]['id']}").json()
        assert marked["read"] is True
        assert client.get("/api/v1/notifications/alice/unread-count").json()["unread"] == 0

    def test_mark_all_read(self):
        register("alice")
        p1 = create_production()
        assign(p1["id"], {"cameraOperators": ["alice"]})
        client.post(f"/api/v1/productions/{p1['id']}/cancel", headers=OFFICER)

        result = client.post("/api/v1/notifications/alice/read-all").json()
        assert result["marked"] == 2
        assert client.get("/api/v1/notifications/alice?unreadOnly=true").json() == []

    def test_mark_unknown(self):
        assert client.post("/api/v1/notifications/read/nope").status_code == 404


# ============================================
# Announcement board
# ============================================
class TestAnnouncements:
    def post(self, title="Canteen", target="all", pinned=False, headers=OFFICER):
        return client.post(
            "/api/v1/announcements",
            json={"title": title, "message": f"{title} update", "targetGroup": target, "isPinned": pinned},
            headers=headers,
        )

    def test_officer_posts(self):
        response = self.post()
        assert response.status_code == 201
        body = response.json()
        assert body["createdById"] == "officer-1"
        assert body["isPinned"] is False
        assert client.get(f"/api/v1/announcements/{body['id']}").json()["title"] == "Canteen"

    def test_producer_cannot_post(self):
        assert self.post(headers=PRODUCER).status_code == 403
        assert client.get("/api/v1/announcements").json() == []

    def test_unknown_target_group(self):
        assert self.post(target="everyone").status_code == 422
        assert client.get("/api/v1/announcements", params={"target": "everyone"}).status_code == 422

    def test_pinned_first_and_target_filter(self):
        everyone = self.post("Canteen").json()
        producers = self.post("Budgets", target="producers").json()
        operators = self.post("Rota", target="operators", pinned=True).json()

        board = client.get("/api/v1/announcements").json()
        assert board[0]["id"] == operators["id"]
        assert {a["id"] for a in board} == {everyone["id"], producers["id"], operators["id"]}

        seen = client.get("/api/v1/announcements", params={"target": "producers"}).json()
        assert {a["id"] for a in seen} == {everyone["id"], producers["id"]}

    def test_edit_pin_and_delete(self):
        post = self.post().json()
        path = f"/api/v1/announcements/{post['id']}"

        edited = client.patch(path, json={"message": "Closed Saturday"}, headers=OFFICER)
        assert edited.status_code == 200
        assert edited.json()["message"] == "Closed Saturday"
        assert edited.json()["title"] == "Canteen"

        pinned = client.post(f"{path}/pin", json={"isPinned": True}, headers=OFFICER)
        assert pinned.json()["isPinned"] is True
        assert client.post(f"{path}/pin", json={"isPinned": False}, headers=crew("alice")).status_code == 403

        assert client.delete(path, headers=OFFICER).status_code == 204
        assert client.get(path).status_code == 404
        assert client.delete(path, headers=OFFICER).status_code == 404
