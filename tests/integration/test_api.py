"""HTTP API tests: routing, status codes and error bodies."""

from datetime import timedelta
from uuid import uuid4, uuid7

import pytest
from sqlmodel import select

from src.app.models import AuditLog, ProjectStatus
from src.app.models.base import utc_now
from tests.factories import ProjectFactory

pytestmark = pytest.mark.integration


async def _create_project(client, headers=None, **overrides):  # type: ignore[no-untyped-def]
    payload = {"name": "Mobile app", "total_hours": 100}
    payload.update(overrides)
    response = await client.post("/api/v1/projects", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestProjectsApi:
    async def test_create_as_member_is_pending(self, client, actor):
        body = await _create_project(client)

        assert body["status"] == "Pending"
        assert body["total_hours"] == 100.0
        assert body["available_hours"] == 100.0
        assert body["owner_id"] == str(actor.id)
        assert body["code"].endswith(f"-{utc_now().year}")

    async def test_create_as_manager_is_active(self, client, manager_headers):
        body = await _create_project(client, headers=manager_headers)

        assert body["status"] == "Active"

    async def test_missing_actor_header(self, client):
        response = await client.post(
            "/api/v1/projects",
            json={"name": "x", "total_hours": 1},
            headers={"X-Actor-Id": ""},
        )

        assert response.status_code == 401
        assert response.json()["request_id"]

    async def test_malformed_actor_id(self, client):
        response = await client.get("/api/v1/projects")
        assert response.status_code == 200

        response = await client.post(
            "/api/v1/projects",
            json={"name": "x", "total_hours": 1},
            headers={"X-Actor-Id": "not-a-uuid"},
        )
        assert response.status_code == 401

    async def test_request_body_validation_is_400(self, client):
        response = await client.post("/api/v1/projects", json={"total_hours": "lots"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["request_id"]

    async def test_get_unknown_project(self, client):
        project_id = uuid7()

        response = await client.get(f"/api/v1/projects/{project_id}")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["details"] == {"resource": "Project", "id": str(project_id)}

    async def test_request_id_is_echoed(self, client):
        request_id = str(uuid4())

        response = await client.get(
            f"/api/v1/projects/{uuid7()}", headers={"X-Request-ID": request_id}
        )

        assert response.headers["X-Request-ID"] == request_id
        assert response.json()["request_id"] == request_id

    async def test_list_with_status_filter(self, client, persist):
        await persist(ProjectFactory.build())
        pending = await persist(ProjectFactory.pending())

        response = await client.get("/api/v1/projects", params={"status": "Pending"})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["items"]] == [str(pending.id)]

    async def test_list_with_unknown_status(self, client):
        response = await client.get("/api/v1/projects", params={"status": "Frozen"})

        assert response.status_code == 400
        assert "valid_statuses" in response.json()["details"]

    async def test_rename(self, client, active_project):
        response = await client.patch(
            f"/api/v1/projects/{active_project.id}", json={"name": "Renamed"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

    async def test_delete(self, client, active_project):
        response = await client.delete(f"/api/v1/projects/{active_project.id}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/projects/{active_project.id}")
        assert response.status_code == 404

    async def test_health_metrics(self, client, persist):
        project = await persist(
            ProjectFactory.with_hours("80", "20", deadline=utc_now() + timedelta(days=60))
        )

        response = await client.get(f"/api/v1/projects/{project.id}/health")

        assert response.status_code == 200
        assert response.json() == {
            "utilization_percent": 25.0,
            "available_hours": 60.0,
            "deadline_status": "On Track",
            "days_until_deadline": 59,
            "can_accept": True,
        }

    async def test_create_with_oversized_budget_is_400(self, client):
        response = await client.post(
            "/api/v1/projects", json={"name": "Too big", "total_hours": 1e27}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_metrics_ordered_by_deadline(self, client, persist):
        now = utc_now()
        undated = await persist(ProjectFactory.build(name="Undated"))
        later = await persist(
            ProjectFactory.with_hours("50", "25", deadline=now + timedelta(days=90))
        )
        sooner = await persist(ProjectFactory.pending(deadline=now + timedelta(days=3)))

        response = await client.get("/api/v1/projects/metrics")

        assert response.status_code == 200
        rows = response.json()["projects"]
        assert [r["project"]["id"] for r in rows] == [
            str(sooner.id),
            str(later.id),
            str(undated.id),
        ]
        assert rows[0]["health"]["deadline_status"] == "Due Soon"
        assert rows[0]["health"]["can_accept"] is False
        assert rows[1]["health"]["utilization_percent"] == 50.0
        assert rows[2]["health"]["deadline_status"] == "No Deadline"

        response = await client.get("/api/v1/projects/metrics", params={"status": "Pending"})
        assert [r["project"]["id"] for r in response.json()["projects"]] == [str(sooner.id)]

        response = await client.get("/api/v1/projects/metrics", params={"status": "Nope"})
        assert response.status_code == 400

    async def test_near_deadline_and_expire_overdue(self, client, persist):
        now = utc_now()
        due_soon = await persist(ProjectFactory.build(deadline=now + timedelta(days=2)))
        overdue = await persist(ProjectFactory.build(deadline=now - timedelta(days=1)))

        response = await client.get("/api/v1/projects/near-deadline", params={"days_ahead": 5})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["projects"]] == [str(due_soon.id)]

        response = await client.post("/api/v1/projects/expire-overdue")
        assert response.status_code == 200
        body = response.json()
        assert body["expired_projects"] == [str(overdue.id)]
        assert body["failed_projects"] == []
        assert body["message"] == "1 project(s) expired"

    async def test_near_deadline_out_of_range(self, client):
        response = await client.get("/api/v1/projects/near-deadline", params={"days_ahead": 400})

        assert response.status_code == 400


class TestLifecycleApi:
    async def test_transition_and_history(self, client, persist):
        project = await persist(ProjectFactory.pending())

        response = await client.patch(
            f"/api/v1/projects/{project.id}/status", json={"status": "Active"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["project"]["status"] == "Active"
        assert "Expired" in body["transition"]["valid_next_states"]

        response = await client.get(f"/api/v1/projects/{project.id}/history")
        assert response.status_code == 200
        history = response.json()
        assert history["pagination"]["total"] == 1
        assert history["history"][0]["to_status"] == "Active"

    async def test_disallowed_transition_is_409(self, client, persist):
        project = await persist(ProjectFactory.build(status=ProjectStatus.EXPIRED.value))

        response = await client.patch(
            f"/api/v1/projects/{project.id}/status", json={"status": "Active"}
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "CONFLICT"
        assert body["detail"] == "Cannot transition from Expired to Active"
        assert body["details"]["valid_next_states"] == ["Archived"]

    async def test_unknown_status_is_400(self, client, active_project):
        response = await client.patch(
            f"/api/v1/projects/{active_project.id}/status", json={"status": "Paused"}
        )

        assert response.status_code == 400
        assert "On Hold" in response.json()["details"]["valid_statuses"]

    async def test_missing_reason_is_400(self, client, active_project):
        response = await client.patch(
            f"/api/v1/projects/{active_project.id}/status", json={"status": "Cancelled"}
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"min_length": 3}

    async def test_transitions_endpoint(self, client, active_project):
        response = await client.get(f"/api/v1/projects/{active_project.id}/transitions")

        assert response.status_code == 200
        body = response.json()
        assert body["current_status"] == "Active"
        assert set(body["requires_reason"]) == {"On Hold", "Suspended", "Cancelled", "Expired"}
        assert "Completed" in body["valid_next_states"]

    async def test_can_accept(self, client, persist):
        project = await persist(ProjectFactory.with_hours("10", "10"))

        response = await client.get(f"/api/v1/projects/{project.id}/can-accept")

        assert response.status_code == 200
        assert response.json() == {
            "can_accept": True,
            "reason": None,
            "warning": "No hours available in project bucket",
            "available_hours": 0.0,
        }

    async def test_transition_audit_carries_request_metadata(
        self, client, active_project, db_session
    ):
        request_id = str(uuid4())

        response = await client.patch(
            f"/api/v1/projects/{active_project.id}/status",
            json={"status": "Completed"},
            headers={"X-Request-ID": request_id, "X-Forwarded-For": "203.0.113.9"},
        )
        assert response.status_code == 200

        result = await db_session.execute(
            select(AuditLog).where(AuditLog.entity_id == active_project.id)
        )
        (entry,) = result.scalars().all()
        assert entry.request_id == request_id
        assert entry.ip_address == "203.0.113.9"


class TestHoursApi:
    async def test_extend(self, client, active_project):
        response = await client.post(
            f"/api/v1/projects/{active_project.id}/extend",
            json={"additional_hours": 25.5, "reason": "Extra QA"},
        )

        assert response.status_code == 200
        assert response.json()["extension"] == {
            "additional_hours": 25.5,
            "new_total": 125.5,
            "available_hours": 125.5,
        }

    async def test_adjust_over_budget_is_409(self, client, persist):
        project = await persist(ProjectFactory.with_hours("100", "30"))

        response = await client.post(
            f"/api/v1/projects/{project.id}/adjust",
            json={"adjustment": 80, "reason": "Correction"},
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Insufficient hours in project bucket"

    async def test_consume_and_release(self, client, active_project):
        url = f"/api/v1/projects/{active_project.id}/hours"

        response = await client.patch(url, json={"hours_to_add": 30, "request_id": str(uuid7())})
        assert response.status_code == 200
        assert response.json()["project"]["used_hours"] == 30.0

        response = await client.patch(url, json={"hours_to_add": -50})
        assert response.status_code == 200
        assert response.json()["project"]["used_hours"] == 0.0

    async def test_consume_over_budget_is_400(self, client, persist):
        project = await persist(ProjectFactory.with_hours("10", "8"))

        response = await client.patch(
            f"/api/v1/projects/{project.id}/hours", json={"hours_to_add": 5}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_hour_transactions(self, client, active_project):
        await client.patch(
            f"/api/v1/projects/{active_project.id}/hours", json={"hours_to_add": 4}
        )

        response = await client.get(f"/api/v1/projects/{active_project.id}/hour-transactions")

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["transactions"][0]["kind"] == "consumption"
        assert body["transactions"][0]["balance_after"] == 4.0

    async def test_release_with_nothing_used(self, client, active_project):
        url = f"/api/v1/projects/{active_project.id}/hours"

        response = await client.patch(url, json={"hours_to_add": -3})

        assert response.status_code == 200, response.text
        project = response.json()["project"]
        assert project["used_hours"] == 0.0
        assert project["available_hours"] == 100.0

        response = await client.get(f"/api/v1/projects/{active_project.id}/hour-transactions")
        assert response.json()["pagination"]["total"] == 0

    @pytest.mark.parametrize(
        ("path", "payload"),
        [
            ("extend", {"additional_hours": 1e27, "reason": "Huge budget"}),
            ("adjust", {"adjustment": -1e27, "reason": "Huge correction"}),
            ("hours", {"hours_to_add": 1e27}),
            ("hours", {"hours_to_add": -100000000}),
        ],
    )
    async def test_oversized_hours_are_400(self, client, active_project, path, payload):
        method = client.patch if path == "hours" else client.post

        response = await method(f"/api/v1/projects/{active_project.id}/{path}", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"] == {"max_hours": "99999999.99"}

    async def test_extend_past_column_maximum_is_400(self, client, persist):
        project = await persist(ProjectFactory.with_hours("99999999.00", "0"))

        response = await client.post(
            f"/api/v1/projects/{project.id}/extend",
            json={"additional_hours": 5, "reason": "Over the top"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
