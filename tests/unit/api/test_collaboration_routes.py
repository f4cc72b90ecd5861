"""Route tests for the collaboration API.

The app runs with its real lifespan against an in-memory container
installed through ``set_container``; every record is created over HTTP.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.bootstrap.container import CollaborationContainer, reset_container, set_container
from src.infrastructure.observability.correlation import CORRELATION_ID_HEADER
from tests.helpers import FakeTimeAuthority

STATEMENT = "I have built two inventory tools for local shops."
NOTES = "Importer and scheduler, see README for setup."


@pytest.fixture
def client(
    container: CollaborationContainer, monkeypatch: pytest.MonkeyPatch
) -> Iterator[TestClient]:
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.delenv("COLLAB_STORAGE_BACKEND", raising=False)
    set_container(container)
    with TestClient(create_app(), raise_server_exceptions=False) as test_client:
        yield test_client
    reset_container()


def ok(response: Any, status: int = 200) -> dict[str, Any]:
    assert response.status_code == status, response.text
    return response.json()


def create_project(client: TestClient) -> str:
    body = {"partner_id": str(uuid4()), "title": "Inventory forecasting dashboard"}
    return ok(client.post("/v1/projects", json=body), 201)["id"]


def apply(client: TestClient, project_id: str, student_id: str) -> dict[str, Any]:
    body = {
        "project_id": project_id,
        "applicant_type": "INDIVIDUAL",
        "submitted_by": student_id,
        "statement": STATEMENT,
    }
    return ok(client.post("/v1/applications", json=body), 201)


def assign(client: TestClient, project_id: str, student_id: str) -> dict[str, Any]:
    application = apply(client, project_id, student_id)
    ok(client.post(f"/v1/applications/{application['id']}/shortlist"))
    ok(client.post(f"/v1/applications/{application['id']}/offer"))
    return ok(client.post(f"/v1/applications/{application['id']}/accept"))


def create_milestone(client: TestClient, project_id: str, amount: str = "2500") -> str:
    body = {"title": "Data ingestion MVP", "amount": amount, "scope": "Nightly CSV import"}
    return ok(client.post(f"/v1/projects/{project_id}/milestones", json=body), 201)["id"]


def set_status(client: TestClient, milestone_id: str, status: str) -> dict[str, Any]:
    return ok(client.post(f"/v1/milestones/{milestone_id}/status", json={"status": status}))


class TestHealth:
    def test_health_reports_backend(
        self, client: TestClient, project_version: str
    ) -> None:
        body = ok(client.get("/v1/health"))

        assert body == {
            "status": "healthy",
            "version": project_version,
            "storage_backend": "memory",
        }

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/v1/health", headers={CORRELATION_ID_HEADER: "req-42"})

        assert response.headers[CORRELATION_ID_HEADER] == "req-42"

    def test_correlation_id_generated_when_missing(self, client: TestClient) -> None:
        response = client.get("/v1/health")

        assert response.headers[CORRELATION_ID_HEADER]


class TestApplicationRoutes:
    def test_offer_and_accept(self, client: TestClient) -> None:
        project_id = create_project(client)
        student = str(uuid4())

        assigned = assign(client, project_id, student)

        assert assigned["status"] == "ASSIGNED"
        assert assigned["student_ids"] == [student]
        assert assigned["offer_expires_at"].endswith("Z")
        listed = ok(client.get("/v1/applications", params={"project_id": project_id}))
        assert [a["id"] for a in listed] == [assigned["id"]]

    def test_sweep_declines_expired_offers(
        self, client: TestClient, fake_time: FakeTimeAuthority
    ) -> None:
        project_id = create_project(client)
        application = apply(client, project_id, str(uuid4()))
        ok(client.post(f"/v1/applications/{application['id']}/shortlist"))
        ok(client.post(f"/v1/applications/{application['id']}/offer"))
        fake_time.advance(delta=timedelta(days=2))

        assert ok(client.post("/v1/applications/sweep-expired-offers")) == {"expired": 1}
        stored = ok(client.get(f"/v1/applications/{application['id']}"))
        assert stored["status"] == "DECLINED"

    def test_decline_after_deadline_is_gone(
        self, client: TestClient, fake_time: FakeTimeAuthority
    ) -> None:
        project_id = create_project(client)
        application = apply(client, project_id, str(uuid4()))
        ok(client.post(f"/v1/applications/{application['id']}/shortlist"))
        ok(client.post(f"/v1/applications/{application['id']}/offer"))
        fake_time.advance(delta=timedelta(days=2))

        response = client.post(f"/v1/applications/{application['id']}/decline")

        assert response.status_code == 410
        assert response.json()["kind"] == "OFFER_EXPIRED"

    def test_score_out_of_range_is_request_validation(self, client: TestClient) -> None:
        project_id = create_project(client)
        application = apply(client, project_id, str(uuid4()))

        response = client.post(
            f"/v1/applications/{application['id']}/score", json={"score": 101}
        )

        assert response.status_code == 422

    def test_offer_deadline_without_offset_is_request_validation(
        self, client: TestClient
    ) -> None:
        project_id = create_project(client)
        application = apply(client, project_id, str(uuid4()))
        ok(client.post(f"/v1/applications/{application['id']}/shortlist"))

        response = client.post(
            f"/v1/applications/{application['id']}/offer",
            json={"expires_at": "2026-01-05T00:00:00"},
        )

        assert response.status_code == 422
        stored = ok(client.get(f"/v1/applications/{application['id']}"))
        assert stored["status"] == "SHORTLISTED"

    def test_offer_deadline_with_offset_is_stored_in_utc(self, client: TestClient) -> None:
        project_id = create_project(client)
        application = apply(client, project_id, str(uuid4()))
        ok(client.post(f"/v1/applications/{application['id']}/shortlist"))

        offered = ok(
            client.post(
                f"/v1/applications/{application['id']}/offer",
                json={"expires_at": "2026-01-05T02:00:00+02:00"},
            )
        )

        assert offered["offer_expires_at"] == "2026-01-05T00:00:00Z"
        accepted = ok(client.post(f"/v1/applications/{application['id']}/accept"))
        assert accepted["status"] == "ASSIGNED"


class TestCapacityRoutes:
    def test_reserve_until_full(self, client: TestClient) -> None:
        supervisor = uuid4()
        base = f"/v1/supervisors/{supervisor}/capacity"

        ok(client.put(base, json={"max_active": 1}))
        ok(client.post(f"{base}/reserve"))
        response = client.post(f"{base}/reserve")

        assert response.status_code == 409
        assert response.json()["kind"] == "CAPACITY_EXCEEDED"
        assert ok(client.post(f"{base}/release"))["current"] == 0


class TestSupervisorRequestRoutes:
    def test_approval_binds_supervisor(self, client: TestClient) -> None:
        project_id = create_project(client)
        supervisor = str(uuid4())
        request = ok(
            client.post(
                "/v1/supervisor-requests",
                json={
                    "project_id": project_id,
                    "supervisor_id": supervisor,
                    "requested_by": str(uuid4()),
                },
            ),
            201,
        )

        approved = ok(client.post(f"/v1/supervisor-requests/{request['id']}/approve"))

        assert approved["status"] == "APPROVED"
        assert ok(client.get(f"/v1/projects/{project_id}"))["supervisor_id"] == supervisor
        capacity = ok(client.get(f"/v1/supervisors/{supervisor}/capacity"))
        assert capacity["current"] == 1


class TestMilestoneRoutes:
    def test_full_lifecycle_creates_portfolio_entry(self, client: TestClient) -> None:
        project_id = create_project(client)
        student = str(uuid4())
        assign(client, project_id, student)
        milestone_id = create_milestone(client, project_id)

        set_status(client, milestone_id, "FINALIZED")
        ok(client.post(f"/v1/milestones/{milestone_id}/fund"))
        set_status(client, milestone_id, "IN_PROGRESS")
        ok(
            client.post(
                f"/v1/milestones/{milestone_id}/submissions",
                json={
                    "student_id": student,
                    "files": [{"name": "mvp.zip", "url": "https://files.example.org/mvp.zip"}],
                    "notes": NOTES,
                },
            ),
            201,
        )
        set_status(client, milestone_id, "SUPERVISOR_REVIEW")
        ok(client.post(f"/v1/milestones/{milestone_id}/approve-for-partner"))
        released = ok(client.post(f"/v1/milestones/{milestone_id}/release"))

        assert released["status"] == "RELEASED"
        assert released["escrow_status"] == "RELEASED"
        assert released["supervisor_gate"] is True

        # Foreground retry and background creation together leave one entry
        retry = ok(client.post(f"/v1/milestones/{milestone_id}/portfolio/retry"))
        assert retry["created"] in (0, 1)
        [entry] = ok(client.get(f"/v1/students/{student}/portfolio"))
        assert entry["milestone_id"] == milestone_id
        assert entry["complexity"] == "MEDIUM"

    def test_due_date_without_offset_is_request_validation(
        self, client: TestClient
    ) -> None:
        project_id = create_project(client)
        assign(client, project_id, str(uuid4()))

        response = client.post(
            f"/v1/projects/{project_id}/milestones",
            json={
                "title": "Data ingestion MVP",
                "amount": "2500",
                "due_date": "2026-06-01T00:00:00",
            },
        )

        assert response.status_code == 422
        assert ok(client.get(f"/v1/projects/{project_id}/milestones")) == []

    def test_due_date_with_offset_is_stored_in_utc(self, client: TestClient) -> None:
        project_id = create_project(client)
        assign(client, project_id, str(uuid4()))

        created = ok(
            client.post(
                f"/v1/projects/{project_id}/milestones",
                json={
                    "title": "Data ingestion MVP",
                    "amount": "2500",
                    "due_date": "2026-06-01T01:00:00+01:00",
                },
            ),
            201,
        )

        assert created["due_date"] == "2026-06-01T00:00:00Z"

    def test_start_without_funding(self, client: TestClient) -> None:
        project_id = create_project(client)
        assign(client, project_id, str(uuid4()))
        milestone_id = create_milestone(client, project_id)
        set_status(client, milestone_id, "FINALIZED")

        response = client.post(
            f"/v1/milestones/{milestone_id}/status", json={"status": "IN_PROGRESS"}
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "ESCROW_NOT_FUNDED"

    def test_delete_proposed_milestone(self, client: TestClient) -> None:
        project_id = create_project(client)
        assign(client, project_id, str(uuid4()))
        milestone_id = create_milestone(client, project_id)

        assert client.delete(f"/v1/milestones/{milestone_id}").status_code == 204
        assert client.get(f"/v1/milestones/{milestone_id}").status_code == 404

    def test_delete_funded_milestone_refused(self, client: TestClient) -> None:
        project_id = create_project(client)
        assign(client, project_id, str(uuid4()))
        milestone_id = create_milestone(client, project_id)
        set_status(client, milestone_id, "FINALIZED")
        ok(client.post(f"/v1/milestones/{milestone_id}/fund"))

        response = client.delete(f"/v1/milestones/{milestone_id}")

        assert response.status_code == 400
        assert response.json()["kind"] == "IRREVERSIBLE_STATE"


class TestDisputeRoutes:
    def test_dispute_blocks_milestone_until_resolved(self, client: TestClient) -> None:
        project_id = create_project(client)
        student = str(uuid4())
        assign(client, project_id, student)
        milestone_id = create_milestone(client, project_id)
        set_status(client, milestone_id, "FINALIZED")
        ok(client.post(f"/v1/milestones/{milestone_id}/fund"))
        set_status(client, milestone_id, "IN_PROGRESS")

        dispute = ok(
            client.post(
                "/v1/disputes",
                json={
                    "subject_type": "MILESTONE",
                    "subject_id": milestone_id,
                    "reason": "Scope creep",
                    "description": "Partner keeps adding features after finalization.",
                    "raised_by": str(uuid4()),
                },
            ),
            201,
        )
        delivery = {
            "student_id": student,
            "files": [{"name": "mvp.zip", "url": "https://files.example.org/mvp.zip"}],
            "notes": NOTES,
        }
        blocked = client.post(f"/v1/milestones/{milestone_id}/submissions", json=delivery)
        assert blocked.status_code == 409
        assert blocked.json()["kind"] == "SUBJECT_UNDER_DISPUTE"

        escalated = ok(client.post(f"/v1/disputes/{dispute['id']}/escalate"))
        assert escalated["level"] == "UNIVERSITY_ADMIN"
        ok(
            client.post(
                f"/v1/disputes/{dispute['id']}/resolve",
                json={"resolution": "Extra features moved to a new milestone"},
            )
        )

        ok(client.post(f"/v1/milestones/{milestone_id}/submissions", json=delivery), 201)
        assert ok(client.get(f"/v1/milestones/{milestone_id}"))["status"] == "SUBMITTED"
