"""
HTTP-level tests: routing under /api, authentication, and the response
envelope for successes and every kind of failure.

Service functions are patched; the database dependency yields a mock session.
"""

from unittest.mock import AsyncMock, patch

import jwt
import pytest
from fastapi.testclient import TestClient

from admissions.core.config import settings
from admissions.core.database import get_db
from admissions.core.security import create_access_token
from admissions.main import app
from admissions.modules.applicants.schemas import ApplicantResponse, ApplicantStats
from admissions.modules.applicants.service import ApplicantNotFoundError
from admissions.modules.auth.service import InvalidCredentialsError


@pytest.fixture
def client(mock_db):
    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the lifespan (database, Redis, scheduler) is not started
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def stats():
    return ApplicantStats(
        total_applicants=1, admitted=1, under_review=0, rejected=0, offers_issued=0,
        fees_paid=0, pgp_applicants=1, phd_applicants=0, ephd_applicants=0, emba_applicants=0,
    )


@pytest.fixture
def auth_headers():
    token = create_access_token(subject="1", additional_claims={"email": "office@example.edu"})
    return {"Authorization": f"Bearer {token}"}


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/dashboard/overview")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Access token required",
            "error": "MISSING_TOKEN",
        }

    def test_invalid_token(self, client):
        response = client.get("/api/applicants", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_refresh_token_rejected(self, client):
        token = jwt.encode(
            {"sub": "1", "type": "refresh"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
        )
        response = client.get("/api/schedule", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_TOKEN_TYPE"


class TestEnvelope:
    def test_success_omits_empty_envelope_keys(self, client, auth_headers, stats):
        with patch("admissions.modules.applicants.router.service.get_stats", AsyncMock(return_value=stats)):
            response = client.get("/api/applicants/stats/summary", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"success", "data"}
        assert body["success"] is True
        assert body["data"]["total_applicants"] == 1

    def test_nulls_inside_data_are_kept(self, client, auth_headers):
        applicant = ApplicantResponse(
            id=1, applicant_id="APP001", name="A", application_status="under_review",
            offer_issued=False, fee_paid=False,
        )
        with patch("admissions.modules.applicants.router.service.get_applicant", AsyncMock(return_value=applicant)):
            response = client.get("/api/applicants/APP001", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["email"] is None

    def test_not_found(self, client, auth_headers):
        with patch(
            "admissions.modules.applicants.router.service.get_applicant",
            AsyncMock(side_effect=ApplicantNotFoundError("APP999")),
        ):
            response = client.get("/api/applicants/APP999", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Applicant not found",
            "error": "APPLICANT_NOT_FOUND",
        }

    def test_unknown_program(self, client, auth_headers):
        response = client.get("/api/dashboard/programs/mba/report", headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "UNKNOWN_PROGRAM"

    def test_internal_error_carries_raw_text(self, client, auth_headers):
        with patch(
            "admissions.modules.dashboard.router.service.get_overview",
            AsyncMock(side_effect=RuntimeError("connection refused")),
        ):
            response = client.get("/api/dashboard/overview", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Error fetching dashboard data",
            "error": "connection refused",
        }

    def test_validation_error_is_400(self, client):
        response = client.post("/api/login", json={"email": "not-an-email"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Invalid request"
        assert "email" in body["error"]

    def test_invalid_calendar_month(self, client, auth_headers):
        response = client.get("/api/schedule/calendar/2025/13", headers=auth_headers)

        assert response.status_code == 400


class TestRoutes:
    def test_program_summaries(self, client, auth_headers):
        report = {"phase1": {"total_applications": 0}}
        with patch(
            "admissions.modules.dashboard.router.service.build_program_report",
            AsyncMock(return_value=report),
        ) as mock_build:
            for slug in ("pgp", "phd", "ephd", "emba"):
                response = client.get(f"/api/dashboard/{slug}-summary", headers=auth_headers)
                assert response.status_code == 200
                assert response.json()["data"] == report

        assert mock_build.await_count == 4

    def test_stats_route_not_shadowed_by_identifier(self, client, auth_headers, stats):
        with (
            patch("admissions.modules.applicants.router.service.get_stats", AsyncMock(return_value=stats)) as mock_stats,
            patch("admissions.modules.applicants.router.service.get_applicant", AsyncMock()) as mock_get,
        ):
            client.get("/api/applicants/stats/summary", headers=auth_headers)

        mock_stats.assert_awaited_once()
        mock_get.assert_not_awaited()

    def test_offer_update_message(self, client, auth_headers):
        with patch("admissions.modules.applicants.router.service.set_offer_issued", AsyncMock()):
            response = client.patch(
                "/api/applicants/APP001/offer", json={"offer_issued": True}, headers=auth_headers
            )

        assert response.json() == {"success": True, "message": "Offer status updated successfully"}

    def test_create_event_is_201(self, client, auth_headers):
        created = {
            "id": 1, "event_title": "Briefing", "date": "2025-03-01", "time": "10:00",
            "location": "", "event_type": "meeting", "program_id": "all", "notes": "",
        }
        with patch("admissions.modules.schedule.router.service.create_event", AsyncMock(return_value=created)):
            response = client.post(
                "/api/schedule",
                json={"event_title": "Briefing", "date": "2025-03-01", "time": "10:00"},
                headers=auth_headers,
            )

        assert response.status_code == 201
        assert response.json()["message"] == "Event created successfully"
        assert response.json()["data"]["id"] == 1

    def test_create_event_requires_title(self, client, auth_headers):
        response = client.post(
            "/api/schedule", json={"date": "2025-03-01", "time": "10:00"}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestAuthRoutes:
    def test_login_rate_limited(self, client):
        with patch(
            "admissions.modules.auth.router.service.login",
            AsyncMock(side_effect=InvalidCredentialsError()),
        ):
            statuses = [
                client.post("/api/login", json={"email": "a@example.edu", "password": "x"}).status_code
                for _ in range(11)
            ]

        assert statuses[:10] == [401] * 10
        assert statuses[10] == 429

    def test_forgot_password_rate_limited_per_email(self, client):
        with patch("admissions.modules.auth.router.service.request_password_reset", AsyncMock()):
            statuses = [
                client.post("/api/forgot-password", json={"email": "a@example.edu"}).status_code
                for _ in range(6)
            ]
            other = client.post("/api/forgot-password", json={"email": "b@example.edu"})

        assert statuses[:5] == [200] * 5
        assert statuses[5] == 429
        assert other.status_code == 200
        assert other.json()["message"] == "OTP sent to your email"

    def test_reset_password_accepts_camel_case(self, client):
        with patch("admissions.modules.auth.router.service.reset_password", AsyncMock()) as mock_reset:
            response = client.post(
                "/api/reset-password",
                json={"email": "a@example.edu", "otp": "123456", "newPassword": "new-secret"},
            )

        assert response.status_code == 200
        assert response.json()["message"] == "Password reset successful"
        assert mock_reset.await_args.args[1:] == ("a@example.edu", "123456", "new-secret")

    def test_reset_password_rejects_malformed_otp(self, client):
        response = client.post(
            "/api/reset-password",
            json={"email": "a@example.edu", "otp": "12ab56", "newPassword": "new-secret"},
        )

        assert response.status_code == 400


class TestDebugEndpoints:
    def test_hidden_outside_development(self, client):
        with patch.object(settings, "python_env", "production"):
            response = client.get("/debug/jobs")

        assert response.status_code == 404

    def test_unknown_job_action(self, client):
        with patch.object(settings, "python_env", "development"):
            response = client.post("/debug/jobs/auth_purge_expired_credentials/restart")

        assert response.status_code == 400
        assert response.json()["message"] == "Unknown action: restart"
