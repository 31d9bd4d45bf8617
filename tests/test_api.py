import unittest
from unittest.mock import MagicMock, patch

import redis
from bson import ObjectId
from fastapi import HTTPException
from fastapi.testclient import TestClient

from repo_radar.api.dependencies import get_github_client
from repo_radar.constants.error_messages import RADAR_LIMIT_REACHED, REAUTH_REQUIRED
from repo_radar.core.tracing import TracingContext
from repo_radar.database.mongo import get_db
from repo_radar.entities.user import User
from repo_radar.main import app
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.auth import create_access_token
from repo_radar.services.github.exceptions import GithubRateLimitError, GithubReauthRequiredError
from repo_radar.utils.datetime import utc_now

USER = {"_id": ObjectId(), "login": "octocat", "is_active": True}


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.db = MagicMock()
        self.github = MagicMock()
        app.dependency_overrides[get_db] = lambda: self.db
        app.dependency_overrides[get_current_user] = lambda: USER
        app.dependency_overrides[get_github_client] = lambda: self.github
        self.addCleanup(app.dependency_overrides.clear)
        # Not used as a context manager so the startup hook never touches MongoDB
        self.client = TestClient(app)


class TestSession(ApiTestCase):
    def test_missing_token(self):
        del app.dependency_overrides[get_current_user]

        response = self.client.get("/api/radars")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"detail": "Not authenticated", "code": "UNAUTHORIZED", "kind": "action_error"},
        )

    def test_signout_without_session(self):
        del app.dependency_overrides[get_current_user]

        response = self.client.post("/api/auth/signout")

        self.assertEqual(response.status_code, 204)

    def test_request_id_echoed(self):
        response = self.client.get("/api/health", headers={"X-Request-ID": "req-42"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-Request-ID"], "req-42")

    def test_request_id_generated(self):
        response = self.client.get("/api/health")

        self.assertTrue(response.headers["X-Request-ID"])

    @patch("repo_radar.middleware.auth.UserRepository")
    @patch("repo_radar.api.radars.RadarService")
    def test_user_id_reaches_services(self, mock_service_cls, mock_user_repo_cls):
        del app.dependency_overrides[get_current_user]
        user_id = ObjectId()
        mock_user_repo_cls.return_value.find_active_by_id.return_value = User(
            _id=user_id, github_user_id="583231", login="octocat"
        )
        seen = {}

        def list_radars(owner_id):
            seen.update(TracingContext.get())
            return [{"id": "r1", "name": "Frontend", "created_at": utc_now(), "updated_at": utc_now(), "repo_count": 0}]

        mock_service_cls.return_value.list_radars.side_effect = list_radars
        token = create_access_token(str(user_id))

        response = self.client.get(
            "/api/radars",
            headers={"Authorization": f"Bearer {token}", "X-Request-ID": "req-7"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(seen["user_id"], str(user_id))
        self.assertEqual(seen["correlation_id"], "req-7")

    @patch("repo_radar.api.health.redis.from_url")
    def test_broker_down(self, mock_from_url):
        mock_from_url.return_value.ping.side_effect = redis.ConnectionError("refused")

        body = self.client.get("/api/health/broker").json()

        self.assertEqual(body["status"], "unhealthy")
        mock_from_url.return_value.close.assert_called_once()

    def test_database_ping(self):
        body = self.client.get("/api/health/db").json()

        self.assertEqual(body["status"], "healthy")
        self.db.command.assert_called_once_with("ping")


class TestRadarRoutes(ApiTestCase):
    @patch("repo_radar.api.radars.RadarService")
    def test_radar_limit_conflict(self, mock_service_cls):
        mock_service_cls.return_value.create_radar.side_effect = HTTPException(
            status_code=409, detail=RADAR_LIMIT_REACHED
        )

        response = self.client.post("/api/radars", json={"name": "Sixth"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "CONFLICT")
        self.assertEqual(response.json()["detail"], RADAR_LIMIT_REACHED)

    @patch("repo_radar.api.radars.OnboardingService")
    @patch("repo_radar.api.radars.RadarService")
    def test_tour_radar_fallback(self, mock_service_cls, mock_onboarding_cls):
        mock_service_cls.return_value.list_radars.return_value = []
        mock_onboarding_cls.return_value.get_state.return_value = {"is_tour_active": True}

        response = self.client.get("/api/radars")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([r["id"] for r in response.json()], ["tour-demo-radar"])

    @patch("repo_radar.api.radars.OnboardingService")
    @patch("repo_radar.api.radars.RadarService")
    def test_radars_listed(self, mock_service_cls, mock_onboarding_cls):
        now = utc_now()
        mock_service_cls.return_value.list_radars.return_value = [
            {"id": "r1", "name": "Frontend", "created_at": now, "updated_at": now, "repo_count": 2}
        ]

        response = self.client.get("/api/radars")

        self.assertEqual(response.json()[0]["repo_count"], 2)
        mock_onboarding_cls.return_value.get_state.assert_not_called()

    def test_invalid_repo_id(self):
        response = self.client.post("/api/radars/r1/repos", json={"github_repo_id": 0})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "VALIDATION_ERROR")


class TestGithubErrors(ApiTestCase):
    @patch("repo_radar.api.repos.RepositoryService")
    def test_unexpected_error(self, mock_service_cls):
        mock_service_cls.return_value.get_repository.side_effect = RuntimeError("boom")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/repos/42", headers={"X-Request-ID": "req-500"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["X-Request-ID"], "req-500")
        self.assertEqual(response.json()["code"], "INTERNAL_ERROR")
        self.assertEqual(response.json()["kind"], "connection_error")

    @patch("repo_radar.api.stars.StarredService")
    def test_rate_limit_sets_retry_after(self, mock_service_cls):
        mock_service_cls.return_value.list_starred.side_effect = GithubRateLimitError(
            "GitHub API rate limit exceeded. Resets at soon", retry_after=30
        )

        response = self.client.get("/api/stars")

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.headers["Retry-After"], "30")
        self.assertEqual(response.json()["code"], "RATE_LIMITED")

    @patch("repo_radar.api.dependencies.get_user_github_client")
    def test_missing_github_token(self, mock_get_client):
        del app.dependency_overrides[get_github_client]
        mock_get_client.side_effect = GithubReauthRequiredError(REAUTH_REQUIRED)

        response = self.client.get("/api/stars/ids")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "GITHUB_REAUTH_REQUIRED")

    def test_explore_requires_query(self):
        response = self.client.get("/api/explore/search")

        self.assertEqual(response.status_code, 422)

    @patch("repo_radar.api.explore.ExploreService")
    def test_explore_passes_params(self, mock_service_cls):
        mock_service_cls.return_value.search.return_value = {
            "repositories": [],
            "total_count": 0,
            "pagination": {
                "total_pages": 0,
                "current_page": 1,
                "has_next_page": False,
                "has_previous_page": False,
                "start_index": 0,
                "end_index": 0,
                "total_items": 0,
                "text": "No results found",
            },
        }

        response = self.client.get("/api/explore/search", params={"q": "cli", "sort": "stars", "page": 2})

        self.assertEqual(response.status_code, 200)
        mock_service_cls.return_value.search.assert_called_once_with("cli", page=2, per_page=30, sort="stars")


if __name__ == "__main__":
    unittest.main()
