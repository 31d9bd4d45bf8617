import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

import httpx
from bson import ObjectId
from fastapi import HTTPException

from repo_radar.config import settings
from repo_radar.constants.error_messages import CONNECTION_FAILED, TOKEN_REFRESH_FAILED
from repo_radar.entities.oauth_identity import OAuthIdentity
from repo_radar.services.auth import create_access_token, decode_access_token
from repo_radar.services.github.exceptions import GithubReauthRequiredError
from repo_radar.services.github.github_token import get_valid_github_token
from repo_radar.services.github_oauth import build_authorize_url, refresh_github_token
from repo_radar.utils.datetime import utc_now


def _identity(**kwargs):
    data = {
        "_id": ObjectId(),
        "user_id": ObjectId(),
        "external_user_id": "583231",
        "access_token": "gho_current",
        "refresh_token": "ghr_refresh",
    }
    data.update(kwargs)
    return OAuthIdentity(**data)


class TestAccessToken(unittest.TestCase):
    def test_round_trip_subject(self):
        token = create_access_token("65f0c0ffee")

        self.assertEqual(decode_access_token(token), "65f0c0ffee")

    def test_expired_token(self):
        token = create_access_token("65f0c0ffee", expires_delta=timedelta(seconds=-5))

        self.assertIsNone(decode_access_token(token))

    def test_garbage_token(self):
        self.assertIsNone(decode_access_token("not-a-jwt"))


class TestGithubToken(unittest.TestCase):
    def test_missing_identity(self):
        with self.assertRaises(GithubReauthRequiredError):
            get_valid_github_token(MagicMock(), None)

    def test_non_expiring_token(self):
        identity = _identity(token_expires_at=None)

        self.assertEqual(get_valid_github_token(MagicMock(), identity), "gho_current")

    def test_unexpired_token(self):
        identity = _identity(token_expires_at=utc_now() + timedelta(hours=1))

        self.assertEqual(get_valid_github_token(MagicMock(), identity), "gho_current")

    def test_expired_without_refresh_token(self):
        identity = _identity(token_expires_at=utc_now() - timedelta(minutes=1), refresh_token=None)

        with self.assertRaises(GithubReauthRequiredError):
            get_valid_github_token(MagicMock(), identity)

    @patch("repo_radar.services.github.github_token.OAuthIdentityRepository")
    @patch("repo_radar.services.github.github_token.refresh_github_token")
    def test_expired_token_is_refreshed(self, mock_refresh, mock_repo_cls):
        new_expiry = utc_now() + timedelta(hours=8)
        mock_refresh.return_value = {"access_token": "gho_new", "token_expires_at": new_expiry}
        identity = _identity(token_expires_at=utc_now() - timedelta(minutes=1))

        token = get_valid_github_token(MagicMock(), identity)

        self.assertEqual(token, "gho_new")
        mock_refresh.assert_called_once_with("ghr_refresh")
        mock_repo_cls.return_value.update_tokens.assert_called_once_with(
            identity.id,
            access_token="gho_new",
            refresh_token="ghr_refresh",
            token_expires_at=new_expiry,
        )

    @patch("repo_radar.services.github.github_token.OAuthIdentityRepository")
    @patch("repo_radar.services.github.github_token.refresh_github_token")
    def test_refresh_failure_requires_reauth(self, mock_refresh, mock_repo_cls):
        mock_refresh.side_effect = HTTPException(status_code=401, detail="nope")
        identity = _identity(token_expires_at=utc_now() - timedelta(minutes=1))

        with self.assertRaises(GithubReauthRequiredError):
            get_valid_github_token(MagicMock(), identity)

        mock_repo_cls.return_value.update_tokens.assert_not_called()

    @patch("repo_radar.services.github.github_token.OAuthIdentityRepository")
    @patch("repo_radar.services.github.github_token.refresh_github_token")
    def test_refresh_outage_is_not_reauth(self, mock_refresh, mock_repo_cls):
        mock_refresh.side_effect = HTTPException(status_code=502, detail="down")
        identity = _identity(token_expires_at=utc_now() - timedelta(minutes=1))

        with self.assertRaises(HTTPException) as ctx:
            get_valid_github_token(MagicMock(), identity)

        self.assertEqual(ctx.exception.status_code, 502)


class TestGithubOAuth(unittest.TestCase):
    def setUp(self):
        for name, value in (("GITHUB_CLIENT_ID", "client-id"), ("GITHUB_CLIENT_SECRET", "client-secret")):
            patcher = patch.object(settings, name, value)
            patcher.start()
            self.addCleanup(patcher.stop)

    def test_authorize_url(self):
        url = build_authorize_url("state-123")

        self.assertTrue(url.startswith("https://github.com/login/oauth/authorize?"))
        self.assertIn("client_id=client-id", url)
        self.assertIn("state=state-123", url)

    @patch("repo_radar.services.github_oauth.httpx.Client")
    def test_refresh_error_in_ok_response(self, mock_client_cls):
        response = MagicMock(status_code=200, content=b"{}")
        response.json.return_value = {"error": "bad_refresh_token"}
        mock_client_cls.return_value.__enter__.return_value.post.return_value = response

        with self.assertRaises(HTTPException) as ctx:
            refresh_github_token("ghr_old")

        self.assertEqual(ctx.exception.status_code, 401)

    @patch("repo_radar.services.github_oauth.httpx.Client")
    def test_refresh_resolves_expiry(self, mock_client_cls):
        response = MagicMock(status_code=200, content=b"{}")
        response.json.return_value = {"access_token": "gho_new", "expires_in": 28800}
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.return_value = response

        token_data = refresh_github_token("ghr_old")

        self.assertEqual(token_data["access_token"], "gho_new")
        self.assertGreater(token_data["token_expires_at"], utc_now() + timedelta(hours=7))
        self.assertEqual(client.post.call_args.kwargs["data"]["grant_type"], "refresh_token")

    @patch("repo_radar.services.github_oauth.httpx.Client")
    def test_refresh_transport_error(self, mock_client_cls):
        client = mock_client_cls.return_value.__enter__.return_value
        client.post.side_effect = httpx.ConnectTimeout("timed out")

        with self.assertRaises(HTTPException) as ctx:
            refresh_github_token("ghr_old")

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(ctx.exception.detail, CONNECTION_FAILED)

    @patch("repo_radar.services.github_oauth.httpx.Client")
    def test_refresh_non_json_body(self, mock_client_cls):
        response = MagicMock(status_code=502, content=b"<html>Bad gateway</html>")
        response.json.side_effect = ValueError("Expecting value")
        mock_client_cls.return_value.__enter__.return_value.post.return_value = response

        with self.assertRaises(HTTPException) as ctx:
            refresh_github_token("ghr_old")

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.detail, TOKEN_REFRESH_FAILED)


if __name__ == "__main__":
    unittest.main()
