import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from repo_radar.config import settings
from repo_radar.entities.repo_cache import RepoCache
from repo_radar.services.repo_cache_service import RepoCacheService
from repo_radar.utils.datetime import utc_now


def _entry(**kwargs):
    data = {
        "github_repo_id": 42,
        "full_name": "octo/cli",
        "owner": "octo",
        "name": "cli",
        "cached_data": {"id": 42, "full_name": "octo/cli"},
        "etag": '"abc"',
        "fetched_at": utc_now(),
        "expires_at": utc_now() + timedelta(hours=1),
    }
    data.update(kwargs)
    return RepoCache(**data)


class TestRepoCacheService(unittest.TestCase):
    def setUp(self):
        patcher = patch("repo_radar.services.repo_cache_service.RepoCacheRepository")
        self.cache_repo = patcher.start().return_value
        self.addCleanup(patcher.stop)
        self.service = RepoCacheService(MagicMock())

    def test_get_returns_fresh_payload(self):
        self.cache_repo.find_fresh.return_value = _entry()

        self.assertEqual(self.service.get(42), {"id": 42, "full_name": "octo/cli"})

    def test_get_expired(self):
        self.cache_repo.find_fresh.return_value = None

        self.assertIsNone(self.service.get(42))

    def test_etag_ignores_expiry(self):
        self.cache_repo.find_entry.return_value = _entry(expires_at=utc_now() - timedelta(hours=3))

        self.assertEqual(self.service.get_etag(42), '"abc"')
        self.assertEqual(self.service.get_stale(42)["id"], 42)

    def test_missing_entry(self):
        self.cache_repo.find_entry.return_value = None

        self.assertIsNone(self.service.get_etag(42))
        self.assertIsNone(self.service.get_stale(42))

    def test_is_valid(self):
        self.cache_repo.count_fresh.return_value = 1
        self.assertTrue(self.service.is_valid(42))

        self.cache_repo.count_fresh.return_value = 0
        self.assertFalse(self.service.is_valid(42))

    def test_set_stores_summary_columns(self):
        data = {
            "id": 42,
            "name": "cli",
            "full_name": "octo/cli",
            "owner": {"login": "octo"},
            "stargazers_count": 7,
            "language": "Go",
            "private": False,
        }

        self.service.set(42, data, '"v2"')

        github_repo_id, summary, cached, etag, ttl = self.cache_repo.upsert.call_args[0]
        self.assertEqual(github_repo_id, 42)
        self.assertEqual(
            summary,
            {
                "full_name": "octo/cli",
                "owner": "octo",
                "name": "cli",
                "stargazers_count": 7,
                "language": "Go",
                "is_private": False,
            },
        )
        self.assertIs(cached, data)
        self.assertEqual(etag, '"v2"')
        self.assertEqual(ttl, timedelta(hours=settings.REPO_CACHE_TTL_HOURS))

    def test_cleanup_uses_retention_window(self):
        self.cache_repo.delete_expired_before.return_value = 3
        now = utc_now()

        self.assertEqual(self.service.cleanup_expired(now=now), 3)

        self.cache_repo.delete_expired_before.assert_called_once_with(
            now - timedelta(days=settings.REPO_CACHE_CLEANUP_AFTER_DAYS)
        )


if __name__ == "__main__":
    unittest.main()
