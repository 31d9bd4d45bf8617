import unittest
from unittest.mock import MagicMock, patch

from fastapi import HTTPException

from repo_radar.services.github.exceptions import GithubRateLimitError
from repo_radar.services.github.github_client import RepositoryFetchResult
from repo_radar.services.repository_service import RepositoryService

REPO_ID = 10270250


def _repo(stars=100):
    return {
        "id": REPO_ID,
        "name": "react",
        "full_name": "facebook/react",
        "owner": {"login": "facebook", "avatar_url": None},
        "stargazers_count": stars,
    }


class TestRepositoryService(unittest.TestCase):
    def setUp(self):
        cache_patcher = patch("repo_radar.services.repository_service.RepoCacheService")
        metrics_patcher = patch("repo_radar.services.repository_service.MetricsService")
        membership_patcher = patch("repo_radar.services.repository_service.RadarRepoRepository")
        self.cache = cache_patcher.start().return_value
        self.metrics = metrics_patcher.start().return_value
        self.membership_repo = membership_patcher.start().return_value
        self.addCleanup(patch.stopall)

        self.github = MagicMock()
        self.service = RepositoryService(MagicMock(), self.github)

    def test_fresh_cache_skips_github(self):
        self.cache.get.return_value = _repo()

        self.assertEqual(self.service.get_repository(REPO_ID), _repo())
        self.github.get_repository_by_id.assert_not_called()

    def test_expired_entry_refetched_with_etag(self):
        self.cache.get.return_value = None
        self.cache.get_etag.return_value = '"v1"'
        self.github.get_repository_by_id.return_value = RepositoryFetchResult(
            data=_repo(stars=120), etag='"v2"'
        )

        repo = self.service.get_repository(REPO_ID)

        self.github.get_repository_by_id.assert_called_once_with(REPO_ID, etag='"v1"')
        self.cache.set.assert_called_once_with(REPO_ID, _repo(stars=120), '"v2"')
        self.assertEqual(repo["stargazers_count"], 120)

    def test_not_modified_extends_entry(self):
        self.cache.get.return_value = None
        self.cache.get_etag.return_value = '"v1"'
        self.cache.get_stale.return_value = _repo()
        self.github.get_repository_by_id.return_value = RepositoryFetchResult(
            data=None, etag='"v1"', not_modified=True
        )

        repo = self.service.get_repository(REPO_ID)

        self.cache.refresh_timestamp.assert_called_once_with(REPO_ID)
        self.cache.set.assert_not_called()
        self.assertEqual(repo, _repo())

    def test_force_refresh_bypasses_fresh_cache(self):
        self.cache.get_etag.return_value = None
        self.github.get_repository_by_id.return_value = RepositoryFetchResult(data=_repo(), etag=None)

        self.service.get_repository(REPO_ID, force_refresh=True)

        self.cache.get.assert_not_called()
        self.github.get_repository_by_id.assert_called_once()

    def test_rate_limited_serves_stale(self):
        self.cache.get.return_value = None
        self.cache.get_stale.return_value = _repo(stars=90)
        self.github.get_repository_by_id.side_effect = GithubRateLimitError("limited")

        self.assertEqual(self.service.get_repository(REPO_ID)["stargazers_count"], 90)

    def test_rate_limited_without_cache(self):
        self.cache.get.return_value = None
        self.cache.get_stale.return_value = None
        self.github.get_repository_by_id.side_effect = GithubRateLimitError("limited")

        with self.assertRaises(GithubRateLimitError):
            self.service.get_repository(REPO_ID)

    def test_missing_repository(self):
        self.cache.get.return_value = None
        self.github.get_repository_by_id.return_value = RepositoryFetchResult(data=None, etag=None)

        self.assertIsNone(self.service.get_repository(REPO_ID))
        self.cache.set.assert_not_called()

    def test_get_repositories_skips_missing(self):
        self.cache.get.side_effect = [_repo(), None]
        self.github.get_repository_by_id.return_value = RepositoryFetchResult(data=None, etag=None)
        self.metrics.attach_metrics.side_effect = lambda repos: repos

        repos = self.service.get_repositories([REPO_ID, 1])

        self.assertEqual([r["id"] for r in repos], [REPO_ID])

    def test_detail_not_found(self):
        self.cache.get.return_value = None
        self.github.get_repository_by_id.return_value = RepositoryFetchResult(data=None, etag=None)

        with self.assertRaises(HTTPException) as ctx:
            self.service.get_repository_detail("user-1", REPO_ID)

        self.assertEqual(ctx.exception.status_code, 404)

    def test_detail(self):
        self.cache.get.return_value = _repo(stars=500)
        self.github.is_starred.return_value = True
        self.metrics.compute_repo_metrics.return_value = {"is_hot": True, "stars_gained": 120}
        self.membership_repo.radar_ids_containing.return_value = ["r1"]

        detail = self.service.get_repository_detail("user-1", REPO_ID)

        self.github.is_starred.assert_called_once_with("facebook", "react")
        self.metrics.compute_repo_metrics.assert_called_once_with(REPO_ID, 500)
        self.assertTrue(detail["repository"]["is_starred"])
        self.assertEqual(detail["radar_ids"], ["r1"])
        self.assertTrue(detail["is_hot"])


if __name__ == "__main__":
    unittest.main()
