import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from bson import ObjectId

from repo_radar.config import settings
from repo_radar.entities.starred_cache import StarredCache
from repo_radar.services.explore_service import ExploreService
from repo_radar.utils.datetime import utc_now

USER_ID = str(ObjectId())


class TestExploreService(unittest.TestCase):
    def setUp(self):
        self.metrics = patch("repo_radar.services.explore_service.MetricsService").start().return_value
        patch("repo_radar.services.starred_service.MetricsService").start()
        self.cache_repo = patch("repo_radar.services.starred_service.StarredCacheRepository").start().return_value
        self.addCleanup(patch.stopall)

        # In-memory stand-in for the starred_cache collection
        store = {}

        def save(user_id, result, ttl):
            now = utc_now()
            store[user_id] = StarredCache(
                user_id=ObjectId(user_id), fetched_at=now, expires_at=now + ttl, **result
            )

        self.cache_repo.find_fresh.side_effect = lambda user_id: store.get(user_id)
        self.cache_repo.save.side_effect = save

        self.github = MagicMock()
        self.github.list_all_starred.return_value = {
            "repositories": [{"id": 2}],
            "total_fetched": 1,
            "total_starred": 1,
        }
        self.service = ExploreService(MagicMock(), self.github, USER_ID)

    def test_flags_starred_results(self):
        self.github.search_repositories.return_value = {
            "repositories": [{"id": 1}, {"id": 2}],
            "total_count": 2,
            "api_search_result_total": 2,
        }

        result = self.service.search("cli", sort="stars")

        self.github.search_repositories.assert_called_once_with("cli", page=1, per_page=30, sort="stars")
        self.assertEqual([r["is_starred"] for r in result["repositories"]], [False, True])
        self.metrics.attach_metrics.assert_called_once()
        self.assertEqual(result["pagination"]["text"], "Showing 1-2 of 2 results")

    def test_repeat_searches_reuse_starred_list(self):
        self.github.search_repositories.return_value = {
            "repositories": [{"id": 2}],
            "total_count": 1,
            "api_search_result_total": 1,
        }

        self.service.search("react")
        second = self.service.search("react", page=1)

        self.github.list_all_starred.assert_called_once()
        self.assertEqual(self.github.search_repositories.call_count, 2)
        self.assertTrue(second["repositories"][0]["is_starred"])
        ttl = self.cache_repo.save.call_args[0][2]
        self.assertEqual(ttl, timedelta(seconds=settings.STARRED_CACHE_TTL_SECONDS))

    def test_capped_search_total(self):
        self.github.search_repositories.return_value = {
            "repositories": [{"id": i} for i in range(30)],
            "total_count": 48213,
            "api_search_result_total": 1000,
        }

        result = self.service.search("react")

        pagination = result["pagination"]
        self.assertTrue(pagination["is_limited"])
        self.assertEqual(pagination["effective_total"], 1000)
        self.assertEqual(pagination["total_pages"], 34)
        self.assertEqual(pagination["text"], "Showing top 1000 results of 48,213 matches")
        self.assertEqual(result["total_count"], 48213)


if __name__ == "__main__":
    unittest.main()
