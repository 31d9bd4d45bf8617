import unittest

from repo_radar.utils.sort import sort_repositories


def _repo(full_name, stars=0, updated="2025-01-01T00:00:00Z", growth=None, issues=0):
    return {
        "full_name": full_name,
        "stargazers_count": stars,
        "updated_at": updated,
        "created_at": "2020-01-01T00:00:00Z",
        "open_issues_count": issues,
        "metrics": {"stars_growth_rate": growth} if growth is not None else None,
    }


class TestSortRepositories(unittest.TestCase):
    def setUp(self):
        self.repos = [
            _repo("b/beta", stars=10, updated="2025-03-01T00:00:00Z", growth=0.1, issues=5),
            _repo("a/alpha", stars=30, updated="2025-01-01T00:00:00Z", issues=1),
            _repo("C/gamma", stars=20, updated="2025-02-01T00:00:00Z", growth=0.5, issues=9),
        ]

    def names(self, repos):
        return [repo["full_name"] for repo in repos]

    def test_returns_new_list(self):
        result = sort_repositories(self.repos, "stars")

        self.assertIsNot(result, self.repos)
        self.assertEqual(self.names(self.repos), ["b/beta", "a/alpha", "C/gamma"])

    def test_stars_descending(self):
        self.assertEqual(
            self.names(sort_repositories(self.repos, "stars")),
            ["a/alpha", "C/gamma", "b/beta"],
        )

    def test_name_ascending_ignores_case(self):
        self.assertEqual(
            self.names(sort_repositories(self.repos, "name", "asc")),
            ["a/alpha", "b/beta", "C/gamma"],
        )

    def test_updated(self):
        self.assertEqual(
            self.names(sort_repositories(self.repos, "updated", "desc")),
            ["b/beta", "C/gamma", "a/alpha"],
        )

    def test_missing_metrics_count_as_zero_growth(self):
        self.assertEqual(
            self.names(sort_repositories(self.repos, "growth_rate", "asc")),
            ["a/alpha", "b/beta", "C/gamma"],
        )

    def test_issues(self):
        self.assertEqual(
            self.names(sort_repositories(self.repos, "issues")),
            ["C/gamma", "b/beta", "a/alpha"],
        )


if __name__ == "__main__":
    unittest.main()
