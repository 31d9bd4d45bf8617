import unittest

from repo_radar.utils.pagination import (
    calculate_github_search_pagination,
    calculate_pagination,
    format_github_search_text,
    format_pagination_text,
)


class TestCalculatePagination(unittest.TestCase):
    def test_middle_page(self):
        info = calculate_pagination(95, 2, 30)

        self.assertEqual(info.total_pages, 4)
        self.assertTrue(info.has_next_page)
        self.assertTrue(info.has_previous_page)
        self.assertEqual(info.start_index, 30)
        self.assertEqual(info.end_index, 60)

    def test_last_page_is_partial(self):
        info = calculate_pagination(95, 4, 30)

        self.assertFalse(info.has_next_page)
        self.assertEqual(info.end_index, 95)

    def test_empty(self):
        info = calculate_pagination(0, 1, 30)

        self.assertEqual(info.total_pages, 0)
        self.assertFalse(info.has_next_page)
        self.assertFalse(info.has_previous_page)
        self.assertEqual(format_pagination_text(info, 0), "No results")


class TestGithubSearchPagination(unittest.TestCase):
    def test_results_beyond_1000_are_unreachable(self):
        info = calculate_github_search_pagination(25000, 1, 30)

        self.assertEqual(info.effective_total, 1000)
        self.assertTrue(info.is_limited)
        self.assertEqual(info.total_pages, 34)
        self.assertEqual(
            format_github_search_text(info, 30, 25000),
            "Showing top 1000 results of 25,000 matches",
        )

    def test_small_result_sets_are_not_limited(self):
        info = calculate_github_search_pagination(45, 2, 30)

        self.assertFalse(info.is_limited)
        self.assertEqual(format_github_search_text(info, 15, 45), "Showing 31-45 of 45 results")

    def test_no_results(self):
        info = calculate_github_search_pagination(0, 1, 30)
        self.assertEqual(format_github_search_text(info, 0, 0), "No results found")


class TestPaginationText(unittest.TestCase):
    def test_range_text(self):
        info = calculate_pagination(95, 1, 30)
        self.assertEqual(format_pagination_text(info, 30), "Showing 1-30 of 95 results")


if __name__ == "__main__":
    unittest.main()
