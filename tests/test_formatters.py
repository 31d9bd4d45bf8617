import unittest
from datetime import datetime, timedelta, timezone

from repo_radar.utils.formatters import (
    format_compact_number,
    format_growth_rate,
    format_relative_time,
    format_short_date,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestFormatRelativeTime(unittest.TestCase):
    def ago(self, **kwargs):
        return format_relative_time((NOW - timedelta(**kwargs)).isoformat(), now=NOW)

    def test_recent_is_just_now(self):
        self.assertEqual(self.ago(seconds=30), "just now")

    def test_singular_and_plural_units(self):
        self.assertEqual(self.ago(minutes=1), "1 minute ago")
        self.assertEqual(self.ago(minutes=5), "5 minutes ago")
        self.assertEqual(self.ago(hours=3), "3 hours ago")
        self.assertEqual(self.ago(days=1), "1 day ago")
        self.assertEqual(self.ago(days=45), "1 month ago")
        self.assertEqual(self.ago(days=800), "2 years ago")

    def test_accepts_github_timestamps(self):
        self.assertEqual(format_relative_time("2025-06-01T10:00:00Z", now=NOW), "2 hours ago")

    def test_invalid_and_future_dates(self):
        self.assertEqual(format_relative_time("not a date", now=NOW), "Invalid date")
        self.assertEqual(format_relative_time(NOW + timedelta(days=1), now=NOW), "Invalid date")


class TestFormatCompactNumber(unittest.TestCase):
    def test_small_numbers_unchanged(self):
        self.assertEqual(format_compact_number(500), "500")

    def test_thousands_and_millions(self):
        self.assertEqual(format_compact_number(1234), "1.2k")
        self.assertEqual(format_compact_number(2000), "2k")
        self.assertEqual(format_compact_number(1234567), "1.2M")
        self.assertEqual(format_compact_number(5000000), "5M")


class TestFormatGrowthRate(unittest.TestCase):
    def test_signed_percentages(self):
        self.assertEqual(format_growth_rate(0.25), "+25%")
        self.assertEqual(format_growth_rate(-0.1), "-10%")
        self.assertEqual(format_growth_rate(0), "0%")
        self.assertEqual(format_growth_rate(0.256, decimals=1), "+25.6%")

    def test_without_baseline(self):
        self.assertEqual(format_growth_rate(None, absolute_gain=50), "+50 stars")
        self.assertEqual(format_growth_rate(None, absolute_gain=-3), "-3 stars")
        self.assertEqual(format_growth_rate(None), "New")


class TestFormatShortDate(unittest.TestCase):
    def test_short_date(self):
        self.assertEqual(format_short_date("2025-01-15T12:00:00Z"), "Jan 15, 2025")

    def test_invalid(self):
        self.assertEqual(format_short_date("garbage"), "Invalid date")


if __name__ == "__main__":
    unittest.main()
