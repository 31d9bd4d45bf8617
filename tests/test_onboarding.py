import unittest
from unittest.mock import MagicMock, patch

from bson import ObjectId
from fastapi import HTTPException

from repo_radar.entities.user_preferences import UserPreferences
from repo_radar.services.onboarding import (
    OnboardingService,
    configure_steps,
    get_current_page,
    get_tour_steps,
    steps_for_page,
)

USER_ID = str(ObjectId())


class TestTourSteps(unittest.TestCase):
    def test_step_order(self):
        self.assertEqual(
            [step.id for step in get_tour_steps()],
            [
                "welcome",
                "my-stars-heading",
                "explore-link",
                "sidebar-radars",
                "radar-intro",
                "radar-repos",
                "click-repo",
                "repo-header",
                "repo-detail-radar-icon",
                "releases",
                "help-button",
            ],
        )

    def test_text_depends_on_starred_repos_and_tour_radar(self):
        with_stars = {s.id: s for s in get_tour_steps(True, True)}
        without_stars = {s.id: s for s in get_tour_steps(False, False)}

        self.assertIn("Your starred GitHub repositories", with_stars["my-stars-heading"].text)
        self.assertIn("Star repositories on GitHub", without_stars["my-stars-heading"].text)
        self.assertIn("React Ecosystem", with_stars["sidebar-radars"].text)
        self.assertNotIn("React Ecosystem", without_stars["sidebar-radars"].text)

    def test_current_page(self):
        self.assertEqual(get_current_page("/stars"), "stars")
        self.assertEqual(get_current_page("/radar/abc"), "radar")
        self.assertEqual(get_current_page("/repo/123"), "repo-detail")
        self.assertIsNone(get_current_page("/explore"))
        self.assertIsNone(get_current_page("/stars/extra"))

    def test_steps_for_page(self):
        radar_steps = steps_for_page(get_tour_steps(), "radar")
        self.assertEqual([s.id for s in radar_steps], ["radar-intro", "radar-repos", "click-repo"])


class TestConfigureSteps(unittest.TestCase):
    def setUp(self):
        self.steps = {step["id"]: step for step in configure_steps(get_tour_steps())}

    def test_first_step_has_no_back(self):
        actions = [b["action"] for b in self.steps["welcome"]["buttons"]]
        self.assertEqual(actions, ["next"])

    def test_back_goes_to_previous_index(self):
        back = self.steps["explore-link"]["buttons"][0]
        self.assertEqual(back["action"], "back")
        self.assertEqual(back["step_index"], 1)
        self.assertTrue(back["secondary"])

    def test_click_to_advance_steps_have_no_next(self):
        actions = [b["action"] for b in self.steps["sidebar-radars"]["buttons"]]
        self.assertEqual(actions, ["back"])

    def test_cross_page_back(self):
        back = self.steps["repo-header"]["buttons"][0]
        self.assertEqual(back["action"], "back_to")
        self.assertEqual(back["back_to"], {"step_id": "click-repo", "path": "/radar/tour-demo-radar"})

        back = self.steps["radar-intro"]["buttons"][0]
        self.assertEqual(back["back_to"], {"step_id": "sidebar-radars", "path": "/stars"})

    def test_last_step_finishes(self):
        last = self.steps["help-button"]["buttons"][-1]
        self.assertEqual(last["text"], "Finish")
        self.assertEqual(last["action"], "complete")


class TestOnboardingService(unittest.TestCase):
    def setUp(self):
        prefs_patcher = patch("repo_radar.services.onboarding.UserPreferencesRepository")
        radar_patcher = patch("repo_radar.services.onboarding.RadarRepository")
        self.prefs_repo = prefs_patcher.start().return_value
        self.radar_repo = radar_patcher.start().return_value
        self.addCleanup(patch.stopall)
        self.radar_repo.count_by_user.return_value = 0
        self.service = OnboardingService(MagicMock())

    def _prefs(self, **kwargs):
        prefs = UserPreferences(user_id=ObjectId(USER_ID), **kwargs)
        self.prefs_repo.get_or_create.return_value = prefs
        return prefs

    def test_start_tour_resets_completion(self):
        self._prefs(has_completed_tour=True)

        self.service.start_tour(USER_ID)

        self.prefs_repo.update_for_user.assert_called_once_with(
            USER_ID,
            {"has_completed_tour": False, "is_tour_active": True, "current_tour_step_id": "welcome"},
        )

    def test_unknown_step(self):
        with self.assertRaises(HTTPException) as ctx:
            self.service.set_current_step(USER_ID, "nope")

        self.assertEqual(ctx.exception.status_code, 400)
        self.prefs_repo.update_for_user.assert_not_called()

    def test_complete_tour(self):
        self._prefs(is_tour_active=True)

        self.service.complete_tour(USER_ID)

        updates = self.prefs_repo.update_for_user.call_args[0][1]
        self.assertTrue(updates["has_completed_tour"])
        self.assertFalse(updates["is_tour_active"])

    def test_complete_tour_in_demo_mode_is_not_persisted(self):
        self._prefs(is_tour_active=True, demo_mode=True)

        self.service.complete_tour(USER_ID)

        updates = self.prefs_repo.update_for_user.call_args[0][1]
        self.assertNotIn("has_completed_tour", updates)

    def test_resume_keeps_stored_step_on_its_page(self):
        self._prefs(is_tour_active=True, current_tour_step_id="radar-repos")

        result = self.service.resume_step_for_page(USER_ID, "/radar/tour-demo-radar")

        self.assertEqual(result, {"page": "radar", "step_id": "radar-repos", "step_index": 1})

    def test_resume_starts_page_at_first_step(self):
        self._prefs(is_tour_active=True, current_tour_step_id="click-repo")

        result = self.service.resume_step_for_page(USER_ID, "/repo/10270250")

        self.assertEqual(result, {"page": "repo-detail", "step_id": "repo-header", "step_index": 0})

    def test_resume_outside_tour_pages(self):
        result = self.service.resume_step_for_page(USER_ID, "/explore")

        self.assertIsNone(result["step_id"])

    def test_steps_for_pathname_are_configured_per_page(self):
        result = self.service.get_steps(USER_ID, pathname="/repo/1")

        self.assertEqual(result["page"], "repo-detail")
        ids = [step["id"] for step in result["steps"]]
        self.assertEqual(ids[0], "repo-header")
        self.assertEqual(result["steps"][0]["buttons"][0]["action"], "back_to")


if __name__ == "__main__":
    unittest.main()
