import unittest
import sys
import os
from fastapi.testclient import TestClient
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from client import FitTrackClient
from rest_api import FitTrackAPI


class ClientTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_client.db"
        self.yaml_path = "test_client.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.api = FitTrackAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.api.settings.set_int("bcrypt_rounds", 4)
        self.client = FitTrackClient(
            base_url="http://testserver", session=TestClient(self.api.app)
        )

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_workout_round_trip(self) -> None:
        user = self.client.sign_up("client@example.com", "secret-pass")
        self.assertEqual(user["email"], "client@example.com")
        wid = self.client.create_workout("Row", duration_minutes="20", calories_burned="180")
        self.assertIsInstance(wid, str)
        workouts = self.client.list_workouts()
        self.assertEqual([w["id"] for w in workouts], [wid])
        summary = self.client.dashboard(window=3)
        self.assertEqual(summary["stats"]["total_calories"], 180)
        self.assertEqual(len(summary["chart"]), 1)

    def test_goals_and_exercises(self) -> None:
        self.client.sign_up("client@example.com", "secret-pass")
        gid = self.client.create_goal("Swim 10 km", 10, "km", current_value="4")
        overview = self.client.goals()
        self.assertEqual(overview["goals"][0]["id"], gid)
        self.assertEqual(overview["goals"][0]["progress"]["percent"], 40)
        result = self.client.exercises(category="flexibility", difficulty="beginner")
        self.assertTrue(result["count"] > 0)

    def test_sign_out_clears_token(self) -> None:
        self.client.sign_up("client@example.com", "secret-pass")
        self.client.sign_out()
        self.assertIsNone(self.client.token)
        self.client.sign_in("client@example.com", "secret-pass")
        self.assertEqual(self.client.list_workouts(limit=5), [])


if __name__ == '__main__':
    unittest.main()
