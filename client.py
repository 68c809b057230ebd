import requests
from typing import Optional


class FitTrackClient:
    """Simple REST client for the FitTrack API."""

    def __init__(self, base_url: str = "http://localhost:8000", session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = session or requests.Session()
        self.token: Optional[str] = None

    def _headers(self) -> dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _get(self, path: str, **params):
        resp = self.http.get(f"{self.base_url}{path}", params=params, headers=self._headers())
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, **kwargs):
        resp = self.http.post(f"{self.base_url}{path}", headers=self._headers(), **kwargs)
        resp.raise_for_status()
        return resp.json()

    def sign_up(self, email: str, password: str) -> dict:
        data = self._post("/auth/signup", json={"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    def sign_in(self, email: str, password: str) -> dict:
        data = self._post("/auth/signin", json={"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    def sign_out(self) -> None:
        self._post("/auth/signout")
        self.token = None

    def create_workout(self, title: str, **params: str) -> str:
        return self._post("/workouts", params={"title": title, **params})["id"]

    def list_workouts(self, limit: Optional[int] = None):
        params = {} if limit is None else {"limit": limit}
        return self._get("/workouts", **params)

    def dashboard(self, window: Optional[int] = None) -> dict:
        params = {} if window is None else {"window": window}
        return self._get("/dashboard", **params)

    def create_goal(self, title: str, target_value: float, unit: str = "", **params) -> str:
        return self._post(
            "/goals",
            params={"title": title, "target_value": target_value, "unit": unit, **params},
        )["id"]

    def goals(self) -> dict:
        return self._get("/goals")

    def exercises(
        self, search_term: str = "", category: str = "all", difficulty: str = "all"
    ) -> dict:
        return self._get(
            "/exercises",
            search_term=search_term,
            category=category,
            difficulty=difficulty,
        )
