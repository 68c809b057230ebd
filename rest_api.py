import logging
import os
from fastapi import (
    FastAPI,
    HTTPException,
    Body,
    APIRouter,
    Header,
    Depends,
)
from fastapi.responses import JSONResponse
from db import (
    WorkoutRepository,
    AsyncWorkoutRepository,
    GoalRepository,
    ExerciseRepository,
    UserRepository,
    SessionRepository,
    SettingsRepository,
    StoreError,
)
from auth_service import AuthService, AuthError
from stats_service import StatisticsService
from forms import parse_workout_fields, parse_goal_fields, parse_float_field
from config import APP_VERSION, configure_logging

logger = logging.getLogger(__name__)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class FitTrackAPI:
    """Provides REST endpoints for workout logging, goals and the exercise library."""

    def __init__(
        self,
        db_path: str = "fittrack.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.workouts = WorkoutRepository(db_path)
        self.async_workouts = AsyncWorkoutRepository(db_path)
        self.goals = GoalRepository(db_path)
        self.exercises = ExerciseRepository(db_path)
        self.users = UserRepository(db_path)
        self.sessions = SessionRepository(db_path)
        self.auth = AuthService(self.users, self.sessions, self.settings)
        self.statistics = StatisticsService(
            self.workouts,
            self.goals,
            self.exercises,
            self.settings,
            async_workout_repo=self.async_workouts,
        )
        self.app = FastAPI(
            title="FitTrack API",
            description="REST API for workout logging, goals and exercise browsing",
            version=APP_VERSION,
        )
        self._setup_routes()

    def current_user_id(self, authorization: str | None = Header(None)) -> str:
        try:
            return self.auth.require_user_id(_bearer_token(authorization))
        except AuthError as e:
            raise HTTPException(status_code=401, detail=str(e))
        except StoreError as e:
            raise HTTPException(status_code=503, detail=str(e))

    def _setup_routes(self) -> None:
        auth_router = APIRouter(prefix="/auth", tags=["Auth"])
        goals_router = APIRouter(prefix="/goals", tags=["Goals"])
        exercises_router = APIRouter(prefix="/exercises", tags=["Exercises"])
        user_id_dep = Depends(self.current_user_id)

        @self.app.exception_handler(StoreError)
        async def store_error_handler(request, exc: StoreError):
            logger.error("Store failure on %s: %s", request.url.path, exc)
            return JSONResponse(status_code=503, content={"detail": str(exc)})

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            try:
                self.exercises.fetch_catalog()
                return {"status": "ok"}
            except StoreError as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @auth_router.post("/signup")
        def sign_up(email: str = Body(...), password: str = Body(...)):
            try:
                return self.auth.sign_up(email, password)
            except AuthError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @auth_router.post("/signin")
        def sign_in(email: str = Body(...), password: str = Body(...)):
            try:
                return self.auth.sign_in(email, password)
            except AuthError as e:
                raise HTTPException(status_code=401, detail=str(e))

        @auth_router.post("/signout")
        def sign_out(authorization: str | None = Header(None)):
            try:
                self.auth.sign_out(_bearer_token(authorization))
                return {"status": "signed_out"}
            except AuthError as e:
                raise HTTPException(status_code=401, detail=str(e))

        @auth_router.get("/user")
        def current_user(authorization: str | None = Header(None)):
            user = self.auth.get_current_user(_bearer_token(authorization))
            if user is None:
                raise HTTPException(status_code=401, detail="not authenticated")
            return user

        @self.app.get(
            "/workouts",
            summary="List workouts",
            description="Most recent workouts of the signed-in user, newest first.",
        )
        def list_workouts(limit: int | None = None, user_id: str = user_id_dep):
            if limit is not None and limit < 1:
                raise HTTPException(status_code=400, detail="limit must be positive")
            return self.statistics.recent_workouts(user_id, limit)

        @self.app.post(
            "/workouts",
            summary="Log workout",
            description="Record a workout; blank or invalid numbers are stored as absent.",
        )
        def create_workout(
            title: str,
            duration_minutes: str | None = None,
            calories_burned: str | None = None,
            notes: str | None = None,
            user_id: str = user_id_dep,
        ):
            try:
                fields = parse_workout_fields(
                    title, duration_minutes, calories_burned, notes
                )
                workout_id = self.workouts.create(user_id, **fields)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": workout_id}

        @self.app.delete("/workouts/{workout_id}")
        def delete_workout(workout_id: str, user_id: str = user_id_dep):
            try:
                self.workouts.delete(user_id, workout_id)
                return {"status": "deleted"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.get(
            "/dashboard",
            summary="Dashboard",
            description="Workout totals, weekly average, chart window and recent history.",
        )
        async def dashboard(window: int | None = None, user_id: str = user_id_dep):
            if window is not None and window < 0:
                raise HTTPException(status_code=400, detail="window must not be negative")
            return await self.statistics.dashboard_async(user_id, window)

        @goals_router.get("")
        def list_goals(user_id: str = user_id_dep):
            return self.statistics.goals_overview(user_id)

        @goals_router.post("")
        def add_goal(
            title: str,
            target_value: str,
            unit: str = "",
            current_value: str | None = None,
            target_date: str | None = None,
            user_id: str = user_id_dep,
        ):
            try:
                fields = parse_goal_fields(
                    title, target_value, unit, current_value, target_date
                )
                gid = self.goals.add(user_id, **fields)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": gid}

        @goals_router.put("/{goal_id}")
        def update_goal(
            goal_id: str,
            current_value: str | None = None,
            achieved: bool | None = None,
            user_id: str = user_id_dep,
        ):
            value = None
            if current_value is not None:
                try:
                    value = parse_float_field(current_value)
                except ValueError as e:
                    raise HTTPException(status_code=400, detail=str(e))
            try:
                self.goals.update(user_id, goal_id, value, achieved)
                return {"status": "updated"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @goals_router.get("/{goal_id}/progress")
        def goal_progress(goal_id: str, user_id: str = user_id_dep):
            try:
                return self.statistics.goal_progress(user_id, goal_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @exercises_router.get("")
        def list_exercises(
            search_term: str = "",
            category: str = "all",
            difficulty: str = "all",
            user_id: str = user_id_dep,
        ):
            return self.statistics.exercise_library(search_term, category, difficulty)

        @exercises_router.get("/filters")
        def exercise_filters(user_id: str = user_id_dep):
            return self.statistics.exercise_filters()

        self.app.include_router(auth_router)
        self.app.include_router(goals_router)
        self.app.include_router(exercises_router)


api = FitTrackAPI(
    os.environ.get("DB_PATH", "fittrack.db"),
    os.environ.get("SETTINGS_PATH", "settings.yaml"),
)
app = api.app

if __name__ == "__main__":
    import uvicorn

    configure_logging(api.settings.get_text("log_level", "INFO"))
    uvicorn.run(app)
