from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    chart_window: int = Field(7, ge=1)
    recent_workout_limit: int = Field(20, ge=1)
    recent_history_size: int = Field(5, ge=0)
    weeks_per_month: int = Field(4, ge=1)
    log_level: str = "INFO"
    bcrypt_rounds: int = Field(12, ge=4, le=31)
    session_secret: str = ""


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
