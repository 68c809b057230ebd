"""Parsing of user-entered form text into typed workout and goal fields."""

import datetime
import math


def parse_int_field(text: str | int | None) -> int | None:
    """Return ``text`` as an integer or ``None`` when blank or unparseable."""
    if text is None:
        return None
    if isinstance(text, int) and not isinstance(text, bool):
        return text
    value = str(text).strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return None


def parse_float_field(
    text: str | float | None, default: float | None = None
) -> float:
    """Return ``text`` as a float, ``default`` when blank.

    Raises ``ValueError`` for unparseable or non-finite text, or blank text
    with no default.
    """
    if text is None or (isinstance(text, str) and not text.strip()):
        if default is None:
            raise ValueError("a number is required")
        return default
    try:
        value = float(text)
    except (TypeError, ValueError):
        raise ValueError(f"{text!r} is not a number")
    if not math.isfinite(value):
        raise ValueError(f"{text!r} is not a finite number")
    return value


def parse_workout_fields(
    title: str,
    duration: str | int | None = None,
    calories: str | int | None = None,
    notes: str | None = None,
) -> dict[str, object]:
    if not title or not title.strip():
        raise ValueError("title required")
    return {
        "title": title.strip(),
        "duration_minutes": parse_int_field(duration),
        "calories_burned": parse_int_field(calories),
        "notes": notes or None,
    }


def parse_goal_fields(
    title: str,
    target_value: str | float | None,
    unit: str,
    current_value: str | float | None = None,
    target_date: str | None = None,
) -> dict[str, object]:
    if not title or not title.strip():
        raise ValueError("title required")
    date_value = None
    if target_date and target_date.strip():
        try:
            date_value = datetime.date.fromisoformat(target_date.strip()).isoformat()
        except ValueError:
            raise ValueError("target_date must be in YYYY-MM-DD format")
    return {
        "title": title.strip(),
        "target_value": parse_float_field(target_value),
        "current_value": parse_float_field(current_value, default=0.0),
        "unit": (unit or "").strip(),
        "target_date": date_value,
    }
