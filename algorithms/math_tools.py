import math


class MathTools:
    """Provides numeric helpers shared by the fitness metric calculators."""

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        """Clamp ``value`` to the inclusive range [min_value, max_value]."""
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        return max(min_value, min(value, max_value))

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer with halves rounded upward."""
        return int(math.floor(value + 0.5))

    @staticmethod
    def non_negative(value: object) -> int | float:
        """Return ``value`` as a number, using 0 for missing, malformed or negative input."""
        if value is None or isinstance(value, bool):
            return 0
        if isinstance(value, (int, float)):
            number = value
        elif isinstance(value, str):
            text = value.strip()
            try:
                number = int(text)
            except ValueError:
                try:
                    number = float(text)
                except ValueError:
                    return 0
        else:
            return 0
        if isinstance(number, float) and not math.isfinite(number):
            return 0
        return number if number > 0 else 0

    @staticmethod
    def safe_ratio(numerator: float, denominator: float) -> float:
        """Return ``numerator / denominator`` or 0.0 when the denominator is not positive."""
        if denominator <= 0:
            return 0.0
        return numerator / denominator
