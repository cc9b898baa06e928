"""Display formatting for recording details."""

from datetime import datetime


def format_date(value: datetime) -> str:
    """``Monday, October 19 at 3:04 PM`` in local time."""
    local = value.astimezone() if value.tzinfo else value
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local:%A}, {local:%B} {local.day} at {hour}:{local.minute:02d} {meridiem}"


def format_duration(seconds: float) -> str:
    """Seconds as ``M:SS``."""
    minutes = int(seconds // 60)
    remaining = int(seconds % 60)
    return f"{minutes}:{remaining:02d}"


def format_time(millis: int) -> str:
    """Milliseconds as ``M:SS``."""
    minutes = int(millis // 60000)
    seconds = int((millis % 60000) // 1000)
    return f"{minutes}:{seconds:02d}"
