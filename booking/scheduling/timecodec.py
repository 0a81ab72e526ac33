# booking/scheduling/timecodec.py

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

TIME_24_REGEX = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$", re.ASCII)
TIME_12_REGEX = re.compile(r"^(0?[1-9]|1[0-2]):([0-5]\d)\s(AM|PM)$", re.ASCII)

MINUTES_PER_DAY = 24 * 60


def parse_24(value) -> Optional[int]:
    if not isinstance(value, str):
        return None
    match = TIME_24_REGEX.fullmatch(value)
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def parse_12(value) -> Optional[int]:
    if not isinstance(value, str):
        return None
    match = TIME_12_REGEX.fullmatch(value.strip())
    if match is None:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3)

    # 12 AM is midnight, 12 PM is noon
    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0

    return hours * 60 + minutes


def format_12(total_minutes: int) -> str:
    """
    Render minutes since midnight as "h:mm AM/PM".

    Values outside a day wrap around (-60 -> "11:00 PM", 1500 -> "1:00 AM").
    """
    normalized = total_minutes % MINUTES_PER_DAY
    hours24, minutes = divmod(normalized, 60)
    period = "PM" if hours24 >= 12 else "AM"
    hours12 = hours24 % 12 or 12
    return f"{hours12}:{minutes:02d} {period}"


def sunday_weekday(value: Union[date, datetime]) -> int:
    # date.weekday() is Monday-based; working days are stored Sunday-based
    return (value.weekday() + 1) % 7


def day_range(value: Union[date, datetime]) -> Tuple[datetime, datetime]:
    day_start = datetime.combine(
        value.date() if isinstance(value, datetime) else value,
        datetime.min.time(),
    )
    return day_start, day_start + timedelta(days=1)
