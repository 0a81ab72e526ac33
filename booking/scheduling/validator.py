# booking/scheduling/validator.py

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .conflicts import intervals_overlap
from .slots import break_window, build_slots
from .timecodec import TIME_12_REGEX, parse_12, parse_24, sunday_weekday

INVALID_FORMAT = "startTime and endTime must be in hh:mm AM/PM format."
INVALID_RANGE = "Invalid time range. endTime must be after startTime."
OUTSIDE_HOURS = "Selected time is outside working hours."
OVERLAPS_BREAK = "Selected time overlaps business break hours."
OUTSIDE_DAYS = "Selected date is outside configured working days."
NOT_A_SLOT = "Selected startTime is not an available slot."


class SlotValidation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    valid: bool
    message: Optional[str] = None
    start_minutes: Optional[int] = None
    end_minutes: Optional[int] = None

    @classmethod
    def reject(cls, message: str) -> "SlotValidation":
        return cls(valid=False, message=message)


def _matches_12(value) -> bool:
    return isinstance(value, str) and TIME_12_REGEX.fullmatch(value) is not None


def validate_time_range(start_time, end_time) -> SlotValidation:
    if not _matches_12(start_time) or not _matches_12(end_time):
        return SlotValidation.reject(INVALID_FORMAT)

    start_minutes = parse_12(start_time)
    end_minutes = parse_12(end_time)
    if start_minutes >= end_minutes:
        return SlotValidation.reject(INVALID_RANGE)

    return SlotValidation(valid=True, start_minutes=start_minutes, end_minutes=end_minutes)


def validate_slot(
    settings,
    appointment_date: Union[date, datetime],
    start_time,
    end_time,
) -> SlotValidation:
    time_range = validate_time_range(start_time, end_time)
    if not time_range.valid:
        return time_range

    start_minutes = time_range.start_minutes
    end_minutes = time_range.end_minutes

    open_minutes = parse_24(settings.open_time)
    close_minutes = parse_24(settings.close_time)
    if open_minutes is None or close_minutes is None:
        return SlotValidation.reject(OUTSIDE_HOURS)
    if start_minutes < open_minutes or end_minutes > close_minutes:
        return SlotValidation.reject(OUTSIDE_HOURS)

    pause = break_window(settings)
    if pause is not None and intervals_overlap(start_minutes, end_minutes, *pause):
        return SlotValidation.reject(OVERLAPS_BREAK)

    if sunday_weekday(appointment_date) not in (settings.working_days or []):
        return SlotValidation.reject(OUTSIDE_DAYS)

    # verbatim match, so "09:00 AM" is not the same slot as "9:00 AM"
    if start_time not in build_slots(settings):
        return SlotValidation.reject(NOT_A_SLOT)

    return time_range
