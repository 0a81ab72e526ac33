# booking/scheduling/conflicts.py

import logging
from typing import Iterable, Optional

from .timecodec import parse_12

logger = logging.getLogger(__name__)

CANCELLED = "cancelled"


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # half-open intervals: touching endpoints do not overlap
    return start_a < end_b and start_b < end_a


def find_conflict(
    existing: Iterable,
    start_minutes: int,
    end_minutes: int,
    exclude_id: Optional[int] = None,
):
    """
    Return the first existing appointment overlapping [start, end), or None.

    Args:
        existing: same-day, same-service appointments (anything with
            id, start_time, end_time and status attributes)
        start_minutes: proposed start, minutes since midnight
        end_minutes: proposed end, minutes since midnight
        exclude_id: appointment being updated, so it never conflicts with itself

    Rows whose stored times cannot be parsed are skipped, so one corrupt
    record never blocks the whole day.
    """
    for appt in existing:
        if appt.status == CANCELLED:
            continue
        if exclude_id is not None and appt.id == exclude_id:
            continue

        existing_start = parse_12(appt.start_time)
        existing_end = parse_12(appt.end_time)
        if existing_start is None or existing_end is None:
            logger.warning(
                "Skipping appointment %s with unparsable times %r-%r",
                appt.id, appt.start_time, appt.end_time,
            )
            continue

        if intervals_overlap(start_minutes, end_minutes, existing_start, existing_end):
            return appt

    return None
