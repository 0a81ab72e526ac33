# booking/scheduling/slots.py

from typing import List, Optional, Tuple

from .conflicts import intervals_overlap
from .timecodec import format_12, parse_24


def break_window(settings) -> Optional[Tuple[int, int]]:
    """Return the configured break as (start, end) minutes, or None."""
    if not settings.break_start or not settings.break_end:
        return None
    break_start = parse_24(settings.break_start)
    break_end = parse_24(settings.break_end)
    if break_start is None or break_end is None:
        return None
    return break_start, break_end


def build_slots(settings) -> List[str]:
    """
    Generate the slot start times for the given settings.

    A slot touching the break window at all is dropped entirely, never
    shortened. A trailing period shorter than one slot is dropped too.
    """
    open_minutes = parse_24(settings.open_time)
    close_minutes = parse_24(settings.close_time)
    duration = settings.slot_duration_minutes
    if open_minutes is None or close_minutes is None or not duration or duration <= 0:
        return []

    pause = break_window(settings)

    slots = []
    cursor = open_minutes
    while cursor + duration <= close_minutes:
        slot_end = cursor + duration

        if pause is not None and intervals_overlap(cursor, slot_end, *pause):
            cursor += duration
            continue

        slots.append(format_12(cursor))
        cursor += duration

    return slots
