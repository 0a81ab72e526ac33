# booking/scheduling/__init__.py

from .conflicts import find_conflict, intervals_overlap
from .slots import build_slots
from .timecodec import format_12, parse_12, parse_24
from .validator import SlotValidation, validate_slot, validate_time_range
