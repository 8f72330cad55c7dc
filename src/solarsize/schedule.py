"""Daily usage schedules made of one or more time slots.

Hours are whole numbers 0-23. A slot covers ``[start, end)``; when ``start > end``
the slot runs overnight, and ``start == end`` covers nothing unless it is a 24h slot.
"""

from .models import TimeSlot

HOURS = range(24)
MAX_SLOTS = 4

ALWAYS_ON = TimeSlot(0, 0, True)
NEW_SLOT = TimeSlot(12, 14)
DEFAULT_SLOT = TimeSlot(18, 23)

USAGE_PRESETS = {
    "morning": ("Morning", TimeSlot(6, 12)),
    "afternoon": ("Afternoon", TimeSlot(12, 18)),
    "evening": ("Evening", TimeSlot(18, 23)),
    "night": ("Night", TimeSlot(22, 6)),
    "daytime": ("Business Hours", TimeSlot(8, 17)),
    "24h": ("24/7", ALWAYS_ON),
}

DAYS_PER_WEEK_PRESETS = {
    "daily": 7,
    "weekdays": 5,
    "weekends": 2,
    "few": 3,
    "once": 1,
}


def hour_in_slot(hour: int, slot: TimeSlot) -> bool:
    """Check if an hour falls within a slot (handles overnight slots)."""
    if slot.is_24h:
        return True
    if slot.start == slot.end:
        return False
    if slot.start < slot.end:
        return slot.start <= hour < slot.end
    else:
        # Overnight slot (e.g., 22:00 to 06:00)
        return hour >= slot.start or hour < slot.end


def hour_in_any_slot(hour: int, slots) -> bool:
    return any(hour_in_slot(hour, slot) for slot in slots)


def active_hours(slots) -> set[int]:
    """Distinct hours covered by the union of all slots."""
    return {h for h in HOURS if hour_in_any_slot(h, slots)}


def usage_hours(slots) -> int:
    """Number of distinct hours covered by the slots (0-24)."""
    if any(slot.is_24h for slot in slots):
        return 24
    return len(active_hours(slots))


def solar_overlap_hours(slots, sun_start: int, sun_end: int) -> int:
    """Covered hours that fall inside the sun window ``[sun_start, sun_end)``."""
    return sum(1 for h in active_hours(slots) if sun_start <= h < sun_end)


def battery_hours(slots, sun_start: int, sun_end: int) -> int:
    """Covered hours outside the sun window."""
    return usage_hours(slots) - solar_overlap_hours(slots, sun_start, sun_end)


# Slot editing. Each helper returns a new tuple and leaves invalid edits as no-ops.


def add_slot(slots, slot: TimeSlot = NEW_SLOT) -> tuple[TimeSlot, ...]:
    """Append a slot unless the schedule is full or already always-on."""
    slots = tuple(slots)
    if len(slots) >= MAX_SLOTS or any(s.is_24h for s in slots):
        return slots
    if slot.is_24h:
        return (ALWAYS_ON,)
    return slots + (slot,)


def remove_slot(slots, index: int) -> tuple[TimeSlot, ...]:
    """Remove the slot at ``index``, keeping at least one slot."""
    slots = tuple(slots)
    if len(slots) <= 1 or not 0 <= index < len(slots):
        return slots
    return slots[:index] + slots[index + 1:]


def set_slot(slots, index: int, slot: TimeSlot) -> tuple[TimeSlot, ...]:
    """Replace the slot at ``index``. A 24h slot replaces the whole schedule."""
    if slot.is_24h:
        return (ALWAYS_ON,)
    slots = list(slots)
    if not 0 <= index < len(slots):
        return tuple(slots)
    slots[index] = slot
    return tuple(slots)


def apply_preset(preset_id: str) -> tuple[TimeSlot, ...]:
    """Schedule for a named preset. Presets always yield a single slot."""
    if preset_id not in USAGE_PRESETS:
        raise ValueError(f"Unknown usage preset: {preset_id}")
    return (USAGE_PRESETS[preset_id][1],)


def days_for_preset(preset_id: str) -> int:
    if preset_id not in DAYS_PER_WEEK_PRESETS:
        raise ValueError(f"Unknown days-per-week preset: {preset_id}")
    return DAYS_PER_WEEK_PRESETS[preset_id]


# Parsing and display


def parse_hour(text: str) -> int:
    """Parse '7', '07' or '07:00' to an hour. Minutes other than 00 are rejected."""
    text = text.strip()
    if ":" in text:
        hour_part, minute_part = text.split(":", 1)
        if int(minute_part) != 0:
            raise ValueError(f"Only whole hours are supported: {text}")
    else:
        hour_part = text
    hour = int(hour_part)
    if hour == 24:
        hour = 0
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour out of range: {text}")
    return hour


def parse_slot(text: str) -> TimeSlot:
    """Parse a slot such as '18-23', '22:00-06:00', '24h' or a preset name."""
    value = str(text).strip().lower()
    if value in ("24h", "24/7", "always"):
        return ALWAYS_ON
    if value in USAGE_PRESETS:
        return USAGE_PRESETS[value][1]
    if "-" not in value:
        raise ValueError(f"Invalid time slot: {text}")
    start, end = value.split("-", 1)
    return TimeSlot(parse_hour(start), parse_hour(end))


def format_hour(hour: int) -> str:
    """Format an hour as '12 AM', '9 AM', '12 PM', '6 PM'."""
    if hour in (0, 24):
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


def format_slot(slot: TimeSlot) -> str:
    if slot.is_24h:
        return "24h"
    return f"{format_hour(slot.start)} - {format_hour(slot.end)}"


def format_slots(slots) -> str:
    return ", ".join(format_slot(s) for s in slots)
