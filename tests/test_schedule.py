import pytest
from solarsize.models import TimeSlot
from solarsize.schedule import (
    ALWAYS_ON,
    MAX_SLOTS,
    NEW_SLOT,
    active_hours,
    add_slot,
    apply_preset,
    battery_hours,
    days_for_preset,
    format_hour,
    format_slots,
    hour_in_any_slot,
    hour_in_slot,
    parse_hour,
    parse_slot,
    remove_slot,
    set_slot,
    solar_overlap_hours,
    usage_hours,
)

def test_hour_in_slot_daytime():
    """Test a normal slot is start-inclusive and end-exclusive."""
    slot = TimeSlot(18, 23)
    assert hour_in_slot(18, slot)
    assert hour_in_slot(22, slot)
    assert not hour_in_slot(23, slot)
    assert not hour_in_slot(17, slot)

def test_hour_in_slot_overnight():
    """Test a slot that wraps past midnight."""
    slot = TimeSlot(22, 6)
    assert hour_in_slot(22, slot)
    assert hour_in_slot(0, slot)
    assert hour_in_slot(5, slot)
    assert not hour_in_slot(6, slot)
    assert not hour_in_slot(12, slot)
    assert usage_hours([slot]) == 8

def test_degenerate_slot_covers_nothing():
    """Test that start == end without the 24h flag is empty."""
    slot = TimeSlot(9, 9)
    assert not any(hour_in_slot(h, slot) for h in range(24))
    assert usage_hours([slot]) == 0

def test_always_on_slot():
    """Test a 24h slot covers the whole day regardless of start/end."""
    assert usage_hours([TimeSlot(5, 5, True)]) == 24
    assert usage_hours([TimeSlot(10, 12), ALWAYS_ON]) == 24

def test_overlapping_slots_count_once():
    """Test hours covered by more than one slot are counted once."""
    slots = [TimeSlot(10, 14), TimeSlot(12, 16)]
    assert active_hours(slots) == set(range(10, 16))
    assert usage_hours(slots) == 6

def test_hour_in_any_slot_overnight():
    """Test membership across a schedule that wraps past midnight."""
    assert hour_in_any_slot(23, [TimeSlot(22, 6)])
    assert not hour_in_any_slot(10, [TimeSlot(22, 6)])
    assert hour_in_any_slot(10, [TimeSlot(22, 6), TimeSlot(9, 11)])

def test_empty_schedule():
    """Test an item with no slots is never on."""
    assert not hour_in_any_slot(12, [])
    assert usage_hours([]) == 0
    assert solar_overlap_hours([], 7, 18) == 0
    assert battery_hours([], 7, 18) == 0

def test_union_of_overlapping_slots():
    """Test 6-12 and 10-14 together cover eight hours."""
    assert usage_hours([TimeSlot(6, 12), TimeSlot(10, 14)]) == 8

def test_solar_and_battery_hours():
    """Test the split of covered hours around the sun window."""
    slots = [TimeSlot(16, 21)]
    assert solar_overlap_hours(slots, 7, 18) == 2
    assert battery_hours(slots, 7, 18) == 3

def test_solar_hours_always_on():
    """Test an always-on item against a 6-18 sun window."""
    assert solar_overlap_hours([ALWAYS_ON], 6, 18) == 12
    assert battery_hours([ALWAYS_ON], 6, 18) == 12

def test_hour_counts_stay_in_range():
    """Test solar + battery hours always equals usage hours."""
    for slots in ([TimeSlot(22, 6)], [TimeSlot(0, 23), TimeSlot(23, 1)], [TimeSlot(3, 3)]):
        usage = usage_hours(slots)
        solar = solar_overlap_hours(slots, 7, 18)
        assert 0 <= solar <= usage <= 24
        assert solar + battery_hours(slots, 7, 18) == usage

def test_add_slot():
    """Test adding slots up to the maximum."""
    slots = (TimeSlot(6, 8),)
    slots = add_slot(slots)
    assert slots[-1] == NEW_SLOT
    while len(slots) < MAX_SLOTS:
        slots = add_slot(slots)
    assert add_slot(slots) == slots

def test_add_slot_to_always_on_is_noop():
    """Test an always-on schedule can't gain more slots."""
    assert add_slot((ALWAYS_ON,)) == (ALWAYS_ON,)

def test_remove_slot_keeps_one():
    """Test the last remaining slot can't be removed."""
    slots = (TimeSlot(6, 8), TimeSlot(18, 20))
    assert remove_slot(slots, 0) == (TimeSlot(18, 20),)
    assert remove_slot((TimeSlot(6, 8),), 0) == (TimeSlot(6, 8),)
    assert remove_slot(slots, 5) == slots

def test_set_slot_24h_collapses_schedule():
    """Test switching any slot to 24h replaces the whole schedule."""
    slots = (TimeSlot(6, 8), TimeSlot(18, 20))
    assert set_slot(slots, 1, TimeSlot(0, 0, True)) == (ALWAYS_ON,)
    assert set_slot(slots, 0, TimeSlot(7, 9)) == (TimeSlot(7, 9), TimeSlot(18, 20))

def test_apply_preset():
    """Test presets yield a single slot."""
    assert apply_preset("night") == (TimeSlot(22, 6),)
    assert apply_preset("24h") == (ALWAYS_ON,)
    with pytest.raises(ValueError, match="Unknown usage preset"):
        apply_preset("brunch")

def test_days_for_preset():
    assert days_for_preset("weekdays") == 5
    assert days_for_preset("once") == 1
    with pytest.raises(ValueError):
        days_for_preset("fortnightly")

def test_parse_hour():
    """Test hour parsing accepts plain and HH:00 forms."""
    assert parse_hour("7") == 7
    assert parse_hour("07:00") == 7
    assert parse_hour("24") == 0
    with pytest.raises(ValueError, match="whole hours"):
        parse_hour("07:30")
    with pytest.raises(ValueError, match="out of range"):
        parse_hour("25")

def test_parse_slot():
    """Test slot parsing for ranges, presets and 24h."""
    assert parse_slot("18-23") == TimeSlot(18, 23)
    assert parse_slot("22:00-06:00") == TimeSlot(22, 6)
    assert parse_slot("24h") == ALWAYS_ON
    assert parse_slot("Always") == ALWAYS_ON
    assert parse_slot("morning") == TimeSlot(6, 12)
    with pytest.raises(ValueError, match="Invalid time slot"):
        parse_slot("tonight")

def test_format_hour():
    assert format_hour(0) == "12 AM"
    assert format_hour(9) == "9 AM"
    assert format_hour(12) == "12 PM"
    assert format_hour(18) == "6 PM"

def test_format_slots():
    assert format_slots([TimeSlot(6, 12), ALWAYS_ON]) == "6 AM - 12 PM, 24h"
