from itertools import permutations

import pytest
from solarsize.models import EquipmentUsage, TimeSlot
from solarsize.schedule import ALWAYS_ON
from solarsize.analysis.profile import (
    aggregate,
    hourly_peak_watts,
    hourly_profile,
    room_breakdown,
    top_consumers,
)

def test_aggregate_evening_only():
    """Test an evening-only item is drawn entirely from the battery."""
    items = [EquipmentUsage(100, (TimeSlot(18, 23),), 7)]
    profile = aggregate(items, 7, 18)
    assert profile.total_watts == 100
    assert profile.daily_kwh == pytest.approx(0.5)
    assert profile.solar_kwh == 0
    assert profile.battery_kwh == pytest.approx(0.5)
    assert profile.solar_ratio == 0

def test_aggregate_always_on():
    """Test a 24h item splits evenly over a 12-hour sun window."""
    items = [EquipmentUsage(200, (ALWAYS_ON,), 7)]
    profile = aggregate(items, 6, 18)
    assert profile.daily_kwh == pytest.approx(4.8)
    assert profile.solar_kwh == pytest.approx(2.4)
    assert profile.battery_kwh == pytest.approx(2.4)
    assert profile.solar_ratio == pytest.approx(0.5)

def test_aggregate_days_per_week():
    """Test items used on fewer days are averaged over the week."""
    items = [
        EquipmentUsage(100, (TimeSlot(8, 18),), 7),
        EquipmentUsage(100, (TimeSlot(8, 18),), 1),
    ]
    profile = aggregate(items, 7, 18)
    assert profile.daily_kwh == pytest.approx((100 * 10 + 100 * 10 / 7) / 1000)
    assert profile.battery_kwh == pytest.approx(0)
    assert profile.solar_ratio == pytest.approx(1)

def test_aggregate_empty():
    """Test no equipment gives an all-zero profile."""
    profile = aggregate([], 7, 18)
    assert profile.total_watts == 0
    assert profile.daily_kwh == 0
    assert profile.solar_ratio == 0

def test_aggregate_counts_rated_watts_of_idle_items():
    """Test total watts includes items whose schedule covers no hours."""
    items = [EquipmentUsage(60, (TimeSlot(9, 9),), 7)]
    profile = aggregate(items, 7, 18)
    assert profile.total_watts == 60
    assert profile.daily_kwh == 0
    assert profile.solar_ratio == 0

def test_aggregate_order_independent():
    """Test every ordering of the items gives an identical profile."""
    items = [
        EquipmentUsage(150, (TimeSlot(21, 7),), 3),
        EquipmentUsage(1000, (TimeSlot(7, 8), TimeSlot(19, 20)), 5),
        EquipmentUsage(75, (TimeSlot(10, 22),), 6),
        EquipmentUsage(33, (ALWAYS_ON,), 2),
    ]
    profiles = {aggregate(list(p), 7, 18) for p in permutations(items)}
    assert len(profiles) == 1

def test_aggregate_order_independent_fractional_watts():
    """Test fractional wattages still give the same profile in any order."""
    items = [
        EquipmentUsage(12.7, (TimeSlot(18, 23),), 3),
        EquipmentUsage(0.3, (TimeSlot(22, 6),), 5),
        EquipmentUsage(945.1, (TimeSlot(12, 22),), 6),
        EquipmentUsage(18.9, (ALWAYS_ON,), 1),
    ]
    forward = aggregate(items, 7, 18)
    for p in permutations(items):
        assert aggregate(list(p), 7, 18) == forward

def test_aggregate_conserves_energy():
    """Test solar and battery energy add up to the daily total."""
    items = [
        EquipmentUsage(150, (TimeSlot(21, 7),), 3),
        EquipmentUsage(1000, (TimeSlot(7, 8), TimeSlot(19, 20)), 5),
        EquipmentUsage(75, (TimeSlot(10, 22),), 6),
    ]
    profile = aggregate(items, 7, 18)
    assert profile.solar_kwh + profile.battery_kwh == pytest.approx(profile.daily_kwh, abs=1e-9)
    assert 0 <= profile.solar_ratio <= 1

def test_hourly_profile_matches_daily_energy():
    """Test summing the hourly buckets gives the daily Wh for daily items."""
    items = [
        EquipmentUsage(100, (TimeSlot(18, 23),), 7),
        EquipmentUsage(200, (ALWAYS_ON,), 7),
    ]
    hourly = hourly_profile(items, 6, 18)
    assert len(hourly) == 24
    assert sum(h.total_watts for h in hourly) / 1000 == pytest.approx(aggregate(items, 6, 18).daily_kwh)
    assert hourly[12].solar_watts == 200
    assert hourly[12].battery_watts == 0
    assert hourly[20].battery_watts == 300

def test_hourly_peak_watts():
    """Test peak is the busiest hour and never exceeds rated total."""
    items = [
        EquipmentUsage(1000, (TimeSlot(7, 8),), 7),
        EquipmentUsage(500, (TimeSlot(19, 20),), 7),
        EquipmentUsage(100, (ALWAYS_ON,), 7),
    ]
    peak = hourly_peak_watts(items, 7, 18)
    assert peak == 1100
    assert peak <= aggregate(items, 7, 18).total_watts
    assert hourly_peak_watts([], 7, 18) == 0

def test_top_consumers_ranked():
    """Test consumers are ranked by daily kWh and limited."""
    named = [
        ("Fan", "Living Room", EquipmentUsage(75, (TimeSlot(10, 22),), 7)),
        ("AC", "Bedroom 1", EquipmentUsage(945, (TimeSlot(21, 7),), 7)),
        ("Router", "General", EquipmentUsage(18, (ALWAYS_ON,), 7)),
    ]
    top = top_consumers(named, limit=2)
    assert [c["name"] for c in top] == ["AC", "Fan"]
    assert top[0]["hours"] == 10
    assert top[0]["daily_kwh"] == pytest.approx(9.45)

def test_room_breakdown():
    """Test per-room totals keep first-seen order."""
    named = [
        ("TV", "Living Room", EquipmentUsage(100, (TimeSlot(18, 23),), 7)),
        ("AC", "Bedroom 1", EquipmentUsage(300, (TimeSlot(21, 7),), 7)),
        ("Bulbs", "Living Room", EquipmentUsage(100, (TimeSlot(18, 23),), 7)),
    ]
    rooms = room_breakdown(named)
    assert [r["room"] for r in rooms] == ["Living Room", "Bedroom 1"]
    assert rooms[0]["items"] == 2
    assert rooms[0]["watts"] == 200
    assert rooms[0]["percent_of_watts"] == 40.0
    assert rooms[0]["daily_kwh"] == pytest.approx(1.0)
