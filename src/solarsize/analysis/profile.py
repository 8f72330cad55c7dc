"""Roll enabled equipment up into energy totals and an hourly load profile."""

import math

from ..models import EnergyProfile, EquipmentUsage, HourlyLoad
from ..schedule import HOURS, hour_in_any_slot, solar_overlap_hours, usage_hours


def aggregate(items: list[EquipmentUsage], sun_start: int, sun_end: int) -> EnergyProfile:
    """Sum equipment into an energy profile.

    Energy is accumulated in Wh and converted to kWh once at the end. Each item is
    weighted by ``days_per_week / 7``. ``total_watts`` counts every item's rated
    wattage whatever its schedule. Sums use ``math.fsum`` so item order never
    changes the result.
    """
    watts = []
    daily_wh = []
    solar_wh = []
    battery_wh = []

    for item in items:
        usage_hrs = usage_hours(item.time_slots)
        solar_hrs = solar_overlap_hours(item.time_slots, sun_start, sun_end)
        battery_hrs = usage_hrs - solar_hrs
        day_factor = item.days_per_week / 7

        watts.append(item.wattage)
        daily_wh.append(item.wattage * usage_hrs * day_factor)
        solar_wh.append(item.wattage * solar_hrs * day_factor)
        battery_wh.append(item.wattage * battery_hrs * day_factor)

    daily_kwh = math.fsum(daily_wh) / 1000
    solar_kwh = math.fsum(solar_wh) / 1000
    battery_kwh = math.fsum(battery_wh) / 1000

    return EnergyProfile(
        total_watts=math.fsum(watts),
        daily_kwh=daily_kwh,
        solar_kwh=solar_kwh,
        battery_kwh=battery_kwh,
        solar_ratio=solar_kwh / daily_kwh if daily_kwh > 0 else 0.0,
    )


def hourly_profile(items: list[EquipmentUsage], sun_start: int, sun_end: int) -> list[HourlyLoad]:
    """Watts drawn in each hour of the day, split into solar and battery hours."""
    totals = [0.0] * 24
    solar = [0.0] * 24
    battery = [0.0] * 24

    for item in items:
        for h in HOURS:
            if not hour_in_any_slot(h, item.time_slots):
                continue
            totals[h] += item.wattage
            if sun_start <= h < sun_end:
                solar[h] += item.wattage
            else:
                battery[h] += item.wattage

    return [
        HourlyLoad(hour=h, total_watts=totals[h], solar_watts=solar[h], battery_watts=battery[h])
        for h in HOURS
    ]


def hourly_peak_watts(items: list[EquipmentUsage], sun_start: int, sun_end: int) -> float:
    """Highest simultaneous load over the day's hourly buckets."""
    return max((h.total_watts for h in hourly_profile(items, sun_start, sun_end)), default=0.0)


def item_daily_kwh(item: EquipmentUsage) -> float:
    """Average daily energy of a single item."""
    return item.wattage * usage_hours(item.time_slots) * (item.days_per_week / 7) / 1000


def top_consumers(named_items, limit: int = 5) -> list[dict]:
    """Rank (name, room, usage) entries by average daily kWh."""
    ranked = [
        {
            "name": name,
            "room": room,
            "wattage": usage.wattage,
            "hours": usage_hours(usage.time_slots),
            "days_per_week": usage.days_per_week,
            "daily_kwh": item_daily_kwh(usage),
        }
        for name, room, usage in named_items
    ]
    ranked.sort(key=lambda r: r["daily_kwh"], reverse=True)
    return ranked[:limit]


def room_breakdown(named_items) -> list[dict]:
    """Rated watts and daily kWh per room, in first-seen room order."""
    rooms: dict[str, dict] = {}
    total_watts = 0.0

    for name, room, usage in named_items:
        entry = rooms.setdefault(room, {"room": room, "items": 0, "watts": 0.0, "daily_kwh": 0.0})
        entry["items"] += 1
        entry["watts"] += usage.wattage
        entry["daily_kwh"] += item_daily_kwh(usage)
        total_watts += usage.wattage

    for entry in rooms.values():
        entry["percent_of_watts"] = (
            round(entry["watts"] / total_watts * 100, 1) if total_watts > 0 else 0
        )

    return list(rooms.values())
