"""Three-tier solar package sizing from an energy profile.

Capacity planning heuristics, not an optimiser. Panels cover daytime draw directly
plus the energy needed to recharge batteries for the hours outside the sun window.
"""

import math

from ..models import EnergyProfile, LocationContext, SolarPackage

PANEL_WATTS = 550  # W per panel
CHARGING_OVERHEAD = 1.2  # battery round-trip loss when charging from panels
SYSTEM_DERATE = 1.2  # padding for wiring, heat and soiling losses
BATTERY_HEADROOM = 1.2
INVERTER_HEADROOM = 1.25  # inverter rated at 125% of peak rated load
BATTERY_UNIT_KWH = 5

MIN_PANELS = 2
MIN_BATTERY_KWH = 2.5
MIN_INVERTER_KVA = 1.5

# Ratio above which the load is considered daytime-heavy
DAYTIME_HEAVY_RATIO = 0.6

# Tier multipliers and floors: (panels, battery kWh, inverter kVA)
ESSENTIAL_SCALE = (0.5, 0.4, 0.4)
ESSENTIAL_FLOOR = (2, 2.5, 1.5)
STANDARD_FLOOR = (4, 5, 3)
PREMIUM_SCALE = (1.3, 1.5, 1.3)
PREMIUM_FLOOR = (6, 10, 5)
PREMIUM_MIN_BATTERIES = 2

# Share of direct solar / battery energy each tier is expected to cover
COVERAGE = {
    "Essential": (0.5, 0.4),
    "Standard": (1.0, 1.0),
    "Premium": (1.3, 1.5),
}


class SizingError(ValueError):
    """Raised when a profile cannot be sized (e.g. no equipment enabled)."""


def system_size_kw(profile: EnergyProfile, sun_hours: float) -> float:
    """Array size in kW, rounded up to the nearest 0.1 kW."""
    panel_kwh_needed = profile.solar_kwh + profile.battery_kwh * CHARGING_OVERHEAD
    return math.ceil((panel_kwh_needed / sun_hours) * SYSTEM_DERATE * 10) / 10


def base_sizing(profile: EnergyProfile, location: LocationContext) -> dict:
    """Untiered panel count, battery capacity and inverter rating."""
    if profile.total_watts <= 0:
        raise SizingError("No equipment load to size a system for - add equipment first")
    if location.sun_hours <= 0:
        raise SizingError(f"Sun hours must be positive, got {location.sun_hours}")

    size_kw = system_size_kw(profile, location.sun_hours)
    return {
        "system_kw": size_kw,
        "panel_count": max(MIN_PANELS, math.ceil(size_kw * 1000 / PANEL_WATTS)),
        "battery_kwh": max(MIN_BATTERY_KWH, math.ceil(profile.battery_kwh * BATTERY_HEADROOM)),
        "inverter_kva": max(MIN_INVERTER_KVA, math.ceil(profile.total_watts * INVERTER_HEADROOM / 1000)),
    }


def describe_tier(name: str, solar_ratio: float) -> str:
    daytime_heavy = solar_ratio > DAYTIME_HEAVY_RATIO
    if name == "Essential":
        if daytime_heavy:
            return "Optimised for daytime usage, so fewer batteries are needed. Covers basic loads."
        return "Covers basic loads: lights, fans, phones, TV. Battery-focused for evening and night use."
    if name == "Standard":
        if daytime_heavy:
            return "Most of your usage falls in solar hours, so the panels do most of the work."
        return "Covers most household loads. Sized for your evening and night consumption."
    return "Full coverage including AC and heavy appliances. Complete energy independence."


def _package(name: str, profile: EnergyProfile, panels: int, battery_kwh: float,
             battery_count: int, inverter_kva: float) -> SolarPackage:
    solar_share, battery_share = COVERAGE[name]
    return SolarPackage(
        name=name,
        description=describe_tier(name, profile.solar_ratio),
        panel_watts_each=PANEL_WATTS,
        panel_count=panels,
        battery_kwh=battery_kwh,
        battery_count=battery_count,
        inverter_kva=inverter_kva,
        solar_direct_kwh=profile.solar_kwh * solar_share,
        battery_required_kwh=profile.battery_kwh * battery_share,
    )


def size_packages(profile: EnergyProfile, location: LocationContext) -> list[SolarPackage]:
    """Essential, Standard and Premium packages for a profile.

    Raises:
        SizingError: if the profile has no load or the location has no sun hours
    """
    base = base_sizing(profile, location)
    panels = base["panel_count"]
    battery = base["battery_kwh"]
    inverter = base["inverter_kva"]

    p_scale, b_scale, i_scale = ESSENTIAL_SCALE
    p_floor, b_floor, i_floor = ESSENTIAL_FLOOR
    essential = _package(
        "Essential",
        profile,
        panels=max(p_floor, math.ceil(panels * p_scale)),
        battery_kwh=max(b_floor, math.ceil(battery * b_scale)),
        battery_count=1,
        inverter_kva=max(i_floor, math.ceil(inverter * i_scale)),
    )

    p_floor, b_floor, i_floor = STANDARD_FLOOR
    standard_battery = max(b_floor, battery)
    standard = _package(
        "Standard",
        profile,
        panels=max(p_floor, panels),
        battery_kwh=standard_battery,
        battery_count=max(1, math.ceil(standard_battery / BATTERY_UNIT_KWH)),
        inverter_kva=max(i_floor, inverter),
    )

    p_scale, b_scale, i_scale = PREMIUM_SCALE
    p_floor, b_floor, i_floor = PREMIUM_FLOOR
    premium_battery = max(b_floor, math.ceil(battery * b_scale))
    premium = _package(
        "Premium",
        profile,
        panels=max(p_floor, math.ceil(panels * p_scale)),
        battery_kwh=premium_battery,
        battery_count=max(PREMIUM_MIN_BATTERIES, math.ceil(premium_battery / BATTERY_UNIT_KWH)),
        inverter_kva=max(i_floor, math.ceil(inverter * i_scale)),
    )

    return [essential, standard, premium]
