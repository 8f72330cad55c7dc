"""Data models for schedules, energy profiles and solar packages."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TimeSlot:
    """A daily period of use. ``end`` is exclusive and may wrap past midnight."""

    start: int = 0  # hour, 0-23
    end: int = 0  # hour, 0-23
    is_24h: bool = False


@dataclass(frozen=True)
class EquipmentUsage:
    """One enabled equipment item's contribution to the load."""

    wattage: float
    time_slots: tuple[TimeSlot, ...]
    days_per_week: int = 7


@dataclass(frozen=True)
class EnergyProfile:
    """System-wide energy totals for a set of equipment."""

    total_watts: float = 0.0  # rated sum, independent of schedule
    daily_kwh: float = 0.0
    solar_kwh: float = 0.0  # used inside the sun window
    battery_kwh: float = 0.0  # used outside the sun window
    solar_ratio: float = 0.0


@dataclass(frozen=True)
class HourlyLoad:
    """Load in a single hour of the day."""

    hour: int
    total_watts: float = 0.0
    solar_watts: float = 0.0
    battery_watts: float = 0.0


@dataclass(frozen=True)
class LocationContext:
    """Location data needed for sizing and pricing."""

    sun_hours: float
    currency_code: str
    sun_start: int = 6
    sun_end: int = 18


@dataclass(frozen=True)
class SolarPackage:
    """A recommended solar system tier."""

    name: str  # Essential, Standard or Premium
    description: str
    panel_watts_each: int
    panel_count: int
    battery_kwh: float
    battery_count: int
    inverter_kva: float
    solar_direct_kwh: float = 0.0
    battery_required_kwh: float = 0.0

    @property
    def array_kw(self) -> float:
        """Total panel array size in kW."""
        return self.panel_count * self.panel_watts_each / 1000


@dataclass(frozen=True)
class PricedPackage:
    """A solar package with its installed cost in local currency."""

    package: SolarPackage
    currency_code: str
    estimated_cost_local: int
    breakdown_usd: dict[str, float] = field(default_factory=dict)
