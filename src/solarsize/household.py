"""Household description files.

A household file is YAML naming the country, the space type, room counts, the
equipment in use per room and, optionally, grid and generator details used for
the running-cost comparison. See ``config/household.example.yaml``.
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .catalog import CUSTOM_SLOT, Catalog, CatalogError, custom_equipment
from .models import EquipmentUsage, TimeSlot
from .schedule import ALWAYS_ON, DAYS_PER_WEEK_PRESETS, MAX_SLOTS, days_for_preset, parse_slot

MAX_QUANTITY = 20
DEFAULT_POWER_HOURS = 12


@dataclass(frozen=True)
class EquipmentSelection:
    room: str  # expanded room instance id, e.g. "bedroom-2"
    id: str
    selections: dict = field(default_factory=dict)
    quantity: int = 1
    slots: tuple[TimeSlot, ...] | None = None  # None -> catalog default
    days_per_week: int = 7


@dataclass(frozen=True)
class CustomEquipment:
    room: str
    name: str
    wattage: float
    quantity: int = 1
    slots: tuple[TimeSlot, ...] | None = None
    days_per_week: int = 7


@dataclass(frozen=True)
class GridSupply:
    tariff: float | None = None  # None -> country average
    power_hours: int = DEFAULT_POWER_HOURS  # hours of grid supply per day


@dataclass(frozen=True)
class Generator:
    fuel_price: float | None = None  # None -> country fuel price
    litres_per_fill: float = 10
    fills_per_week: float = 2
    maintenance: float = 10000  # per month, local currency


@dataclass(frozen=True)
class Household:
    country: str
    space: str
    rooms: dict = field(default_factory=dict)
    bq: bool = False
    equipment: tuple[EquipmentSelection, ...] = ()
    custom: tuple[CustomEquipment, ...] = ()
    grid: GridSupply | None = None
    generator: Generator | None = None


@dataclass(frozen=True)
class ActiveEquipment:
    """An enabled item with its wattage resolved."""

    room_id: str
    room_name: str
    equipment_id: str
    name: str
    wattage: float
    time_slots: tuple[TimeSlot, ...]
    days_per_week: int = 7

    @property
    def usage(self) -> EquipmentUsage:
        return EquipmentUsage(
            wattage=self.wattage, time_slots=self.time_slots, days_per_week=self.days_per_week
        )


def parse_slots(values) -> tuple[TimeSlot, ...] | None:
    """Parse a list of slot strings. Any 24h slot makes the item always on."""
    if values is None:
        return None
    if isinstance(values, str):
        values = [values]
    slots = tuple(parse_slot(v) for v in values)
    if not slots:
        raise ValueError("At least one time slot is required")
    if any(s.is_24h for s in slots):
        return (ALWAYS_ON,)
    if len(slots) > MAX_SLOTS:
        raise ValueError(f"At most {MAX_SLOTS} time slots per item, got {len(slots)}")
    return slots


def parse_days(value) -> int:
    """Days per week from a number or a preset name ('weekdays'), clamped to 1-7."""
    if value is None:
        return 7
    if isinstance(value, str) and value in DAYS_PER_WEEK_PRESETS:
        return days_for_preset(value)
    return max(1, min(7, int(value)))


def clamp_quantity(value) -> int:
    return max(1, min(MAX_QUANTITY, int(value)))


def _required(item, key: str, section: str):
    """Value of a required key in one entry of a household list."""
    if not isinstance(item, dict) or item.get(key) is None:
        raise ValueError(f"Every '{section}' entry needs a '{key}'")
    return item[key]


def parse_household(data: dict) -> Household:
    """Build a Household from a parsed YAML document."""
    if not isinstance(data, dict) or "country" not in data or "space" not in data:
        raise ValueError("Household file must set 'country' and 'space'")

    equipment = tuple(
        EquipmentSelection(
            room=str(_required(item, "room", "equipment")),
            id=str(_required(item, "id", "equipment")),
            selections={k: str(v) for k, v in (item.get("selections") or {}).items()},
            quantity=clamp_quantity(item.get("quantity", 1)),
            slots=parse_slots(item.get("slots")),
            days_per_week=parse_days(item.get("days_per_week")),
        )
        for item in data.get("equipment") or []
    )

    custom = tuple(
        CustomEquipment(
            room=str(_required(item, "room", "custom")),
            name=str(_required(item, "name", "custom")),
            wattage=float(_required(item, "wattage", "custom")),
            quantity=clamp_quantity(item.get("quantity", 1)),
            slots=parse_slots(item.get("slots")),
            days_per_week=parse_days(item.get("days_per_week")),
        )
        for item in data.get("custom") or []
    )

    grid = None
    if data.get("grid") is not None:
        g = data["grid"]
        power_hours = int(g.get("power_hours", DEFAULT_POWER_HOURS))
        if not 0 <= power_hours <= 24:
            raise ValueError(f"power_hours must be between 0 and 24, got {power_hours}")
        grid = GridSupply(tariff=g.get("tariff"), power_hours=power_hours)

    generator = None
    if data.get("generator") is not None:
        gen = data["generator"]
        generator = Generator(
            fuel_price=gen.get("fuel_price"),
            litres_per_fill=gen.get("litres_per_fill", 10),
            fills_per_week=gen.get("fills_per_week", 2),
            maintenance=gen.get("maintenance", 10000),
        )

    return Household(
        country=str(data["country"]).upper(),
        space=str(data["space"]),
        rooms={str(k): int(v) for k, v in (data.get("rooms") or {}).items()},
        bq=bool(data.get("bq", False)),
        equipment=equipment,
        custom=custom,
        grid=grid,
        generator=generator,
    )


def load_household(path: Path) -> Household:
    """Load a household description from a YAML file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Could not parse household file {path}: {e}") from e
    return parse_household(data)


def resolve_equipment(household: Household, catalog: Catalog) -> list[ActiveEquipment]:
    """Resolve every enabled item to its wattage and schedule.

    Raises:
        CatalogError: for unknown spaces, room instances or equipment
    """
    rooms = {
        room.instance_id: room
        for room in catalog.expand(household.space, household.rooms, household.bq)
    }

    def get_room(room_id: str):
        if room_id not in rooms:
            raise CatalogError(
                f"Unknown room '{room_id}' for {household.space}; expected one of: {', '.join(rooms)}"
            )
        return rooms[room_id]

    active = []
    for item in household.equipment:
        room = get_room(item.room)
        eq = room.get_equipment(item.id)
        active.append(
            ActiveEquipment(
                room_id=room.instance_id,
                room_name=room.name,
                equipment_id=eq.id,
                name=eq.name,
                wattage=eq.wattage(item.selections, item.quantity),
                time_slots=item.slots or catalog.default_slots(eq.id),
                days_per_week=item.days_per_week,
            )
        )

    for item in household.custom:
        room = get_room(item.room)
        eq = custom_equipment(item.name, item.wattage)
        active.append(
            ActiveEquipment(
                room_id=room.instance_id,
                room_name=room.name,
                equipment_id=eq.id,
                name=eq.name,
                wattage=eq.wattage(quantity=item.quantity),
                time_slots=item.slots or (CUSTOM_SLOT,),
                days_per_week=item.days_per_week,
            )
        )

    return active
