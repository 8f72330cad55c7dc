"""Equipment catalog, country data and room expansion.

The catalog is read from YAML once (``config/catalog.yaml`` and
``config/countries.yaml``) and passed explicitly to whatever needs it. All records
are frozen; lookup tables are read-only mappings.
"""

import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml
from dotenv import load_dotenv

from .models import LocationContext, TimeSlot
from .schedule import DEFAULT_SLOT, parse_slot

# Load environment variables from .env file
load_dotenv()

CATALOG_FILE = "catalog.yaml"
COUNTRIES_FILE = "countries.yaml"

CUSTOM_SLOT = TimeSlot(8, 18)


class CatalogError(ValueError):
    """Raised for unknown countries, spaces, rooms or equipment."""


def get_config_dir() -> Path:
    """Find the directory holding catalog.yaml and countries.yaml."""
    candidates = []
    if os.environ.get("SOLARSIZE_CONFIG_DIR"):
        candidates.append(Path(os.environ["SOLARSIZE_CONFIG_DIR"]))
    candidates += [
        Path.cwd() / "config",
        Path(__file__).parent.parent.parent / "config",
        Path.home() / ".config" / "solarsize",
    ]
    for path in candidates:
        if (path / CATALOG_FILE).exists() and (path / COUNTRIES_FILE).exists():
            return path
    raise FileNotFoundError(f"Could not find config/{CATALOG_FILE} and config/{COUNTRIES_FILE}")


# Wattage rules


@dataclass(frozen=True)
class Lookup:
    """Map one selection field to a number, with a fallback."""

    key: str
    values: Mapping[str, float] = field(default_factory=dict)
    default: float = 0

    def get(self, selections: Mapping) -> float | None:
        value = selections.get(self.key)
        if value is None:
            return None
        return self.values.get(str(value))


def _whole_number(value) -> int | None:
    """Leading integer of a selection value, e.g. '12' or '12.5' -> 12."""
    match = re.match(r"\s*(-?\d+)", str(value)) if value is not None else None
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class WattageRule:
    """Resolve rated watts for an item from its selections and quantity."""

    base: Lookup | None = None
    multiplier: Lookup | None = None
    numeric: Lookup | None = None
    fixed: float | None = None
    overrides: Lookup | None = None

    def resolve(self, selections: Mapping | None = None, quantity: int = 1) -> int:
        selections = selections or {}

        if self.overrides is not None:
            override = self.overrides.get(selections)
            if override is not None:
                return math.floor(override + 0.5) * quantity

        if self.fixed is not None:
            watts = self.fixed
        elif self.numeric is not None:
            watts = _whole_number(selections.get(self.numeric.key)) or self.numeric.default
        elif self.base is not None:
            watts = self.base.get(selections) or self.base.default
        else:
            watts = 0

        if self.multiplier is not None:
            watts *= self.multiplier.get(selections) or 1

        return math.floor(watts + 0.5) * quantity


# Catalog records


@dataclass(frozen=True)
class TariffBand:
    label: str
    rate: float


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    currency: str
    currency_symbol: str
    avg_tariff: float
    fuel_price_per_litre: float
    sun_hours: float
    sun_start: int = 6
    sun_end: int = 18
    tariff_bands: tuple[TariffBand, ...] = ()

    @property
    def location(self) -> LocationContext:
        return LocationContext(
            sun_hours=self.sun_hours,
            currency_code=self.currency,
            sun_start=self.sun_start,
            sun_end=self.sun_end,
        )

    def format_amount(self, amount: float) -> str:
        """Format a local-currency amount, e.g. '₦1,234,560'."""
        return f"{self.currency_symbol}{amount:,.0f}"


@dataclass(frozen=True)
class EquipmentDef:
    id: str
    name: str
    rule: WattageRule
    fields: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def wattage(self, selections: Mapping | None = None, quantity: int = 1) -> int:
        return self.rule.resolve(selections, quantity)


@dataclass(frozen=True)
class RoomTemplate:
    id: str
    name: str
    equipment: tuple[EquipmentDef, ...] = ()


@dataclass(frozen=True)
class RoomCount:
    room_id: str
    min: int
    max: int
    default: int


@dataclass(frozen=True)
class SpaceType:
    id: str
    name: str
    description: str
    room_set: str
    bq_available: bool = False
    room_counts: tuple[RoomCount, ...] = ()


@dataclass(frozen=True)
class ExpandedRoom:
    """One concrete room in a dwelling, e.g. the second of three bedrooms."""

    instance_id: str
    name: str
    room_type_id: str
    equipment: tuple[EquipmentDef, ...]
    instance_num: int = 1
    total_instances: int = 1

    def get_equipment(self, equipment_id: str) -> EquipmentDef:
        for eq in self.equipment:
            if eq.id == equipment_id:
                return eq
        raise CatalogError(f"No equipment '{equipment_id}' in room '{self.instance_id}'")


@dataclass(frozen=True)
class CustomSuggestion:
    name: str
    wattage: float
    category: str


def clamp_room_count(room_count: RoomCount, value: int) -> int:
    return max(room_count.min, min(room_count.max, value))


def expand_rooms(
    rooms, room_counts: Mapping[str, int], bq_room: RoomTemplate | None = None
) -> list[ExpandedRoom]:
    """Repeat each room template by its count and append the BQ room if given.

    Rooms without a count appear once; a count of 0 drops the room. Repeated rooms
    get instance ids ``bedroom-1``, ``bedroom-2`` and names ``Bedroom 1``, ``Bedroom 2``.
    """
    expanded = []
    for room in rooms:
        count = room_counts.get(room.id, 1)
        for i in range(1, count + 1):
            expanded.append(
                ExpandedRoom(
                    instance_id=f"{room.id}-{i}" if count > 1 else room.id,
                    name=f"{room.name} {i}" if count > 1 else room.name,
                    room_type_id=room.id,
                    equipment=room.equipment,
                    instance_num=i,
                    total_instances=count,
                )
            )

    if bq_room is not None:
        expanded.append(
            ExpandedRoom(
                instance_id=bq_room.id,
                name=bq_room.name,
                room_type_id=bq_room.id,
                equipment=bq_room.equipment,
            )
        )

    return expanded


def custom_equipment(name: str, wattage: float) -> EquipmentDef:
    """Equipment definition for a user-described appliance with fixed watts."""
    if not name.strip():
        raise ValueError("Custom equipment needs a name")
    if wattage <= 0:
        raise ValueError(f"Custom equipment wattage must be positive: {name}")
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return EquipmentDef(id=f"custom-{slug}", name=name, rule=WattageRule(fixed=wattage))


@dataclass(frozen=True)
class Catalog:
    countries: Mapping[str, Country]
    spaces: Mapping[str, SpaceType]
    room_sets: Mapping[str, tuple[RoomTemplate, ...]]
    bq_room: RoomTemplate
    usage_times: Mapping[str, tuple[TimeSlot, ...]] = field(default_factory=dict)
    custom_suggestions: tuple[CustomSuggestion, ...] = ()

    def country(self, code: str) -> Country:
        try:
            return self.countries[code.upper()]
        except KeyError:
            raise CatalogError(f"Unknown country: {code}") from None

    def space(self, space_id: str) -> SpaceType:
        try:
            return self.spaces[space_id]
        except KeyError:
            raise CatalogError(f"Unknown space type: {space_id}") from None

    def rooms_for_space(self, space_id: str) -> tuple[RoomTemplate, ...]:
        return self.room_sets[self.space(space_id).room_set]

    def default_slots(self, equipment_id: str) -> tuple[TimeSlot, ...]:
        return self.usage_times.get(equipment_id, (DEFAULT_SLOT,))

    def room_counts(self, space_id: str, requested: Mapping[str, int] | None = None) -> dict[str, int]:
        """Room counts for a space, clamped to its limits.

        Raises:
            CatalogError: if a count is given for a room the space does not let you vary
        """
        space = self.space(space_id)
        requested = dict(requested or {})
        counts = {}
        for rc in space.room_counts:
            counts[rc.room_id] = clamp_room_count(rc, int(requested.pop(rc.room_id, rc.default)))
        if requested:
            raise CatalogError(
                f"Room count not adjustable in {space_id}: {', '.join(sorted(requested))}"
            )
        return counts

    def expand(
        self, space_id: str, requested: Mapping[str, int] | None = None, has_bq: bool = False
    ) -> list[ExpandedRoom]:
        space = self.space(space_id)
        bq = self.bq_room if has_bq and space.bq_available else None
        return expand_rooms(self.rooms_for_space(space_id), self.room_counts(space_id, requested), bq)


# Loading


def _parse_lookup(data: dict | None) -> Lookup | None:
    if data is None:
        return None
    return Lookup(
        key=data["field"],
        values=MappingProxyType({str(k): v for k, v in data.get("values", {}).items()}),
        default=data.get("default", 0),
    )


def _parse_rule(data: dict) -> WattageRule:
    return WattageRule(
        base=_parse_lookup(data.get("base")),
        multiplier=_parse_lookup(data.get("multiplier")),
        numeric=_parse_lookup(data.get("numeric")),
        fixed=data.get("fixed"),
        overrides=_parse_lookup(data.get("overrides")),
    )


def _parse_equipment(data: dict, rules: Mapping[str, WattageRule]) -> EquipmentDef:
    rule = data["rule"]
    if isinstance(rule, str):
        if rule not in rules:
            raise CatalogError(f"Unknown wattage rule '{rule}' for equipment '{data['id']}'")
        rule = rules[rule]
    else:
        rule = _parse_rule(rule)
    return EquipmentDef(
        id=data["id"],
        name=data["name"],
        rule=rule,
        fields=MappingProxyType(
            {key: tuple(str(v) for v in options) for key, options in data.get("fields", {}).items()}
        ),
    )


def _parse_room(data: dict, rules: Mapping[str, WattageRule]) -> RoomTemplate:
    return RoomTemplate(
        id=data["id"],
        name=data["name"],
        equipment=tuple(_parse_equipment(eq, rules) for eq in data.get("equipment", [])),
    )


def _parse_country(data: dict) -> Country:
    return Country(
        code=data["code"],
        name=data["name"],
        currency=data["currency"],
        currency_symbol=data.get("symbol", data["currency"]),
        avg_tariff=data["avg_tariff"],
        fuel_price_per_litre=data["fuel_price"],
        sun_hours=data["sun_hours"],
        sun_start=data.get("sun_start", 6),
        sun_end=data.get("sun_end", 18),
        tariff_bands=tuple(
            TariffBand(label=b["label"], rate=b["rate"]) for b in data.get("tariff_bands", [])
        ),
    )


def _parse_space(data: dict) -> SpaceType:
    return SpaceType(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description", ""),
        room_set=data["room_set"],
        bq_available=data.get("bq_available", False),
        room_counts=tuple(
            RoomCount(room_id=rc["room"], min=rc["min"], max=rc["max"], default=rc["default"])
            for rc in data.get("room_counts", [])
        ),
    )


def build_catalog(catalog_data: dict, countries_data: dict) -> Catalog:
    """Build a catalog from already-parsed YAML documents."""
    rules = {name: _parse_rule(rule) for name, rule in catalog_data.get("wattage_rules", {}).items()}

    room_sets = {
        name: tuple(_parse_room(room, rules) for room in rooms)
        for name, rooms in catalog_data.get("room_sets", {}).items()
    }

    spaces = {}
    for space_data in catalog_data.get("spaces", []):
        space = _parse_space(space_data)
        if space.room_set not in room_sets:
            raise CatalogError(f"Space '{space.id}' uses unknown room set '{space.room_set}'")
        spaces[space.id] = space

    usage_times = {
        eq_id: (parse_slot(slot),) for eq_id, slot in catalog_data.get("usage_times", {}).items()
    }

    countries = {}
    for country_data in countries_data.get("countries", []):
        country = _parse_country(country_data)
        countries[country.code] = country

    return Catalog(
        countries=MappingProxyType(countries),
        spaces=MappingProxyType(spaces),
        room_sets=MappingProxyType(room_sets),
        bq_room=_parse_room(catalog_data["bq_room"], rules),
        usage_times=MappingProxyType(usage_times),
        custom_suggestions=tuple(
            CustomSuggestion(name=s["name"], wattage=s["wattage"], category=s.get("category", "Other"))
            for s in catalog_data.get("custom_suggestions", [])
        ),
    )


def load_catalog(config_dir: Path | None = None) -> Catalog:
    """Load the catalog and country data from YAML."""
    config_dir = Path(config_dir) if config_dir else get_config_dir()
    catalog_path = config_dir / CATALOG_FILE
    countries_path = config_dir / COUNTRIES_FILE
    for path in (catalog_path, countries_path):
        if not path.exists():
            raise FileNotFoundError(f"Could not find {path}")

    with open(catalog_path) as f:
        catalog_data = yaml.safe_load(f)
    with open(countries_path) as f:
        countries_data = yaml.safe_load(f)

    return build_catalog(catalog_data, countries_data)
