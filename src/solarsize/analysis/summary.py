"""Compose a full solar estimate for a household and format it as text."""

from ..catalog import Catalog
from ..household import Household, resolve_equipment
from ..pricing import price_packages
from ..schedule import format_hour
from .costs import current_costs, generator_cost, grid_cost, ownership
from .profile import aggregate, hourly_peak_watts, hourly_profile, room_breakdown, top_consumers
from .sizing import SizingError, size_packages


def get_estimate(household: Household, catalog: Catalog) -> dict:
    """Energy profile, running costs and priced solar packages for a household."""
    country = catalog.country(household.country)
    space = catalog.space(household.space)
    location = country.location

    active = resolve_equipment(household, catalog)
    usages = [item.usage for item in active]
    named = [(item.name, item.room_name, item.usage) for item in active]

    profile = aggregate(usages, location.sun_start, location.sun_end)
    hourly = hourly_profile(usages, location.sun_start, location.sun_end)

    grid = None
    if household.grid is not None:
        tariff = household.grid.tariff if household.grid.tariff is not None else country.avg_tariff
        grid = grid_cost(profile.daily_kwh, tariff, household.grid.power_hours)
        grid["tariff"] = tariff
        grid["power_hours"] = household.grid.power_hours

    generator = None
    if household.generator is not None:
        generator = generator_cost(household.generator, country.fuel_price_per_litre)

    current = current_costs(
        grid or {"monthly_cost": 0},
        generator or {"total_monthly": 0},
    )

    packages = []
    message = None
    try:
        priced = price_packages(size_packages(profile, location), country.currency)
    except SizingError as e:
        priced = []
        message = str(e)

    for p in priced:
        pkg = p.package
        own = ownership(p, current["annual"])
        packages.append({
            "name": pkg.name,
            "description": pkg.description,
            "panel_count": pkg.panel_count,
            "panel_watts": pkg.panel_watts_each,
            "array_kw": round(pkg.array_kw, 2),
            "battery_kwh": pkg.battery_kwh,
            "battery_count": pkg.battery_count,
            "inverter_kva": pkg.inverter_kva,
            "solar_direct_kwh": round(pkg.solar_direct_kwh, 2),
            "battery_required_kwh": round(pkg.battery_required_kwh, 2),
            "price": p.estimated_cost_local,
            "price_display": country.format_amount(p.estimated_cost_local),
            "breakdown_usd": {k: round(v, 2) for k, v in p.breakdown_usd.items()},
            "payback_years": round(own["payback_years"], 1) if own["payback_years"] is not None else None,
            "five_year_savings": own["five_year_savings"],
            "ten_year_savings": own["ten_year_savings"],
        })

    return {
        "country": {
            "code": country.code,
            "name": country.name,
            "currency": country.currency,
            "symbol": country.currency_symbol,
        },
        "space": {"id": space.id, "name": space.name},
        "location": {
            "sun_hours": location.sun_hours,
            "sun_start": location.sun_start,
            "sun_end": location.sun_end,
        },
        "equipment_count": len(active),
        "profile": {
            "total_watts": profile.total_watts,
            "daily_kwh": round(profile.daily_kwh, 2),
            "solar_kwh": round(profile.solar_kwh, 2),
            "battery_kwh": round(profile.battery_kwh, 2),
            "solar_ratio": round(profile.solar_ratio, 3),
            "solar_percent": round(profile.solar_ratio * 100, 1),
            "monthly_kwh": round(profile.daily_kwh * 30, 1),
        },
        "peak_hour_watts": hourly_peak_watts(usages, location.sun_start, location.sun_end),
        "hourly": [
            {
                "hour": h.hour,
                "label": format_hour(h.hour),
                "total_watts": h.total_watts,
                "solar_watts": h.solar_watts,
                "battery_watts": h.battery_watts,
            }
            for h in hourly
        ],
        "top_consumers": [
            {**c, "daily_kwh": round(c["daily_kwh"], 2)} for c in top_consumers(named)
        ],
        "rooms": [
            {**r, "daily_kwh": round(r["daily_kwh"], 2)} for r in room_breakdown(named)
        ],
        "costs": {
            "grid": grid,
            "generator": generator,
            "current": current,
        },
        "packages": packages,
        "message": message,
    }


def format_estimate_text(data: dict) -> str:
    """Format an estimate as human-readable text."""
    profile = data["profile"]
    symbol = data["country"]["symbol"]
    loc = data["location"]

    lines = [
        f"Solar Estimate: {data['space']['name']} in {data['country']['name']}",
        f"(sun {format_hour(loc['sun_start'])} - {format_hour(loc['sun_end'])}, "
        f"{loc['sun_hours']} peak sun hours)",
        "",
        "Energy Profile:",
        f"  - Equipment: {data['equipment_count']} items, {profile['total_watts']:,.0f} W rated",
        f"  - Peak hourly load: {data['peak_hour_watts']:,.0f} W",
        f"  - Daily usage: {profile['daily_kwh']} kWh ({profile['monthly_kwh']} kWh/month)",
        f"  - Solar hours: {profile['solar_kwh']} kWh ({profile['solar_percent']}%)",
        f"  - Battery hours: {profile['battery_kwh']} kWh",
    ]

    if data["top_consumers"]:
        lines.extend(["", "Top Consumers:"])
        for c in data["top_consumers"]:
            lines.append(f"  - {c['name']} ({c['room']}): {c['daily_kwh']} kWh/day")

    costs = data["costs"]
    if costs["grid"] or costs["generator"]:
        lines.extend(["", "Current Costs:"])
        if costs["grid"]:
            lines.append(f"  - Grid: {symbol}{costs['grid']['monthly_cost']:,.0f}/month")
        if costs["generator"]:
            lines.append(f"  - Generator: {symbol}{costs['generator']['total_monthly']:,.0f}/month")
        lines.append(f"  - Total: {symbol}{costs['current']['annual']:,.0f}/year")

    lines.append("")
    if not data["packages"]:
        lines.append(data["message"] or "No solar packages available.")
        return "\n".join(lines)

    lines.append("Solar Packages:")
    for pkg in data["packages"]:
        lines.extend([
            f"  {pkg['name']}: {pkg['price_display']}",
            f"    - {pkg['panel_count']} x {pkg['panel_watts']}W panels ({pkg['array_kw']} kW)",
            f"    - {pkg['battery_kwh']} kWh battery ({pkg['battery_count']} units)",
            f"    - {pkg['inverter_kva']} kVA inverter",
        ])
        if pkg["payback_years"] is not None:
            lines.append(f"    - Payback: {pkg['payback_years']} years")

    return "\n".join(lines)
