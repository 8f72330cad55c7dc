"""Installed cost estimates for solar packages."""

import math
from dataclasses import dataclass

from .models import PricedPackage, SolarPackage

# Units of local currency per USD. Static table, not live exchange rates.
CURRENCY_RATES = {
    "NGN": 1600,
    "GHS": 15,
    "KES": 155,
    "ZAR": 18,
    "GBP": 0.79,
    "USD": 1,
    "INR": 84,
    "AED": 3.67,
    "XOF": 610,
    "XAF": 610,
    "TZS": 2600,
    "UGX": 3800,
    "RWF": 1300,
    "ETB": 56,
    "ZWL": 13,
    "ZMW": 25,
    "EGP": 50,
    "MAD": 10,
    "SAR": 3.75,
    "EUR": 0.92,
    "CAD": 1.36,
    "BRL": 5.0,
    "PKR": 280,
    "PHP": 56,
    "IDR": 15700,
    "AUD": 1.53,
}


@dataclass(frozen=True)
class CostModel:
    """Unit costs in USD."""

    panel_per_watt: float = 0.40
    battery_per_kwh: float = 200
    inverter_per_kva: float = 150
    installation_rate: float = 0.25  # share of hardware cost


DEFAULT_COST_MODEL = CostModel()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up."""
    return math.floor(value + 0.5)


def currency_rate(currency_code: str) -> float:
    """Local units per USD; unknown currencies are treated as USD."""
    return CURRENCY_RATES.get(currency_code, 1)


def cost_breakdown(pkg: SolarPackage, model: CostModel = DEFAULT_COST_MODEL) -> dict[str, float]:
    """USD cost of each component of a package."""
    panels = pkg.panel_count * pkg.panel_watts_each * model.panel_per_watt
    battery = pkg.battery_kwh * model.battery_per_kwh
    inverter = pkg.inverter_kva * model.inverter_per_kva
    installation = (panels + battery + inverter) * model.installation_rate
    return {
        "panels": panels,
        "battery": battery,
        "inverter": inverter,
        "installation": installation,
    }


def estimate_cost(
    pkg: SolarPackage, currency_code: str, model: CostModel = DEFAULT_COST_MODEL
) -> int:
    """Installed cost of a package in local currency, rounded half-up."""
    breakdown = cost_breakdown(pkg, model)
    total_usd = (
        breakdown["panels"] + breakdown["battery"] + breakdown["inverter"] + breakdown["installation"]
    )
    return round_half_up(total_usd * currency_rate(currency_code))


def price_packages(
    packages: list[SolarPackage], currency_code: str, model: CostModel = DEFAULT_COST_MODEL
) -> list[PricedPackage]:
    return [
        PricedPackage(
            package=pkg,
            currency_code=currency_code,
            estimated_cost_local=estimate_cost(pkg, currency_code, model),
            breakdown_usd=cost_breakdown(pkg, model),
        )
        for pkg in packages
    ]
