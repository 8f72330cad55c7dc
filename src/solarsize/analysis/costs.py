"""Current running costs (grid and generator) and solar ownership comparison."""

from ..household import Generator
from ..models import PricedPackage
from ..pricing import round_half_up

DAYS_PER_MONTH = 30
WEEKS_PER_MONTH = 4


def grid_cost(daily_kwh: float, tariff: float | None, power_hours: int) -> dict:
    """Monthly grid electricity cost for the hours the grid is actually on."""
    monthly_kwh = daily_kwh * DAYS_PER_MONTH
    grid_ratio = power_hours / 24
    monthly_grid_kwh = monthly_kwh * grid_ratio
    monthly_cost = round_half_up(monthly_grid_kwh * tariff) if tariff else 0

    return {
        "monthly_kwh": monthly_kwh,
        "grid_ratio": grid_ratio,
        "monthly_grid_kwh": monthly_grid_kwh,
        "daily_cost": round_half_up(daily_kwh * grid_ratio * tariff) if tariff else 0,
        "monthly_cost": monthly_cost,
        "annual_cost": monthly_cost * 12,
    }


def generator_cost(generator: Generator | None, fuel_price: float | None = None) -> dict:
    """Fuel and maintenance cost of running a generator.

    ``fuel_price`` is used when the generator does not set its own.
    """
    if generator is None:
        return {"weekly": 0, "monthly": 0, "annual": 0, "total_monthly": 0}

    price = generator.fuel_price if generator.fuel_price is not None else (fuel_price or 0)
    weekly = price * generator.litres_per_fill * generator.fills_per_week
    monthly = weekly * WEEKS_PER_MONTH
    annual = monthly * 12
    return {
        "weekly": weekly,
        "monthly": monthly,
        "annual": annual,
        "total_monthly": monthly + generator.maintenance,
    }


def current_costs(grid: dict, generator: dict) -> dict:
    monthly = grid["monthly_cost"] + generator["total_monthly"]
    return {
        "monthly": monthly,
        "annual": monthly * 12,
        "five_year": monthly * 12 * 5,
    }


def ownership(priced: PricedPackage, annual_spend: float) -> dict:
    """Payback period and net savings of a package against current spend."""
    price = priced.estimated_cost_local
    return {
        "price": price,
        "payback_years": price / annual_spend if annual_spend > 0 else None,
        "five_year_savings": annual_spend * 5 - price,
        "ten_year_savings": annual_spend * 10 - price,
    }
