"""Tests for the hourly load profile report."""

from pathlib import Path

import pytest
from solarsize.catalog import load_catalog
from solarsize.household import load_household, parse_household
from solarsize.analysis.summary import get_estimate
from solarsize.reports.hourly_profile import format_package_rows, generate_hourly_report

ROOT = Path(__file__).parent.parent.parent


@pytest.fixture(scope="module")
def catalog():
    return load_catalog(ROOT / "config")


def test_report_with_packages(catalog):
    """Test the report charts the hourly split and lists packages."""
    estimate = get_estimate(load_household(ROOT / "config" / "household.example.yaml"), catalog)
    html = generate_hourly_report(estimate)

    assert html.startswith("<!DOCTYPE html>")
    assert "3 Bedroom House - Nigeria" in html
    assert "label: 'Solar'" in html
    assert "label: 'Battery'" in html
    for pkg in estimate["packages"]:
        assert pkg["price_display"] in html


def test_report_without_load(catalog):
    """Test an empty household gets a placeholder page."""
    estimate = get_estimate(parse_household({"country": "NG", "space": "studio"}), catalog)
    assert generate_hourly_report(estimate) == "<html><body><p>No equipment load to chart</p></body></html>"


def test_format_package_rows_escapes_and_handles_no_payback():
    rows = format_package_rows([{
        "name": "<Basic>",
        "panel_count": 2,
        "panel_watts": 550,
        "array_kw": 1.1,
        "battery_kwh": 2.5,
        "battery_count": 1,
        "inverter_kva": 1.5,
        "price_display": "$1,000",
        "payback_years": None,
    }])
    assert "&lt;Basic&gt;" in rows
    assert "<td class=\"py-3\">-</td>" in rows
