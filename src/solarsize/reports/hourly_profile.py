"""Generate an HTML report of the hourly load profile and solar packages."""

import json
from datetime import datetime
from html import escape

from ..schedule import format_hour


def format_package_rows(packages: list[dict]) -> str:
    """Table rows for the package comparison."""
    rows = []
    for pkg in packages:
        payback = f"{pkg['payback_years']} yrs" if pkg["payback_years"] is not None else "-"
        rows.append(f"""
                    <tr class="border-t border-gray-200">
                        <td class="py-3 font-semibold text-gray-800">{escape(pkg['name'])}</td>
                        <td class="py-3">{pkg['panel_count']} x {pkg['panel_watts']}W ({pkg['array_kw']} kW)</td>
                        <td class="py-3">{pkg['battery_kwh']} kWh ({pkg['battery_count']})</td>
                        <td class="py-3">{pkg['inverter_kva']} kVA</td>
                        <td class="py-3 font-semibold text-emerald-700">{escape(pkg['price_display'])}</td>
                        <td class="py-3">{payback}</td>
                    </tr>""")
    return "".join(rows)


def generate_hourly_report(data: dict) -> str:
    """Generate HTML report with a stacked solar/battery hourly load chart.

    Args:
        data: estimate dict from ``get_estimate``

    Returns:
        Complete HTML document as a string
    """
    hourly = data["hourly"]
    if not any(h["total_watts"] for h in hourly):
        return "<html><body><p>No equipment load to chart</p></body></html>"

    labels = json.dumps([h["label"] for h in hourly])
    solar = json.dumps([h["solar_watts"] for h in hourly])
    battery = json.dumps([h["battery_watts"] for h in hourly])

    profile = data["profile"]
    loc = data["location"]
    title = f"{data['space']['name']} - {data['country']['name']}"
    sun_window = f"{format_hour(loc['sun_start'])} - {format_hour(loc['sun_end'])}"
    generated_date = datetime.now().strftime("%Y-%m-%d %H:%M")

    if data["packages"]:
        packages_html = f"""
            <table class="w-full text-sm text-left text-gray-600">
                <thead>
                    <tr class="text-gray-500 uppercase text-xs">
                        <th class="py-2">Package</th>
                        <th class="py-2">Panels</th>
                        <th class="py-2">Battery</th>
                        <th class="py-2">Inverter</th>
                        <th class="py-2">Price</th>
                        <th class="py-2">Payback</th>
                    </tr>
                </thead>
                <tbody>{format_package_rows(data['packages'])}
                </tbody>
            </table>"""
    else:
        packages_html = f'<p class="text-gray-500">{escape(data["message"] or "No packages")}</p>'

    html = f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Hourly Load Profile</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
    <style>
        .gradient-bg {{
            background: linear-gradient(135deg, #78350f 0%, #1c1917 100%);
        }}
        .card {{
            background: rgba(255, 255, 255, 0.95);
            backdrop-filter: blur(10px);
        }}
    </style>
</head>
<body class="gradient-bg min-h-screen">
    <div class="container mx-auto px-4 py-8">
        <header class="text-center mb-8">
            <h1 class="text-4xl font-bold text-white mb-2">Hourly Load Profile</h1>
            <p class="text-amber-200">{escape(title)}</p>
            <p class="text-amber-300 text-sm mt-2">Solar hours {sun_window} (amber) vs battery hours (indigo) - watts per hour</p>
        </header>

        <div class="grid grid-cols-2 md:grid-cols-4 gap-4 mb-6">
            <div class="card rounded-xl p-4 shadow-lg text-center">
                <div class="text-xs text-gray-500">Daily usage</div>
                <div class="text-2xl font-bold text-gray-800">{profile['daily_kwh']} kWh</div>
            </div>
            <div class="card rounded-xl p-4 shadow-lg text-center">
                <div class="text-xs text-gray-500">Solar hours</div>
                <div class="text-2xl font-bold text-amber-600">{profile['solar_kwh']} kWh</div>
            </div>
            <div class="card rounded-xl p-4 shadow-lg text-center">
                <div class="text-xs text-gray-500">Battery hours</div>
                <div class="text-2xl font-bold text-indigo-600">{profile['battery_kwh']} kWh</div>
            </div>
            <div class="card rounded-xl p-4 shadow-lg text-center">
                <div class="text-xs text-gray-500">Peak hourly load</div>
                <div class="text-2xl font-bold text-gray-800">{data['peak_hour_watts']:,.0f} W</div>
            </div>
        </div>

        <div class="card rounded-xl p-4 shadow-lg mb-6">
            <div class="h-80">
                <canvas id="hourly-chart"></canvas>
            </div>
        </div>

        <div class="card rounded-xl p-6 shadow-lg">
            <h2 class="text-xl font-bold text-gray-800 mb-4">Solar Packages</h2>
            {packages_html}
        </div>

        <footer class="text-center text-amber-200 text-sm py-8">
            <p>Generated {generated_date}</p>
        </footer>
    </div>

    <script>
        const ctx = document.getElementById('hourly-chart').getContext('2d');
        new Chart(ctx, {{
            type: 'bar',
            data: {{
                labels: {labels},
                datasets: [{{
                    label: 'Solar',
                    data: {solar},
                    backgroundColor: 'rgba(245, 158, 11, 0.8)',
                }}, {{
                    label: 'Battery',
                    data: {battery},
                    backgroundColor: 'rgba(99, 102, 241, 0.8)',
                }}]
            }},
            options: {{
                responsive: true,
                maintainAspectRatio: false,
                interaction: {{
                    intersect: false,
                    mode: 'index'
                }},
                scales: {{
                    x: {{
                        stacked: true,
                        grid: {{ display: false }},
                        ticks: {{ font: {{ size: 9 }}, color: '#9ca3af' }}
                    }},
                    y: {{
                        stacked: true,
                        min: 0,
                        ticks: {{ font: {{ size: 9 }}, color: '#9ca3af' }},
                        grid: {{ color: 'rgba(0,0,0,0.05)' }}
                    }}
                }}
            }}
        }});
    </script>
</body>
</html>'''

    return html
