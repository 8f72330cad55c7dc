"""Quote requests for a chosen solar package.

Builds a quote payload from an estimate and posts it as JSON to the installer
endpoint configured in ``SOLARSIZE_QUOTE_URL``.
"""

import os
import time

import httpx
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

REFERENCE_PREFIX = "EX-"
BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class QuoteError(Exception):
    """Base exception for quote request errors."""
    pass


def get_quote_url() -> str:
    """Get the quote endpoint from environment variables."""
    url = os.environ.get("SOLARSIZE_QUOTE_URL")
    if not url:
        raise QuoteError("SOLARSIZE_QUOTE_URL environment variable not set")
    return url


def to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits))


def make_reference(timestamp_ms: int | None = None) -> str:
    """Short reference like 'EX-K3F9QZ' from the last six base-36 digits of a timestamp."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return REFERENCE_PREFIX + to_base36(timestamp_ms)[-6:]


def build_quote(estimate: dict, package_index: int, contact: dict, reference: str | None = None) -> dict:
    """Quote payload for one package of an estimate.

    Raises:
        QuoteError: if the contact lacks a name or email, or the package doesn't exist
    """
    name = (contact.get("name") or "").strip()
    email = (contact.get("email") or "").strip()
    if len(name) < 2:
        raise QuoteError("A contact name is required")
    if not email or "@" not in email:
        raise QuoteError("A valid contact email is required")

    packages = estimate.get("packages") or []
    if not 0 <= package_index < len(packages):
        raise QuoteError(estimate.get("message") or f"No package at index {package_index}")

    return {
        "reference": reference or make_reference(),
        "contact": {
            "name": name,
            "email": email,
            "phone": contact.get("phone") or "",
            "address": contact.get("address") or "",
            "notes": contact.get("notes") or "",
        },
        "country": estimate["country"]["code"],
        "currency": estimate["country"]["currency"],
        "space": estimate["space"]["id"],
        "profile": estimate["profile"],
        "package": packages[package_index],
    }


def send_quote(quote: dict, url: str | None = None, client: httpx.Client | None = None) -> dict:
    """POST a quote to the installer endpoint.

    Args:
        quote: payload from ``build_quote``
        url: endpoint (defaults to SOLARSIZE_QUOTE_URL env var)
        client: httpx client to use (a new one is created if None)

    Returns:
        The endpoint's JSON response, or its status and text if it sent no JSON
    """
    if url is None:
        url = get_quote_url()

    own_client = client is None
    if own_client:
        client = httpx.Client(timeout=30.0)

    try:
        response = client.post(url, json=quote)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise QuoteError(f"HTTP error from quote endpoint: {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise QuoteError(f"Network error sending quote: {e}") from e
    finally:
        if own_client:
            client.close()

    if "application/json" not in response.headers.get("content-type", ""):
        return {"status_code": response.status_code, "text": response.text}
    return response.json()
