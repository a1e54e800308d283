# ABOUTME: Client-side calls to the dashboard backend routes.
# ABOUTME: Raises httpx errors on transport/non-2xx failures and pydantic errors on malformed payloads.

import httpx

from src.models import ConversionResult, Quote, WeatherReport


async def fetch_quote(client: httpx.AsyncClient, base_url: str) -> Quote:
    """Fetch a random quote from GET /api/quote."""
    resp = await client.get(f"{base_url}/api/quote")
    resp.raise_for_status()
    return Quote.model_validate(resp.json())


async def fetch_weather(client: httpx.AsyncClient, base_url: str, city: str | None = None) -> WeatherReport:
    """Fetch current weather and forecast from GET /api/weather.

    Without a city the server applies its default city.
    """
    params = {"city": city} if city else {}
    resp = await client.get(f"{base_url}/api/weather", params=params)
    resp.raise_for_status()
    return WeatherReport.model_validate(resp.json())


async def fetch_conversion(client: httpx.AsyncClient, base_url: str, amount: float) -> ConversionResult:
    """Convert an amount via GET /api/currency."""
    resp = await client.get(f"{base_url}/api/currency", params={"amount": amount})
    resp.raise_for_status()
    return ConversionResult.model_validate(resp.json())
