# ABOUTME: Upstream client for the three third-party APIs behind the dashboard.
# ABOUTME: Issues the outbound HTTP calls and returns raw JSON; httpx errors propagate to the caller.

from typing import Any

import httpx

from src.models import GeoLocation

QUOTE_URL = "https://dummyjson.com/quotes/random"
GEOCODING_URL = "https://api.openweathermap.org/geo/1.0/direct"
CURRENT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
EXCHANGE_RATE_URL = "https://v6.exchangerate-api.com/v6/{api_key}/latest/{base}"


async def fetch_random_quote(client: httpx.AsyncClient) -> Any:
    """Fetch one random quote from DummyJSON.

    Returns None when the upstream answers with an empty body. A non-JSON body
    raises ValueError.
    """
    resp = await client.get(QUOTE_URL)
    resp.raise_for_status()
    if not resp.content.strip():
        return None
    return resp.json()


async def geocode(client: httpx.AsyncClient, city_name: str, api_key: str) -> GeoLocation | None:
    """Geocode a city name to coordinates using the OpenWeatherMap geocoding API."""
    resp = await client.get(GEOCODING_URL, params={"q": city_name, "limit": 1, "appid": api_key})
    resp.raise_for_status()
    results = resp.json()

    if not results:
        return None

    r = results[0]
    return GeoLocation(
        latitude=r["lat"],
        longitude=r["lon"],
        name=r.get("name", city_name),
        country=r.get("country"),
    )


async def get_current_weather(client: httpx.AsyncClient, latitude: float, longitude: float, api_key: str) -> dict:
    """Fetch current conditions for a coordinate in metric units."""
    return await _get_weather_json(client, CURRENT_WEATHER_URL, latitude, longitude, api_key)


async def get_forecast(client: httpx.AsyncClient, latitude: float, longitude: float, api_key: str) -> dict:
    """Fetch the 5-day forecast (3-hour samples) for a coordinate in metric units."""
    return await _get_weather_json(client, FORECAST_URL, latitude, longitude, api_key)


async def get_latest_rates(client: httpx.AsyncClient, api_key: str, base: str) -> dict:
    """Fetch the latest conversion-rate table for the base currency from ExchangeRate-API."""
    resp = await client.get(EXCHANGE_RATE_URL.format(api_key=api_key, base=base))
    resp.raise_for_status()
    return resp.json()


async def _get_weather_json(
    client: httpx.AsyncClient, url: str, latitude: float, longitude: float, api_key: str
) -> dict:
    resp = await client.get(
        url,
        params={
            "lat": latitude,
            "lon": longitude,
            "appid": api_key,
            "units": "metric",
        },
    )
    resp.raise_for_status()
    return resp.json()
