# ABOUTME: Contract tests for the upstream client.
# ABOUTME: Validates outbound URLs, query parameters and raw payload handling with mocked HTTP.

from unittest.mock import AsyncMock

import httpx
import pytest

from src.upstream import (
    CURRENT_WEATHER_URL,
    FORECAST_URL,
    QUOTE_URL,
    fetch_random_quote,
    geocode,
    get_current_weather,
    get_forecast,
    get_latest_rates,
)


def _mock_client(json_data=None, status_code: int = 200, content: bytes | None = None) -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient that returns the given JSON (or raw) response."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    request = httpx.Request("GET", "https://test")
    if content is not None:
        response = httpx.Response(status_code=status_code, content=content, request=request)
    else:
        response = httpx.Response(status_code=status_code, json=json_data, request=request)
    mock.get.return_value = response
    return mock


class TestFetchRandomQuote:
    @pytest.mark.asyncio
    async def test_returns_raw_json(self):
        """fetch_random_quote returns the DummyJSON body unchanged.

        Implementation: Mocks the quote API with a typical body.
        Passing implies: No normalization happens in the upstream layer.
        """
        client = _mock_client({"id": 7, "quote": "Simplicity is prerequisite for reliability.", "author": "Dijkstra"})
        data = await fetch_random_quote(client)

        assert data["quote"] == "Simplicity is prerequisite for reliability."
        assert client.get.call_args.args[0] == QUOTE_URL

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        """fetch_random_quote returns None for an empty 200 body.

        Implementation: Mocks the quote API with zero-length content.
        Passing implies: Empty upstream bodies are distinguishable from transport errors.
        """
        client = _mock_client(content=b"")
        assert await fetch_random_quote(client) is None

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        """fetch_random_quote raises httpx.HTTPStatusError on a 5xx.

        Implementation: Mocks the quote API with a 503.
        Passing implies: Callers see a typed httpx failure to map.
        """
        client = _mock_client({"message": "down"}, status_code=503)
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_random_quote(client)


class TestGeocode:
    @pytest.mark.asyncio
    async def test_resolves_known_city(self):
        """Geocode returns a GeoLocation for a known city.

        Implementation: Mocks the OpenWeatherMap geo API to return Paris.
        Passing implies: The service maps lat/lon/name/country into GeoLocation.
        """
        client = _mock_client([{"name": "Paris", "lat": 48.8589, "lon": 2.32, "country": "FR"}])
        result = await geocode(client, "Paris", "key")

        assert result is not None
        assert result.name == "Paris"
        assert result.latitude == 48.8589
        assert result.longitude == 2.32
        assert result.country == "FR"

    @pytest.mark.asyncio
    async def test_returns_none_for_unknown_city(self):
        """Geocode returns None when the geo API finds nothing.

        Implementation: Mocks the geo API to return an empty list.
        Passing implies: Zero matches are reported without raising.
        """
        client = _mock_client([])
        assert await geocode(client, "Xyzzyville", "key") is None

    @pytest.mark.asyncio
    async def test_sends_query_limit_and_key(self):
        """Geocode asks for a single match and passes the API key.

        Implementation: Inspects the mock client's call params.
        Passing implies: The request matches the geo API contract.
        """
        client = _mock_client([])
        await geocode(client, "Tokyo", "secret")

        params = client.get.call_args.kwargs["params"]
        assert params == {"q": "Tokyo", "limit": 1, "appid": "secret"}


class TestWeatherCalls:
    @pytest.mark.asyncio
    async def test_current_weather_uses_metric_units(self):
        """get_current_weather requests metric units for the coordinate.

        Implementation: Inspects URL and params of the call.
        Passing implies: Temperatures arrive in Celsius and wind in m/s.
        """
        client = _mock_client({"main": {"temp": 20}})
        await get_current_weather(client, 17.38, 78.48, "key")

        assert client.get.call_args.args[0] == CURRENT_WEATHER_URL
        params = client.get.call_args.kwargs["params"]
        assert params["lat"] == 17.38
        assert params["lon"] == 78.48
        assert params["units"] == "metric"

    @pytest.mark.asyncio
    async def test_forecast_hits_forecast_endpoint(self):
        """get_forecast calls the 5-day forecast endpoint.

        Implementation: Inspects the URL of the call.
        Passing implies: Current and forecast calls target different endpoints.
        """
        client = _mock_client({"list": []})
        data = await get_forecast(client, 1.0, 2.0, "key")

        assert data == {"list": []}
        assert client.get.call_args.args[0] == FORECAST_URL


class TestGetLatestRates:
    @pytest.mark.asyncio
    async def test_formats_key_and_base_into_url(self):
        """get_latest_rates embeds the API key and base currency in the path.

        Implementation: Inspects the URL of the call.
        Passing implies: The ExchangeRate-API v6 path format is respected.
        """
        client = _mock_client({"conversion_rates": {"USD": 0.012}})
        await get_latest_rates(client, "abc123", "INR")

        assert client.get.call_args.args[0] == "https://v6.exchangerate-api.com/v6/abc123/latest/INR"
