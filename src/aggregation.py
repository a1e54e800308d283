# ABOUTME: Aggregation layer behind the three backend routes (quote, weather, currency).
# ABOUTME: Calls the upstream client, normalizes its JSON into fixed-shape models and maps failures to errors.

import logging
import math
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

import httpx
from pydantic import ValidationError

from src import upstream
from src.deps import UpstreamDeps
from src.errors import InvalidInput, NoContent, NotFound, UpstreamDataIncomplete, UpstreamUnavailable
from src.models import ConversionRates, ConversionResult, CurrentWeather, ForecastDay, Quote, WeatherReport

logger = logging.getLogger(__name__)

QUOTE_NOT_FOUND = "No quote found."
QUOTE_FAILED = "Error fetching quote from external API."
CITY_NOT_FOUND = "City not found."
WEATHER_FAILED = "Error fetching weather data. Please try again later."
INVALID_AMOUNT = "Invalid amount provided."
RATES_MISSING = "Could not fetch exchange rates from API."
CURRENCY_FAILED = "Error fetching currency data. Please try again later."

MIDDAY_SECONDS = 12 * 3600

# Errors raised while picking fields out of an upstream payload
_MALFORMED = (KeyError, IndexError, TypeError, AttributeError, ValueError, OverflowError, ValidationError)


async def get_quote(deps: UpstreamDeps) -> Quote:
    """Fetch one random quote and forward its text and author unchanged."""
    try:
        data = await upstream.fetch_random_quote(deps.http_client)
    except httpx.HTTPError as e:
        logger.warning("Quote upstream failed: %r", e)
        raise UpstreamUnavailable(QUOTE_FAILED) from e
    except ValueError as e:
        logger.warning("Quote upstream returned a non-JSON body: %r", e)
        raise NoContent(QUOTE_NOT_FOUND) from e

    if not isinstance(data, dict) or not data.get("quote"):
        logger.warning("Quote upstream returned no quote: %r", data)
        raise NoContent(QUOTE_NOT_FOUND)
    try:
        return Quote(text=data["quote"], author=data.get("author") or "")
    except ValidationError as e:
        raise NoContent(QUOTE_NOT_FOUND) from e


async def get_weather(deps: UpstreamDeps, city: str | None = None) -> WeatherReport:
    """Resolve a city, then fetch and normalize its current conditions and daily forecast.

    The three upstream calls run in sequence and the first failure aborts the
    whole request; no partial report is ever returned. A missing or blank city
    falls back to the configured default city.
    """
    city = (city or "").strip() or deps.settings.default_city
    client = deps.http_client
    api_key = deps.settings.weather_api_key

    try:
        location = await upstream.geocode(client, city, api_key)
        if location is None:
            raise NotFound(CITY_NOT_FOUND)
        current_raw = await upstream.get_current_weather(client, location.latitude, location.longitude, api_key)
        forecast_raw = await upstream.get_forecast(client, location.latitude, location.longitude, api_key)
    except httpx.HTTPError as e:
        logger.warning("Weather upstream failed for %r: %r", city, e)
        raise UpstreamUnavailable(WEATHER_FAILED) from e
    except _MALFORMED as e:
        logger.warning("Weather upstream returned a malformed payload for %r: %r", city, e)
        raise UpstreamDataIncomplete(WEATHER_FAILED) from e

    try:
        current = CurrentWeather(city=location.name, **normalize_conditions(current_raw))
        utc_offset = (forecast_raw.get("city") or {}).get("timezone", 0)
        forecast = [
            ForecastDay(date=day, **normalize_conditions(sample))
            for day, sample in select_midday_samples(forecast_raw["list"], utc_offset)
        ]
    except _MALFORMED as e:
        logger.warning("Could not normalize weather payload for %r: %r", city, e)
        raise UpstreamDataIncomplete(WEATHER_FAILED) from e

    return WeatherReport(location=location.name, current=current, forecast=forecast)


def normalize_conditions(raw: dict) -> dict:
    """Pick the common weather fields out of an OpenWeatherMap weather or forecast sample."""
    conditions = raw["weather"][0]
    return {
        "temperature": raw["main"]["temp"],
        "humidity": raw["main"]["humidity"],
        "wind_speed": raw["wind"]["speed"],
        "description": conditions["description"],
        "icon": conditions["icon"],
    }


def select_midday_samples(samples: list[dict], utc_offset: int = 0) -> list[tuple[date, dict]]:
    """Reduce 3-hour forecast samples to one per calendar day, the one closest to midday.

    Samples are ordered chronologically first; on a tie the earlier sample wins.
    Days are local to the forecast location, shifted by utc_offset seconds.
    """
    timed = sorted(((_sample_time(s, utc_offset), s) for s in samples), key=lambda pair: pair[0])

    best: dict[date, tuple[int, dict]] = {}
    for moment, sample in timed:
        seconds = moment.hour * 3600 + moment.minute * 60 + moment.second
        distance = abs(seconds - MIDDAY_SECONDS)
        day = moment.date()
        if day not in best or distance < best[day][0]:
            best[day] = (distance, sample)

    return [(day, sample) for day, (_, sample) in best.items()]


def _sample_time(sample: dict, utc_offset: int) -> datetime:
    """Local wall-clock time of a forecast sample."""
    if "dt" in sample:
        moment = datetime.fromtimestamp(sample["dt"], tz=timezone.utc)
    else:
        moment = datetime.fromisoformat(sample["dt_txt"]).replace(tzinfo=timezone.utc)
    return (moment + timedelta(seconds=utc_offset)).replace(tzinfo=None)


async def convert_currency(deps: UpstreamDeps, raw_amount) -> ConversionResult:
    """Convert an amount in the base currency to USD and EUR using the latest rates.

    The amount is validated before any upstream call is made.
    """
    amount = parse_amount(raw_amount)
    try:
        data = await upstream.get_latest_rates(
            deps.http_client, deps.settings.exchange_api_key, deps.settings.base_currency
        )
    except httpx.HTTPError as e:
        logger.warning("Exchange-rate upstream failed: %r", e)
        raise UpstreamUnavailable(CURRENCY_FAILED) from e
    except ValueError as e:
        logger.warning("Exchange-rate upstream returned a non-JSON body: %r", e)
        raise UpstreamDataIncomplete(RATES_MISSING) from e

    rates = data.get("conversion_rates") if isinstance(data, dict) else None
    rate_usd = _rate(rates, "USD")
    rate_eur = _rate(rates, "EUR")
    if rate_usd is None or rate_eur is None:
        logger.warning("Exchange-rate response lacks USD/EUR: %r", rates)
        raise UpstreamDataIncomplete(RATES_MISSING)

    return ConversionResult(
        amount_in_base=amount,
        usd=round_half_up(amount * rate_usd, 2),
        eur=round_half_up(amount * rate_eur, 2),
        rate=ConversionRates(USD=round_half_up(rate_usd, 4), EUR=round_half_up(rate_eur, 4)),
    )


def parse_amount(raw) -> float:
    """Parse a query-string amount; it must be a finite number greater than zero."""
    try:
        amount = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidInput(INVALID_AMOUNT) from e
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInput(INVALID_AMOUNT)
    return amount


def round_half_up(value: float, places: int) -> float:
    """Round to a fixed number of decimals with ties going away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _rate(rates, code: str) -> float | None:
    if not isinstance(rates, dict):
        return None
    value = rates.get(code)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return None
    return float(value)
