# ABOUTME: Pydantic BaseModels for the normalized payloads served by the backend routes.
# ABOUTME: Shared by the aggregation layer (producer) and the terminal client (consumer).

from datetime import date

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """A random quote and its author."""

    text: str = Field(min_length=1)
    author: str = ""


class GeoLocation(BaseModel):
    """Geocoded city with coordinates."""

    latitude: float
    longitude: float
    name: str
    country: str | None = None


class CurrentWeather(BaseModel):
    """Current conditions in the common weather shape (metric units)."""

    city: str
    temperature: float
    humidity: float
    wind_speed: float
    description: str
    icon: str


class ForecastDay(BaseModel):
    """One forecast sample per calendar day, taken nearest to midday."""

    date: date
    temperature: float
    humidity: float
    wind_speed: float
    description: str
    icon: str


class WeatherReport(BaseModel):
    """Response body of the weather route."""

    location: str
    current: CurrentWeather
    forecast: list[ForecastDay] = []


class ConversionRates(BaseModel):
    """Exchange rates from the base currency, rounded to four decimals."""

    USD: float
    EUR: float


class ConversionResult(BaseModel):
    """Response body of the currency route."""

    amount_in_base: float = Field(gt=0)
    usd: float
    eur: float
    rate: ConversionRates
