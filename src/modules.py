# ABOUTME: The three client feature modules (weather, quote, currency) mounted by the tab shell.
# ABOUTME: Each owns one FetchController and turns user actions into explicit trigger() calls.

import math

import httpx

from src.api_client import fetch_conversion, fetch_quote, fetch_weather
from src.controller import FetchController
from src.models import ConversionResult, Quote, WeatherReport
from src.recent_searches import RecentSearchStore

WEATHER_ERROR = "Unable to fetch weather data. Please try again later."
QUOTE_ERROR = "Could not fetch quote. Please try again later."
CURRENCY_ERROR = "Failed to fetch conversion rates. Please try again later."

CITY_REQUIRED = "Enter a City Name"
AMOUNT_REQUIRED = "Please enter a valid amount"

DEFAULT_AMOUNT = 100.0


class FeatureModule:
    """A tab's content: a controller plus the actions that trigger it."""

    title = ""
    controller: FetchController

    def mount(self) -> None:
        """Run the module's on-mount action, if any."""

    def unmount(self) -> None:
        self.controller.cancel()


class WeatherModule(FeatureModule):
    """Current weather and daily forecast for a searched city, with recent searches.

    Mounting fetches the server's default city. Successful searches are recorded
    in the recent-search store, which outlives the module.
    """

    title = "Weather"

    def __init__(self, client: httpx.AsyncClient, base_url: str, store: RecentSearchStore):
        self.store = store
        self.recent = store.load()
        self.controller: FetchController[str | None, WeatherReport] = FetchController(
            "weather",
            lambda city: fetch_weather(client, base_url, city),
            WEATHER_ERROR,
            on_success=self._remember,
        )

    def mount(self) -> None:
        self.controller.trigger(None)

    def search(self, city: str) -> bool:
        """Trigger a search for city; returns False without fetching if it is blank."""
        city = city.strip()
        if not city:
            return False
        self.controller.trigger(city)
        return True

    def select_recent(self, index: int) -> bool:
        """Search again for the recent entry at index (0 = most recent)."""
        if not 0 <= index < len(self.recent):
            return False
        return self.search(self.recent[index])

    def _remember(self, city: str | None, report: WeatherReport) -> None:
        self.recent = self.store.record(city or report.location)


class QuoteModule(FeatureModule):
    """Random quote; fetched on mount and again on every request for a new one."""

    title = "Quote Generator"

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self.controller: FetchController[None, Quote] = FetchController(
            "quote",
            lambda _: fetch_quote(client, base_url),
            QUOTE_ERROR,
        )

    def mount(self) -> None:
        self.controller.trigger(None)

    def new_quote(self) -> None:
        self.controller.trigger(None)


class CurrencyModule(FeatureModule):
    """Converts an amount in the base currency to USD and EUR on demand."""

    title = "Currency Converter"

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self.amount = DEFAULT_AMOUNT
        self.controller: FetchController[float, ConversionResult] = FetchController(
            "currency",
            lambda amount: fetch_conversion(client, base_url, amount),
            CURRENCY_ERROR,
        )

    def convert(self, raw_amount) -> bool:
        """Trigger a conversion; returns False without fetching for a non-positive or non-numeric amount."""
        try:
            amount = float(raw_amount)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(amount) or amount <= 0:
            return False
        self.amount = amount
        self.controller.trigger(amount)
        return True
