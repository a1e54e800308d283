# ABOUTME: Terminal tab shell for the dashboard client, rendered with Rich.
# ABOUTME: Mounts one feature module at a time and renders its FetchState through an exhaustive dispatch table.

import asyncio
import logging
from typing import Callable

import httpx
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from src.config import Settings, configure_logging
from src.controller import FetchState, FetchStatus
from src.models import ConversionResult, Quote, WeatherReport
from src.modules import (
    AMOUNT_REQUIRED,
    CITY_REQUIRED,
    CurrencyModule,
    FeatureModule,
    QuoteModule,
    WeatherModule,
)
from src.recent_searches import RecentSearchStore

logger = logging.getLogger(__name__)

TABS = ("Weather", "Currency Converter", "Quote Generator")

HELP_TEXT = (
    "Tabs: 1 Weather, 2 Currency Converter, 3 Quote Generator\n"
    "Weather: search <city> | recent <n>    Currency: convert <amount>    Quote: new\n"
    "Any tab: retry | help | quit"
)

Renderers = dict[FetchStatus, Callable[[FetchState], RenderableType]]


def render_fetch_state(state: FetchState, renderers: Renderers) -> RenderableType:
    """Dispatch on state.status; renderers must cover every FetchStatus."""
    missing = set(FetchStatus) - renderers.keys()
    if missing:
        raise ValueError(f"No renderer for: {sorted(s.value for s in missing)}")
    return renderers[state.status](state)


def _loading(text: str) -> Callable[[FetchState], RenderableType]:
    return lambda state: Spinner("dots", text=text)


def _error(state: FetchState) -> RenderableType:
    return Panel(Text(f"{state.error_message}\nType 'retry' to try again.", style="red"), title="Error")


def weather_view(module: WeatherModule) -> RenderableType:
    def success(state: FetchState[WeatherReport]) -> RenderableType:
        report = state.data
        now = report.current
        current = Table(title=f"Current weather in {report.location}", show_header=False)
        current.add_row("Temperature", f"{now.temperature:.1f} °C")
        current.add_row("Humidity", f"{now.humidity:.0f} %")
        current.add_row("Wind", f"{now.wind_speed:.1f} m/s")
        current.add_row("Conditions", f"{now.description} ({now.icon})")

        forecast = Table(title="Forecast")
        for column in ("Date", "Temp °C", "Humidity %", "Wind m/s", "Conditions"):
            forecast.add_column(column)
        for day in report.forecast:
            forecast.add_row(
                day.date.strftime("%a %d %b"),
                f"{day.temperature:.1f}",
                f"{day.humidity:.0f}",
                f"{day.wind_speed:.1f}",
                day.description,
            )
        return Group(current, forecast)

    body = render_fetch_state(
        module.controller.state,
        {
            FetchStatus.IDLE: lambda state: Text("Search for a city to see its weather."),
            FetchStatus.LOADING: _loading("Fetching forecast..."),
            FetchStatus.SUCCESS: success,
            FetchStatus.ERROR: _error,
        },
    )
    if not module.recent:
        return body
    recent = Text("Recent: " + "  ".join(f"[{i}] {city}" for i, city in enumerate(module.recent)), style="dim")
    return Group(body, recent)


def quote_view(module: QuoteModule) -> RenderableType:
    def success(state: FetchState[Quote]) -> RenderableType:
        quote = state.data
        return Panel(Text(f"“{quote.text}”"), subtitle=quote.author or "Unknown")

    return render_fetch_state(
        module.controller.state,
        {
            FetchStatus.IDLE: lambda state: Text("Type 'new' for a quote."),
            FetchStatus.LOADING: _loading("Fetching quote..."),
            FetchStatus.SUCCESS: success,
            FetchStatus.ERROR: _error,
        },
    )


def currency_view(module: CurrencyModule) -> RenderableType:
    def success(state: FetchState[ConversionResult]) -> RenderableType:
        result = state.data
        table = Table(title=f"{result.amount_in_base:g} in base currency")
        table.add_column("Currency")
        table.add_column("Amount", justify="right")
        table.add_column("Rate", justify="right")
        table.add_row("USD", f"{result.usd:.2f}", f"{result.rate.USD:.4f}")
        table.add_row("EUR", f"{result.eur:.2f}", f"{result.rate.EUR:.4f}")
        return table

    return render_fetch_state(
        module.controller.state,
        {
            FetchStatus.IDLE: lambda state: Text(f"Type 'convert <amount>' (default {module.amount:g})."),
            FetchStatus.LOADING: _loading("Converting..."),
            FetchStatus.SUCCESS: success,
            FetchStatus.ERROR: _error,
        },
    )


class TabShell:
    """Top-level navigation: exactly one feature module is mounted at a time.

    Switching tabs unmounts the current module (cancelling its requests) and
    mounts a fresh one, so FetchState never leaks between tabs. Only the
    recent-search store, which lives on disk, survives a remount.
    """

    def __init__(self, factories: dict[str, Callable[[], FeatureModule]], console: Console | None = None):
        self.factories = factories
        self.console = console or Console()
        self.active: str | None = None
        self.module: FeatureModule | None = None

    def switch(self, tab: str) -> None:
        if tab not in self.factories:
            raise KeyError(tab)
        if self.module is not None:
            self.module.unmount()
        self.active = tab
        self.module = self.factories[tab]()
        self.module.mount()

    def view(self) -> RenderableType:
        module = self.module
        if isinstance(module, WeatherModule):
            body = weather_view(module)
        elif isinstance(module, QuoteModule):
            body = quote_view(module)
        elif isinstance(module, CurrencyModule):
            body = currency_view(module)
        else:
            body = Text("")
        tabs = "  ".join(f"[reverse]{name}[/reverse]" if name == self.active else name for name in TABS)
        return Panel(body, title=tabs)

    def render(self) -> None:
        self.console.print(self.view())

    def handle(self, line: str) -> bool:
        """Apply one command line; returns False when the user asks to quit."""
        command, _, arg = line.strip().partition(" ")
        command = command.lower()
        arg = arg.strip()

        if command in ("quit", "exit", "q"):
            return False
        if command in ("1", "2", "3"):
            self.switch(TABS[int(command) - 1])
        elif command == "help":
            self.console.print(HELP_TEXT)
        elif command == "retry":
            self.module.controller.retry()
        elif command == "search" and isinstance(self.module, WeatherModule):
            if not self.module.search(arg):
                self.console.print(CITY_REQUIRED, style="yellow")
        elif command == "recent" and isinstance(self.module, WeatherModule):
            if not arg.isdigit() or not self.module.select_recent(int(arg)):
                self.console.print("No such recent search.", style="yellow")
        elif command == "convert" and isinstance(self.module, CurrencyModule):
            if not self.module.convert(arg or self.module.amount):
                self.console.print(AMOUNT_REQUIRED, style="yellow")
        elif command == "new" and isinstance(self.module, QuoteModule):
            self.module.new_quote()
        elif command:
            self.console.print(f"Unknown command: {command}. Type 'help'.", style="yellow")
        return True

    async def run(self) -> None:
        """Interactive loop; the prompt stays live while a request is in flight."""
        self.switch(TABS[0])
        self.console.print(HELP_TEXT)
        self.render()
        while True:
            line_task = asyncio.ensure_future(asyncio.to_thread(self.console.input, "> "))
            while not line_task.done() and self.module.controller.state.status is FetchStatus.LOADING:
                settled = asyncio.ensure_future(self.module.controller.wait())
                done, _ = await asyncio.wait({line_task, settled}, return_when=asyncio.FIRST_COMPLETED)
                if settled in done:
                    self.render()
                else:
                    settled.cancel()
            try:
                line = await line_task
            except EOFError:
                break
            if not self.handle(line):
                break
            self.render()
        self.module.unmount()


def build_shell(client: httpx.AsyncClient, settings: Settings, console: Console | None = None) -> TabShell:
    """Wire the three tabs to the backend at settings.api_base_url."""
    base_url = settings.api_base_url.rstrip("/")
    store = RecentSearchStore(settings.recent_searches_path)
    return TabShell(
        {
            "Weather": lambda: WeatherModule(client, base_url, store),
            "Currency Converter": lambda: CurrencyModule(client, base_url),
            "Quote Generator": lambda: QuoteModule(client, base_url),
        },
        console=console,
    )


async def _run(settings: Settings) -> None:
    # The weather route makes three sequential upstream calls
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.upstream_timeout * 3)) as client:
        await build_shell(client, settings).run()


def main() -> None:
    """Entry point for the terminal client."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
