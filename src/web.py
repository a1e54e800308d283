# ABOUTME: ASGI web entry point for the dashboard backend.
# ABOUTME: Builds a Starlette app exposing the quote, weather and currency routes behind an access-log middleware.

import contextlib
import logging
import time

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from src.aggregation import CURRENCY_FAILED, QUOTE_FAILED, WEATHER_FAILED, convert_currency, get_quote, get_weather
from src.config import Settings, configure_logging
from src.deps import UpstreamDeps, create_http_client
from src.errors import AggregationError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class AccessLogMiddleware:
    """ASGI middleware that logs one line per HTTP request.

    Wraps the send callable to capture the response status, then logs method,
    path, status and elapsed milliseconds once the response has been sent.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status = 500

        async def capture_send(message):
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, capture_send)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info("%s %s -> %d (%.1f ms)", scope.get("method"), scope["path"], status, elapsed_ms)


def error_response(error: AggregationError, key: str = "error") -> JSONResponse:
    """Render an aggregation error as its status code and fixed public message."""
    return JSONResponse({key: error.message}, status_code=error.status_code)


async def quote_endpoint(request: Request) -> JSONResponse:
    """GET /api/quote: one random quote as {text, author}."""
    try:
        quote = await get_quote(request.app.state.deps)
    except AggregationError as e:
        return error_response(e, key="message")
    except Exception:
        logger.exception("Unhandled failure in quote route")
        return error_response(UpstreamUnavailable(QUOTE_FAILED), key="message")
    return JSONResponse(quote.model_dump())


async def weather_endpoint(request: Request) -> JSONResponse:
    """GET /api/weather?city=: current conditions plus one forecast entry per day."""
    try:
        report = await get_weather(request.app.state.deps, request.query_params.get("city"))
    except AggregationError as e:
        return error_response(e)
    except Exception:
        logger.exception("Unhandled failure in weather route")
        return error_response(UpstreamUnavailable(WEATHER_FAILED))
    return JSONResponse(report.model_dump(mode="json"))


async def currency_endpoint(request: Request) -> JSONResponse:
    """GET /api/currency?amount=: the amount converted to USD and EUR."""
    try:
        result = await convert_currency(request.app.state.deps, request.query_params.get("amount"))
    except AggregationError as e:
        return error_response(e)
    except Exception:
        logger.exception("Unhandled failure in currency route")
        return error_response(UpstreamUnavailable(CURRENCY_FAILED))
    return JSONResponse(result.model_dump())


async def health_endpoint(request: Request) -> JSONResponse:
    """GET /api/health: liveness check."""
    return JSONResponse({"status": "ok"})


def create_app(settings: Settings | None = None, deps: UpstreamDeps | None = None) -> Starlette:
    """Build the backend application.

    When deps are supplied they are used as-is and left open on shutdown;
    otherwise the lifespan opens one shared httpx client and closes it on exit.
    """
    settings = settings or (deps.settings if deps else Settings.from_env())

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        if deps is not None:
            yield
            return
        client = create_http_client(settings.upstream_timeout)
        app.state.deps = UpstreamDeps(http_client=client, settings=settings)
        try:
            yield
        finally:
            await client.aclose()

    app = Starlette(
        routes=[
            Route("/api/quote", quote_endpoint),
            Route("/api/weather", weather_endpoint),
            Route("/api/currency", currency_endpoint),
            Route("/api/health", health_endpoint),
        ],
        middleware=[
            Middleware(AccessLogMiddleware),
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    if deps is not None:
        app.state.deps = deps
    return app


def main() -> None:
    """Run the backend under uvicorn on the configured port."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("Server is listening on port %d", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
