# ABOUTME: Shared test fixtures for the dashboard test suite.
# ABOUTME: Provides settings pointed at a temp directory and upstream dependency containers.

from unittest.mock import AsyncMock

import httpx
import pytest

from src.config import Settings
from src.deps import UpstreamDeps


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        weather_api_key="weather-key",
        exchange_api_key="exchange-key",
        recent_searches_path=tmp_path / "recent.json",
    )


@pytest.fixture
def http_client() -> AsyncMock:
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def deps(http_client, settings) -> UpstreamDeps:
    return UpstreamDeps(http_client=http_client, settings=settings)
