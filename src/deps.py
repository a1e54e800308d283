# ABOUTME: Dependency container for the aggregation routes using Pydantic BaseModel.
# ABOUTME: Holds the shared httpx.AsyncClient and the settings that upstream calls need.

import httpx
from pydantic import BaseModel, ConfigDict

from src.config import Settings


class UpstreamDeps(BaseModel):
    """Dependencies handed to every aggregation function."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    settings: Settings


def create_http_client(timeout: float) -> httpx.AsyncClient:
    """Create an httpx client with a bounded per-request timeout.

    A hung upstream raises httpx.TimeoutException instead of stranding the handler.
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))
