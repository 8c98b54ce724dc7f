"""Pytest fixtures: a scripted commerce backend behind httpx.MockTransport."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from storefront.core.config import Settings
from storefront.services.magento_client import MagentoClient

API_URL = "http://backend.test/api.php"
BASE_URL = "http://media.test"

HOUSE_BLEND = {
    "id": 1,
    "sku": "COF-001",
    "name": "House Blend",
    "price": "12.50",
    "status": 1,
    "type_id": "simple",
    "image": "/h/house.jpg",
}


class FakeBackend:
    """Answers per ``action`` and records every request it sees."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(self, action: str, payload: Any, status_code: int = 200) -> None:
        self.routes[action] = lambda request: httpx.Response(status_code, json=payload)

    def fail(self, action: str, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self.routes[action] = _raise

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        action = request.url.params.get("action", "")
        route = self.routes.get(action)
        if route is None:
            return httpx.Response(404, json={"error": f"Unknown action {action}"})
        return route(request)

    def params(self, index: int = -1) -> httpx.QueryParams:
        return self.requests[index].url.params

    @property
    def actions(self) -> list[str]:
        return [r.url.params.get("action") for r in self.requests]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def magento_client(backend: FakeBackend) -> MagentoClient:
    transport = httpx.MockTransport(backend.handler)
    return MagentoClient(
        api_url=API_URL,
        base_url=BASE_URL,
        client=httpx.AsyncClient(transport=transport),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        magento_api_url=API_URL,
        magento_base_url=BASE_URL,
        cors_origins_raw="http://localhost:3000",
        log_level="WARNING",
    )
