import httpx
import pytest
from fastapi.testclient import TestClient

from assetflow.config import settings
from assetflow.dependencies import get_upstream_client
from assetflow.main import app
from assetflow.services.upstream_client import AssetFlowClient


class FakeAssetFlowAPI:
    """In-memory stand-in for the AssetFlow REST API, served through httpx.MockTransport."""

    def __init__(self):
        self.collections: dict[str, list[dict]] = {
            "/atms": [],
            "/movements": [],
            "/vendors": [],
            "/costings": [],
        }
        self.failures: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        if path in self.failures:
            return httpx.Response(self.failures[path], json={"message": "upstream failure"})
        if path not in self.collections:
            return httpx.Response(404, json={"message": "not found"})
        return httpx.Response(200, json=self.collections[path])

    def paths_requested(self) -> list[str]:
        return [r.url.path.removeprefix("/api") for r in self.requests]

    def client(self) -> AssetFlowClient:
        return AssetFlowClient(
            base_url="http://assetflow.test/api",
            transport=httpx.MockTransport(self.handler),
        )


def _make_assets(count: int, start_id: int = 1) -> list[dict]:
    return [
        {
            "id": start_id + i,
            "name": f"Cash Dispenser {start_id + i}",
            "serialNumber": f"SN-{start_id + i:04d}",
            "location": "Warehouse",
            "vendor": {"id": 1, "name": "Diebold"},
        }
        for i in range(count)
    ]


@pytest.fixture
def make_assets():
    return _make_assets


@pytest.fixture
def upstream():
    return FakeAssetFlowAPI()


@pytest.fixture
def fast_timings():
    original = (
        settings.search_debounce_ms,
        settings.highlight_retry_interval_ms,
        settings.highlight_settle_ms,
        settings.highlight_duration_ms,
    )
    settings.search_debounce_ms = 20
    settings.highlight_retry_interval_ms = 5
    settings.highlight_settle_ms = 0
    settings.highlight_duration_ms = 20
    yield settings
    (
        settings.search_debounce_ms,
        settings.highlight_retry_interval_ms,
        settings.highlight_settle_ms,
        settings.highlight_duration_ms,
    ) = original


@pytest.fixture
def client(upstream, fast_timings):
    upstream_client = upstream.client()
    app.dependency_overrides[get_upstream_client] = lambda: upstream_client
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    return {"Authorization": "Bearer test-token"}
