from __future__ import annotations
import dataclasses

import pytest
from fastapi.testclient import TestClient

from backend.api import create_app
from backend.collector import DataCollector

@pytest.fixture
def client(settings, rng, feed_factory):
    collector = DataCollector(settings, feed=feed_factory(fail=True), rng=rng)
    with TestClient(create_app(settings, collector)) as c:
        yield c

@pytest.fixture
def real_client(settings, rng, feed_factory, pulsemcp_records):
    collector = DataCollector(settings, feed=feed_factory(pulsemcp_records), rng=rng)
    with TestClient(create_app(settings, collector)) as c:
        yield c

def test_health(client):
    body = client.get("/api/health").json()
    assert body["success"] is True
    assert body["data"]["status"] == "healthy"
    assert body["data"]["environment"] == "test"
    assert body["data"]["uptime"] >= 0

def test_most_downloaded_limit(client):
    r = client.get("/api/servers/most-downloaded", params={"limit": 5}, headers={"x-request-id": "abc"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert [e["rank"] for e in body["data"]] == [1, 2, 3, 4, 5]
    downloads = [e["server"]["downloads"] for e in body["data"]]
    assert downloads == sorted(downloads, reverse=True)
    assert body["pagination"] == {"page": 1, "limit": 5, "total": 20, "pages": 4}
    assert body["meta"]["request_id"] == "abc"
    assert body["meta"]["source"] == "synthetic"

def test_second_page_continues_ranks(client):
    body = client.get("/api/servers/top", params={"limit": 5, "page": 2}).json()
    assert [e["rank"] for e in body["data"]] == [6, 7, 8, 9, 10]

def test_api_services_rank_by_requests(client):
    body = client.get("/api/servers/top", params={"type": "api", "limit": 20}).json()
    requests = [e["server"]["requests"] for e in body["data"]]
    assert requests == sorted(requests, reverse=True)
    assert body["meta"]["type"] == "api"

def test_top_sort_by_latency_is_ascending(client):
    body = client.get("/api/servers/top", params={"type": "api", "sort_by": "latency"}).json()
    latency = [e["server"]["latency"] for e in body["data"]]
    assert latency == sorted(latency)

def test_fastest_growing_and_most_reviewed(client):
    growth = [e["server"]["growth_rate"] for e in client.get("/api/servers/fastest-growing").json()["data"]]
    assert growth == sorted(growth, reverse=True)
    reviews = [e["server"]["reviews"] for e in client.get("/api/servers/most-reviewed").json()["data"]]
    assert reviews == sorted(reviews, reverse=True)
    uptime = [e["server"]["uptime"] for e in client.get("/api/servers/most-reviewed", params={"type": "api"}).json()["data"]]
    assert uptime == sorted(uptime, reverse=True)

def test_category_filter(client):
    body = client.get("/api/servers/top", params={"category": "database"}).json()
    assert body["data"]
    assert {e["server"]["category"] for e in body["data"]} == {"Database"}
    assert body["pagination"]["total"] == len(body["data"])

def test_search_without_matches_is_not_an_error(client):
    r = client.get("/api/servers/search", params={"search": "zzz-no-such-server"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"] == []
    assert body["pagination"]["total"] == 0

def test_search_matches_name_and_author(client):
    body = client.get("/api/servers/search", params={"search": "postgres"}).json()
    assert [e["server"]["name"] for e in body["data"]] == ["@postgres/database-mcp"]
    body = client.get("/api/servers/search", params={"search": "google", "type": "api"}).json()
    assert {e["server"]["provider"] for e in body["data"]} == {"Google"}

def test_search_requires_a_term(client):
    r = client.get("/api/servers/search")
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Search query is required", "data": None}

@pytest.mark.parametrize("params", [
    {"type": "npm"}, {"limit": 0}, {"limit": 101}, {"page": 0}, {"limit": "lots"}, {"sort_by": "latency"},
])
def test_invalid_query_parameters(client, params):
    r = client.get("/api/servers/top", params=params)
    assert r.status_code == 400
    assert r.json()["success"] is False

def test_server_detail(client):
    body = client.get("/api/servers/api-3").json()
    assert body["data"]["name"] == "Google Maps API"
    assert body["meta"]["type"] == "api"

def test_unknown_server_is_404(client):
    r = client.get("/api/servers/mcp-does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Server not found", "data": None}

def test_unknown_route_is_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["message"] == "Not Found - /api/nope"

def test_analytics_endpoints(client):
    overview = client.get("/api/analytics/overview").json()["data"]
    assert overview["overview"]["total_mcp_servers"] == 20
    assert overview["overview"]["mcp_source"] == "synthetic"
    assert overview["growth"]["api"]["trends"]["stable"] + overview["growth"]["api"]["trends"]["up"] == 20
    cats = client.get("/api/analytics/categories").json()["data"]
    assert sum(c["count"] for c in cats["mcp"]) == 20
    totals = [c["total"] for c in cats["api"]]
    assert totals == sorted(totals, reverse=True)
    trending = client.get("/api/analytics/trending").json()["data"]
    assert set(trending) == {"growth", "overview"}

def test_real_feed_is_served(real_client):
    body = real_client.get("/api/servers/most-downloaded").json()
    assert body["meta"]["source"] == "pulsemcp"
    assert body["pagination"]["total"] == 3
    downloads = [e["server"]["downloads"] for e in body["data"]]
    assert downloads == sorted(downloads, reverse=True)
    assert real_client.get("/api/servers/mcp-weather").json()["data"]["category"] == "Utilities"

def test_unhandled_errors_return_generic_500(settings, rng, feed_factory):
    collector = DataCollector(settings, feed=feed_factory(fail=True), rng=rng)
    app = create_app(settings, collector)

    def broken():
        raise RuntimeError("kaboom")
    app.state.queries.analytics = broken

    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.get("/api/analytics/overview")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert "stack" in body

    prod = dataclasses.replace(settings, environment="production")
    app = create_app(prod, DataCollector(prod, feed=feed_factory(fail=True), rng=rng))
    app.state.queries.analytics = broken
    with TestClient(app, raise_server_exceptions=False) as c:
        assert "stack" not in c.get("/api/analytics/overview").json()

def test_websocket_subscription_receives_updates(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "subscribe"})
        assert ws.receive_json() == {"event": "subscribed"}
        message = ws.receive_json()
        assert message["event"] == "metrics-update"
        assert message["data"]["active_mcp_servers"] == 20
        ws.send_text("unsubscribe")
        # a metrics update may already be in flight before the ack
        while (reply := ws.receive_json())["event"] != "unsubscribed":
            assert reply["event"] == "metrics-update"
