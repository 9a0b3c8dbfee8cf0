import pytest
from fastapi.testclient import TestClient

from websearch_proxy.config.settings import ProxyConfig
from websearch_proxy.errors import UpstreamError
from websearch_proxy.server import create_app
from websearch_proxy.service import WebProxyService

from .conftest import CountingLimiter, FakeFetcher


@pytest.fixture
def limiters():
    return {"search_limiter": CountingLimiter(), "fetch_limiter": CountingLimiter()}


@pytest.fixture
def client(fake_fetcher: FakeFetcher, limiters):
    service = WebProxyService(ProxyConfig(), fetcher=fake_fetcher, **limiters)
    with TestClient(create_app(service)) as test_client:
        yield test_client


def test_search(client: TestClient) -> None:
    response = client.get("/search", params={"query": "python"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    body = response.json()
    assert body["count"] == 2
    assert [r["position"] for r in body["results"]] == [1, 2]
    assert body["results"][1]["link"] == "https://realpython.com/"


def test_search_max_results(client: TestClient) -> None:
    response = client.get("/search", params={"query": "python", "max_results": "1"})

    assert response.json()["count"] == 1


def test_search_without_query_is_rejected_before_any_io(client: TestClient, fake_fetcher: FakeFetcher, limiters) -> None:
    response = client.get("/search")

    assert response.status_code == 400
    assert "error" in response.json()
    assert fake_fetcher.calls == []
    assert limiters["search_limiter"].acquired == 0


def test_search_with_bad_max_results(client: TestClient) -> None:
    response = client.get("/search", params={"query": "python", "max_results": "many"})

    assert response.status_code == 400
    assert "max_results" in response.json()["error"]


def test_search_upstream_failure_is_empty_result() -> None:
    service = WebProxyService(ProxyConfig(), fetcher=FakeFetcher(error=UpstreamError("down")))
    with TestClient(create_app(service)) as client:
        response = client.get("/search", params={"query": "python"})

    assert response.status_code == 200
    assert response.json() == {"results": [], "count": 0}


def test_fetch(client: TestClient) -> None:
    response = client.get("/fetch", params={"url": "https://example.com/article"})

    assert response.status_code == 200
    body = response.json()
    assert body["url"] == "https://example.com/article"
    assert body["content"].startswith("Headline")
    assert body["length"] == len(body["content"])


def test_fetch_text_mode(client: TestClient) -> None:
    response = client.get("/fetch", params={"url": "https://example.com/article", "mode": "text"})

    assert response.status_code == 200
    assert "\n" not in response.json()["content"]


@pytest.mark.parametrize("params", [{}, {"url": ""}, {"url": "not-a-url"}, {"url": "https://example.com", "mode": "x"}])
def test_fetch_validation(client: TestClient, fake_fetcher: FakeFetcher, limiters, params) -> None:
    response = client.get("/fetch", params=params)

    assert response.status_code == 400
    assert "error" in response.json()
    assert fake_fetcher.calls == []
    assert limiters["fetch_limiter"].acquired == 0


def test_fetch_upstream_status_is_json_error(client: TestClient) -> None:
    response = client.get("/fetch", params={"url": "https://example.com/missing"})

    assert response.status_code == 500
    assert "404" in response.json()["error"]


def test_fetch_unexpected_error_is_json_error(fake_fetcher: FakeFetcher, monkeypatch) -> None:
    service = WebProxyService(ProxyConfig(), fetcher=fake_fetcher)

    async def broken_fetch(url, mode="main"):
        raise KeyError("boom")

    monkeypatch.setattr(service, "fetch", broken_fetch)
    with TestClient(create_app(service)) as client:
        response = client.get("/fetch", params={"url": "https://example.com/article"})

    assert response.status_code == 500
    assert "boom" in response.json()["error"]


def test_root_page(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/search?query=" in response.text


def test_health(client: TestClient) -> None:
    assert client.get("/health").json()["status"] == "ok"


def test_unknown_path(client: TestClient) -> None:
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_cors_headers(client: TestClient) -> None:
    response = client.get("/health", headers={"Origin": "https://app.example"})
    assert response.headers["access-control-allow-origin"] == "*"

    preflight = client.options(
        "/search",
        headers={"Origin": "https://app.example", "Access-Control-Request-Method": "GET"},
    )
    assert preflight.status_code == 200
    assert "GET" in preflight.headers["access-control-allow-methods"]


def test_injected_service_is_not_closed_on_shutdown(fake_fetcher: FakeFetcher) -> None:
    service = WebProxyService(ProxyConfig(), fetcher=fake_fetcher)
    with TestClient(create_app(service)):
        pass

    assert fake_fetcher.closed is False
