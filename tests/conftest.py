import pytest

from websearch_proxy.config.settings import ProxyConfig
from websearch_proxy.errors import UpstreamError
from websearch_proxy.search.fetcher import FetchResponse, PageFetcher


class FakeFetcher(PageFetcher):
    """Outbound fetcher that records calls and replays canned responses."""

    def __init__(self, responses=None, error: Exception | None = None):
        super().__init__(ProxyConfig())
        self.responses = dict(responses or {})
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    async def fetch(self, url, method="GET", headers=None, data=None):
        self.calls.append({"url": url, "method": method, "headers": headers, "data": data})
        if self.error is not None:
            raise self.error
        status, text = self.responses.get(url, (404, "not found"))
        return FetchResponse(url=url, status=status, text=text, fetch_time=0.25)

    async def close(self):
        self.closed = True


class CountingLimiter:
    def __init__(self):
        self.acquired = 0

    async def acquire(self):
        self.acquired += 1


SEARCH_URL = "https://html.duckduckgo.com/html"

SEARCH_PAGE = """
<html><body>
<div class="result results_links web-result">
  <h2 class="result__title">
    <a rel="nofollow" class="result__a" href="//duckduckgo.com/l/?uddg=https%3A%2F%2Fdocs.python.org%2F3%2F&amp;rut=abc"><b>Python</b> docs</a>
  </h2>
  <a class="result__snippet" href="#">The official <b>Python</b> documentation.</a>
</div>
<div class="result result--ad">
  <h2 class="result__title">
    <a rel="nofollow" class="result__a" href="https://duckduckgo.com/y.js?ad_provider=x">Sponsored</a>
  </h2>
  <a class="result__snippet" href="#">Buy now.</a>
</div>
<div class="result results_links web-result">
  <h2 class="result__title">
    <a rel="nofollow" class="result__a" href="https://realpython.com/">Real Python</a>
  </h2>
  <a class="result__snippet" href="#">Tutorials.</a>
</div>
</body></html>
"""

ARTICLE_PAGE = """
<html><head><title>Page title</title></head>
<body>
<nav><a href="/">Home</a></nav>
<article>
  <h1>Headline</h1>
  <p>First paragraph.</p>
  <p>Second paragraph.</p>
</article>
<footer>Copyright</footer>
</body></html>
"""


@pytest.fixture
def search_page() -> str:
    return SEARCH_PAGE


@pytest.fixture
def article_page() -> str:
    return ARTICLE_PAGE


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher({
        SEARCH_URL: (200, SEARCH_PAGE),
        "https://example.com/article": (200, ARTICLE_PAGE),
        "https://example.com/missing": (404, "gone"),
    })
