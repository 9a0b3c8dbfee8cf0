#!/usr/bin/env python3
"""
Web Search Proxy - HTTP server
Recherche DuckDuckGo et extraction de contenu exposées en JSON.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from . import __version__
from .config.settings import settings
from .errors import InternalError, ProxyError
from .service import WebProxyService

logger = logging.getLogger(__name__)

SERVICE_NAME = "Web Search Proxy"

ROOT_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Web Search Proxy</title>
  <style>
    body { font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }
    h1 { color: #333; }
    pre { background: #f4f4f4; padding: 10px; border-radius: 5px; }
  </style>
</head>
<body>
  <h1>Web Search Proxy</h1>
  <p>Web search and page content extraction API.</p>

  <h2>Endpoints</h2>
  <h3>1. Search</h3>
  <pre>GET /search?query=your+query&amp;max_results=10</pre>

  <h3>2. Fetch content</h3>
  <pre>GET /fetch?url=https://example.com</pre>
  <pre>GET /fetch?url=https://example.com&amp;mode=text</pre>
</body>
</html>
"""


# Response models
class SearchResultModel(BaseModel):
    title: str
    link: str
    snippet: str = ""
    position: int = Field(..., ge=1)

class SearchResponse(BaseModel):
    results: List[SearchResultModel]
    count: int

class FetchResponseModel(BaseModel):
    url: str
    content: str
    length: int


def create_app(service: Optional[WebProxyService] = None) -> FastAPI:
    """Construit l'application FastAPI.

    When ``service`` is given it is used as-is and left open on shutdown;
    otherwise one is built from the global settings for the app's lifetime.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = service is None
        app.state.service = service or WebProxyService(settings.config)
        logger.info("HTTP API Server started")

        yield

        if owned:
            await app.state.service.cleanup()
            logger.info("HTTP API Server stopped")

    app = FastAPI(
        title=SERVICE_NAME,
        description="DuckDuckGo search and main-content extraction proxy",
        version=__version__,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    def get_service(request: Request) -> WebProxyService:
        return request.app.state.service

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Informational page"""
        return HTMLResponse(ROOT_PAGE)

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "ok", "service": SERVICE_NAME, "version": __version__}

    @app.get("/search", response_model=SearchResponse)
    async def search_endpoint(
        query: Optional[str] = None,
        max_results: Optional[str] = None,
        proxy: WebProxyService = Depends(get_service),
    ):
        """Web search endpoint"""
        params = proxy.validate_search(query, max_results)
        return await proxy.search(params["query"], params["max_results"])

    @app.get("/fetch", response_model=FetchResponseModel)
    async def fetch_endpoint(
        url: Optional[str] = None,
        mode: Optional[str] = None,
        proxy: WebProxyService = Depends(get_service),
    ):
        """Page content endpoint"""
        params = proxy.validate_fetch(url, mode)
        try:
            return await proxy.fetch(params["url"], params["mode"])
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"Fetch error: {e}", exc_info=True)
            raise InternalError(f"request failed: {e}") from e

    return app


app = create_app()


def main():
    """Point d'entrée principal du serveur"""
    settings.setup_logging()

    if not settings.validate_config():
        logger.error("Configuration invalide, arrêt du serveur")
        sys.exit(1)

    if settings.config.debug:
        logger.debug(f"Configuration: {settings.to_dict()}")

    uvicorn.run(
        app,
        host=settings.config.host,
        port=settings.config.port,
        log_level=settings.config.log_level.lower()
    )


if __name__ == "__main__":
    main()
