"""
Same-origin development proxy.

Serves the configured API prefix and forwards every request under it to
``API_PROXY_TARGET``, so a frontend served from this origin can call
``/api/products`` without CORS.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, Response, status

from app.config import get_settings

logger = logging.getLogger(__name__)

# Connection-scoped headers that must not be forwarded
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
}


def _forwardable(pairs, drop=()) -> list:
    """Filter header pairs, keeping repeated headers such as Set-Cookie."""
    skip = HOP_BY_HOP_HEADERS.union(drop)
    return [(k, v) for k, v in pairs if k.lower() not in skip]


def create_proxy_app(
    target: Optional[str] = None,
    prefix: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the proxy application.

    Args:
        target: Upstream base URL, defaults to settings.API_PROXY_TARGET
        prefix: Path prefix to forward, defaults to settings.API_PREFIX
        transport: Optional httpx transport for the upstream client
    """
    settings = get_settings()
    target = target or settings.API_PROXY_TARGET
    prefix = (prefix or settings.API_PREFIX).rstrip("/")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Proxying {prefix}/* to {target}")
        async with httpx.AsyncClient(base_url=target, transport=transport) as client:
            app.state.upstream = client
            yield

    app = FastAPI(title="Product Catalog dev proxy", lifespan=lifespan)

    @app.api_route(
        prefix + "/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
        include_in_schema=False,
    )
    async def forward(path: str, request: Request):
        upstream: httpx.AsyncClient = request.app.state.upstream
        url = f"{prefix}/{path}"

        try:
            upstream_response = await upstream.request(
                request.method,
                url,
                params=request.query_params.multi_items(),
                headers=_forwardable(request.headers.items()),
                content=await request.body(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Upstream {request.method} {url} failed: {e}")
            return Response(
                content=f"Upstream unavailable: {e}",
                status_code=status.HTTP_502_BAD_GATEWAY,
                media_type="text/plain",
            )

        response = Response(
            content=upstream_response.content,
            status_code=upstream_response.status_code,
        )
        # httpx has already decoded the body
        for key, value in _forwardable(
            upstream_response.headers.multi_items(), drop=("content-encoding",)
        ):
            response.headers.append(key, value)
        return response

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    uvicorn.run(create_proxy_app(), host="0.0.0.0", port=3000)
