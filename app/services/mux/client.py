from __future__ import annotations

import logging
import time
from typing import Any, AsyncIterator, Dict

import httpx

from app.core.config import settings

logger = logging.getLogger("uvicorn.error")


class MuxError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MuxClient:
    """Thin async wrapper over the Mux Video assets API."""

    def __init__(
        self,
        token_id: str,
        token_secret: str,
        base_url: str = "https://api.mux.com",
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url,
            auth=(token_id, token_secret),
            timeout=timeout_s,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        start = time.perf_counter()
        try:
            resp = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("mux: %s %s failed: %s", method, path, e)
            raise MuxError(f"Mux request failed: {e}") from e
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.info("mux: %s %s %s %dms", method, path, resp.status_code, latency_ms)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.is_error:
            message = _error_message(body) or f"Mux responded with {resp.status_code}"
            raise MuxError(message, status_code=resp.status_code)
        return body

    async def create_asset(self, input_url: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/video/v1/assets",
            json={"input": {"url": input_url}, "playback_policy": ["public"]},
        )

    async def get_asset(self, asset_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/video/v1/assets/{asset_id}")


def _error_message(body: Any) -> str | None:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            messages = error.get("messages") or []
            if messages:
                return "; ".join(str(m) for m in messages)
            return error.get("type")
        if isinstance(error, str):
            return error
    return None


def mux_client_from_settings() -> MuxClient:
    return MuxClient(
        settings.MUX_TOKEN_ID,
        settings.MUX_TOKEN_SECRET,
        base_url=settings.MUX_API_BASE,
        timeout_s=settings.MUX_TIMEOUT_S,
    )


async def get_mux_client() -> AsyncIterator[MuxClient]:
    client = mux_client_from_settings()
    try:
        yield client
    finally:
        await client.aclose()
