"""Throttled wrapper around an httpx async client."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..core.rate_limit import ApiRateLimiter


class ThrottledClient:
    """Submits every HTTP call to an ``ApiRateLimiter`` before sending it.

    Responses are checked with ``raise_for_status`` inside the work item, so
    HTTP errors reach the limiter's error handler and the caller alike.
    """

    def __init__(
        self,
        limiter: ApiRateLimiter[Any],
        client: Optional[httpx.AsyncClient] = None,
        *,
        base_url: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._limiter = limiter
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @property
    def limiter(self) -> ApiRateLimiter[Any]:
        return self._limiter

    async def request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        async def send() -> Dict[str, Any]:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()

        return await self._limiter.add_request(send)

    async def get(self, path: str, params: Optional[Any] = None) -> Dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", path, data=payload)

    async def put(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("PUT", path, data=payload)

    async def delete(self, path: str, params: Optional[Any] = None) -> Dict[str, Any]:
        return await self.request("DELETE", path, params=params)

    async def aclose(self) -> None:
        await self._limiter.aclose()
        if self._owns_client:
            await self._client.aclose()
