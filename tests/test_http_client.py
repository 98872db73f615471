import asyncio

import httpx
import pytest

from apithrottle.core.config import LimiterOptions
from apithrottle.core.rate_limit import ApiRateLimiter
from apithrottle.services.http_client import ThrottledClient


class StubTransport:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"path": request.url.path, "status": "success"})


def _client(transport: StubTransport, errors: list | None = None):
    handler = errors.append if errors is not None else (lambda error: None)
    limiter = ApiRateLimiter(
        LimiterOptions(max_per_second=2, max_per_minute=10, max_queue_size=5, process_interval=0.01),
        handler,
    )
    http = httpx.AsyncClient(base_url="https://api.example.test", transport=httpx.MockTransport(transport))
    return ThrottledClient(limiter, http), http


def test_get_routes_through_limiter():
    transport = StubTransport()

    async def scenario():
        client, http = _client(transport)
        payload = await client.get("/quote/ltp", params=[("i", "NSE:INFY")])
        status = await client.limiter.get_status()
        await client.aclose()
        await http.aclose()
        return payload, status

    payload, status = asyncio.run(scenario())

    assert payload == {"path": "/quote/ltp", "status": "success"}
    assert transport.requests[0].url.params["i"] == "NSE:INFY"
    assert status.mps_counter == 1


def test_post_sends_form_payload():
    transport = StubTransport()

    async def scenario():
        client, http = _client(transport)
        await client.post("/orders/regular", {"quantity": "1"})
        await client.aclose()
        await http.aclose()

    asyncio.run(scenario())

    request = transport.requests[0]
    assert request.method == "POST"
    assert request.content == b"quantity=1"


def test_http_errors_reach_handler_and_caller():
    transport = StubTransport(status_code=429)
    errors: list = []

    async def scenario():
        client, http = _client(transport, errors)
        with pytest.raises(httpx.HTTPStatusError):
            await client.delete("/orders/regular/1")
        await client.aclose()
        await http.aclose()

    asyncio.run(scenario())

    assert len(errors) == 1
    assert isinstance(errors[0], httpx.HTTPStatusError)
    assert errors[0].response.status_code == 429
