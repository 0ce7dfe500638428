"""Shared fixtures for the SDK unit tests."""

import asyncio
import json
from typing import Any, List, Optional

import httpx
import pytest
import pytest_asyncio

from unbound import Unbound
from unbound.stt import StreamChannel


class RecordingHandler:
    """
    httpx.MockTransport handler that records every request.

    Queued responses are returned in order; once the queue is empty every
    request gets ``200 {"ok": true}``.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._responses: List[httpx.Response] = []

    def queue(self, *responses: httpx.Response) -> "RecordingHandler":
        self._responses.extend(responses)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={"ok": True})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


class FakeTransport:
    """Transport plugin double with configurable availability and result."""

    def __init__(
        self,
        name: str,
        priority: int = 50,
        available: Any = True,
        result: Any = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.name = name
        self.priority = priority
        self.available = available
        self.result = {"ok": True, "via": name} if result is None else result
        self.error = error
        self.calls: List[tuple] = []

    def get_priority(self) -> int:
        return self.priority

    def is_available(self) -> bool:
        if isinstance(self.available, Exception):
            raise self.available
        return self.available

    async def request(self, endpoint, method, envelope, context):
        self.calls.append((endpoint, method, envelope, context))
        if self.error is not None:
            raise self.error
        return self.result


class FakeChannel(StreamChannel):
    """In-memory stream channel; push ``None`` on ``incoming`` to end the stream."""

    def __init__(self) -> None:
        self.sent: List[dict] = []
        self.done = False
        self.closed = False
        self.incoming: asyncio.Queue = asyncio.Queue()

    async def send(self, frame):
        self.sent.append(frame)

    async def done_writing(self):
        self.done = True

    async def __aiter__(self):
        while True:
            message = await self.incoming.get()
            if message is None:
                return
            yield message

    async def close(self):
        self.closed = True


async def settle(rounds: int = 10) -> None:
    """Let background tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_client(handler: RecordingHandler, **options: Any) -> Unbound:
    values = dict(
        namespace="acme",
        token="abc",
        environment="server",
        domain="api.unbound.cx",
    )
    values.update(options)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Unbound(http_client=http_client, **values)


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest_asyncio.fixture
async def client(handler):
    client = make_client(handler)
    yield client
    await client.close()
    await client._http._get_client().aclose()


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest_asyncio.fixture
async def channel():
    return FakeChannel()


@pytest.fixture
def run_pending():
    return settle


@pytest.fixture
def client_factory():
    """Build clients with extra options over the same mocked HTTP layer."""
    return make_client
