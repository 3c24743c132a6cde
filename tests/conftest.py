"""Shared fakes and fixtures."""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional

import pytest

from s3kit import Client, Endpoint, HttpResponse, StaticProvider

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass
class SentRequest:
    method: str
    url: str
    headers: Mapping[str, str]
    body: Optional[bytes]
    timeout: Optional[float]


class FakeTransport:
    """Transport that records requests and answers from a handler."""

    def __init__(
        self,
        response: Optional[HttpResponse] = None,
        error: Optional[Exception] = None,
        handler: Optional[Callable[[SentRequest], HttpResponse]] = None,
    ):
        self.response = response or HttpResponse(status=200)
        self.error = error
        self.handler = handler
        self.calls: List[SentRequest] = []
        self._lock = threading.Lock()

    def send(self, method, url, headers, body, timeout):
        request = SentRequest(method, url, dict(headers), body, timeout)
        with self._lock:
            self.calls.append(request)
        if self.error is not None:
            raise self.error
        if self.handler is not None:
            return self.handler(request)
        return self.response

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def endpoint():
    return Endpoint.from_url("localhost:9000", region="us-east-1", secure=False)


@pytest.fixture
def provider():
    return StaticProvider("AKIAEXAMPLE", "secret-key-example")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(endpoint, provider, transport):
    return Client(endpoint, provider, transport=transport, clock=lambda: FIXED_NOW)
