# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Pytest configuration and fixtures for fetchwire tests.
"""

from typing import Callable

import httpx
import pytest

from fetchwire.fetcher.backends.httpx import HTTPXHttpRPCAsyncBackend
from fetchwire.fetcher.connection import ConnectionDescriptor
from fetchwire.fetcher.dispatcher import Fetcher

PASSWORD = "correct horse battery staple"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """Mock transport keeping every request it served."""

    def __init__(self, handler: Handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def connection() -> ConnectionDescriptor:
    """Connection without encryption password."""
    return ConnectionDescriptor(
        host="https://api.example.com",
        headers={"X-Tenant": "acme"},
    )


@pytest.fixture
def encrypted_connection() -> ConnectionDescriptor:
    """Connection carrying an encryption password."""
    return ConnectionDescriptor(
        host="https://api.example.com",
        headers={"X-Tenant": "acme"},
        encryption_password=PASSWORD,
    )


@pytest.fixture
def make_fetcher() -> Callable[..., tuple[Fetcher, RecordingTransport]]:
    """Build a Fetcher whose network layer is served by ``handler``."""

    def factory(
        handler: Handler, **kwargs: object
    ) -> tuple[Fetcher, RecordingTransport]:
        transport = RecordingTransport(handler)
        fetcher = Fetcher(HTTPXHttpRPCAsyncBackend(transport=transport), **kwargs)  # type: ignore[arg-type]
        return fetcher, transport

    return factory
