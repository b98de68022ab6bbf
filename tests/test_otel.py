# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Tests for trace context propagation.
"""

from typing import Callable

import httpx
from opentelemetry import baggage, context, trace
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

from conftest import RecordingTransport
from fetchwire.fetcher.backends.otel import TracedRequestMiddleware
from fetchwire.fetcher.connection import ConnectionDescriptor
from fetchwire.fetcher.dispatcher import Fetcher, HttpRPCRequest
from fetchwire.fetcher.encryption import PLAIN

TRACE_ID = 0x4BF92F3577B34DA6A3CE929D0E0E4736
SPAN_ID = 0x00F067AA0BA902B7


def remote_context() -> context.Context:
    span = NonRecordingSpan(
        SpanContext(
            trace_id=TRACE_ID,
            span_id=SPAN_ID,
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED),
        )
    )
    return baggage.set_baggage(
        "tenant", "acme", context=trace.set_span_in_context(span)
    )


class TestTracedRequestMiddleware:
    """Test suite for TracedRequestMiddleware."""

    def test_without_active_span(self) -> None:
        """Test that nothing is added outside a trace."""
        request = HttpRPCRequest(url="/", method="GET", headers=[], body=None)

        TracedRequestMiddleware().on_request(request)

        assert [key for key, _ in request.headers] == []

    async def test_injects_trace_headers(
        self,
        connection: ConnectionDescriptor,
        make_fetcher: Callable[..., tuple[Fetcher, RecordingTransport]],
    ) -> None:
        """Test that the active span and baggage travel with the request."""
        fetcher, transport = make_fetcher(
            lambda request: httpx.Response(200, content=b"{}"),
            middlewares=[TracedRequestMiddleware()],
        )

        token = context.attach(remote_context())
        try:
            await fetcher.dispatch(connection, PLAIN, "GET", "/health")
        finally:
            context.detach(token)

        assert transport.last.headers["traceparent"] == (
            f"00-{TRACE_ID:032x}-{SPAN_ID:016x}-01"
        )
        assert transport.last.headers["baggage"] == "tenant=acme"
