# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from opentelemetry import context, propagate

from fetchwire.fetcher.dispatcher import HttpRPCRequest, RequestMiddleware


class TracedRequestMiddleware(RequestMiddleware):
    """Injects the current trace context and baggage into the outgoing headers"""

    def on_request(self, request: HttpRPCRequest) -> HttpRPCRequest:

        carrier: dict[str, str] = {}
        propagate.inject(carrier, context=context.get_current())

        for key, value in carrier.items():
            request.headers.append((key, value))

        return request
