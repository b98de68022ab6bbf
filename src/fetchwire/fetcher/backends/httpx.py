# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import time
from typing import Optional

import httpx

from fetchwire.fetcher.dispatcher import (
    HttpRPCAsyncBackend,
    HttpRPCRequest,
    HttpRPCResponse,
)
from fetchwire.fetcher.errors import (
    SerializationError,
    TimeoutException,
    TransportError,
)


def _backend_request(err: httpx.RequestError) -> httpx.Request | None:
    try:
        return err.request
    except RuntimeError:
        # .request is unset when the error was raised outside a transport
        return None


class HTTPXHttpRPCAsyncBackend(HttpRPCAsyncBackend):
    """
    Sends requests with a short-lived ``httpx.AsyncClient``.

    ``transport`` replaces the network layer of httpx, e.g. with an
    ``httpx.MockTransport``. It is closed together with each client, so it
    must not hold a connection pool.
    """

    def __init__(
        self,
        default_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.default_timeout = default_timeout
        self.transport = transport

    async def request(
        self,
        request: HttpRPCRequest,
    ) -> HttpRPCResponse:

        start_time = time.time()

        timeout = (
            request.timeout if request.timeout is not None else self.default_timeout
        )

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.request(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    content=request.body,
                    timeout=timeout,
                )
            except httpx.TimeoutException as err:
                raise TimeoutException(
                    f"Request timed out: {err}",
                    request=request,
                    backend_request=_backend_request(err),
                ) from err
            except httpx.DecodingError as err:
                raise SerializationError(
                    f"Response body could not be decoded: {err}"
                ) from err
            except httpx.RequestError as err:
                raise TransportError(
                    f"Network error: {err}",
                    request=request,
                    backend_request=_backend_request(err),
                ) from err
            except httpx.InvalidURL as err:
                raise TransportError(f"Invalid URL: {err}", request=request) from err

            return HttpRPCResponse(
                status_code=response.status_code,
                data=response.content,
                headers=dict(response.headers),
                elapsed_time=time.time() - start_time,
            )
