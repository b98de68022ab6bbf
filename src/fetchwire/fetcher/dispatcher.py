# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import asyncio
import base64
import json
import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Literal, Optional, Protocol, Sequence
from urllib.parse import urlsplit

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from fetchwire.fetcher.connection import ConnectionDescriptor
from fetchwire.fetcher.encryption import EncryptionPolicy, decrypt, encrypt
from fetchwire.fetcher.errors import (
    HttpStatusError,
    ResponseValidationError,
    SerializationError,
)

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


@dataclass
class HttpRPCResponse:
    status_code: int
    data: bytes
    headers: Optional[Dict[str, str]] = None
    elapsed_time: Optional[float] = None


@dataclass
class HttpRPCRequest:
    url: str
    method: str
    headers: list[tuple[str, str]]
    body: bytes | None
    timeout: Optional[float] = None


class HttpRPCAsyncBackend(Protocol):

    async def request(
        self,
        request: HttpRPCRequest,
    ) -> HttpRPCResponse: ...


class RequestMiddleware(Protocol):

    def on_request(self, request: HttpRPCRequest) -> HttpRPCRequest: ...


class ResponseMiddleware(Protocol):

    def on_response(
        self, request: HttpRPCRequest, response: HttpRPCResponse
    ) -> HttpRPCResponse: ...


class AuthenticationMiddleware(RequestMiddleware):
    """Base class for authentication middleware"""

    def on_request(self, request: HttpRPCRequest) -> HttpRPCRequest:
        return self.add_auth(request)

    def add_auth(self, request: HttpRPCRequest) -> HttpRPCRequest:
        raise NotImplementedError


class BearerTokenAuth(AuthenticationMiddleware):

    def __init__(self, token: str):
        self.token = token

    def add_auth(self, request: HttpRPCRequest) -> HttpRPCRequest:
        request.headers.append(("Authorization", f"Bearer {self.token}"))
        return request


class BasicAuth(AuthenticationMiddleware):

    def __init__(self, username: str, password: str):
        self.credentials = base64.b64encode(f"{username}:{password}".encode()).decode()

    def add_auth(self, request: HttpRPCRequest) -> HttpRPCRequest:
        request.headers.append(("Authorization", f"Basic {self.credentials}"))
        return request


class ApiKeyAuth(AuthenticationMiddleware):

    def __init__(self, api_key: str, header_name: str = "X-API-Key"):
        self.api_key = api_key
        self.header_name = header_name

    def add_auth(self, request: HttpRPCRequest) -> HttpRPCRequest:
        request.headers.append((self.header_name, self.api_key))
        return request


def encode_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True).encode()
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode()
    try:
        return to_json(body, by_alias=True)
    except PydanticSerializationError as err:
        raise SerializationError(
            f"Request body of type {type(body).__name__} is not JSON serializable"
        ) from err


def decode_body(data: bytes) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise SerializationError("Response body is not valid JSON") from err


@lru_cache(maxsize=None)
def _type_adapter(output: Any) -> TypeAdapter[Any]:
    return TypeAdapter(output)


def validate_output(output: Any, data: Any) -> Any:
    try:
        return _type_adapter(output).validate_python(data)
    except ValidationError as err:
        raise ResponseValidationError(
            f"Response does not match {getattr(output, '__name__', output)}: {err}",
            data,
        ) from err


def route_of(url: str) -> str:
    """Path of ``url`` without scheme, host or query, safe to log"""
    return urlsplit(url).path or "/"


class Fetcher:
    """
    Performs the network exchange of every endpoint call.

    A ``Fetcher`` holds no per-call state, so one instance can serve any
    number of concurrent calls and connections.
    """

    def __init__(
        self,
        backend: Optional[HttpRPCAsyncBackend] = None,
        middlewares: Sequence[RequestMiddleware] = (),
        response_middlewares: Sequence[ResponseMiddleware] = (),
    ):
        if backend is None:
            from fetchwire.fetcher.backends.httpx import HTTPXHttpRPCAsyncBackend

            backend = HTTPXHttpRPCAsyncBackend()

        self._backend = backend
        self._middlewares = tuple(middlewares)
        self._response_middlewares = tuple(response_middlewares)

    async def build_request(
        self,
        connection: ConnectionDescriptor,
        policy: EncryptionPolicy,
        method: str,
        path: str,
        body: Any = None,
    ) -> HttpRPCRequest:
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        headers: list[tuple[str, str]] = [
            ("Accept", "application/json"),
            *connection.headers.items(),
        ]

        body_content: bytes | None = None

        if body is not None:
            body_content = encode_body(body)
            if policy.request:
                # key derivation is CPU bound, keep it off the event loop
                envelope = await asyncio.to_thread(
                    encrypt, body_content, connection.encryption_password
                )
                body_content = envelope.encode("ascii")
                headers.append(("Content-Type", "text/plain"))
            else:
                headers.append(("Content-Type", "application/json"))

        return HttpRPCRequest(
            url=connection.host.rstrip("/") + "/" + path.lstrip("/"),
            method=method,
            headers=headers,
            body=body_content,
            timeout=connection.timeout,
        )

    async def parse_response(
        self,
        connection: ConnectionDescriptor,
        policy: EncryptionPolicy,
        request: HttpRPCRequest,
        response: HttpRPCResponse,
    ) -> Any:
        if not 200 <= response.status_code < 300:
            logger.warning(
                "%s %s answered with status %s",
                request.method,
                route_of(request.url),
                response.status_code,
            )
            raise HttpStatusError(
                response.status_code, response.data, response.headers, request
            )

        if not response.data.strip():
            return None

        data = response.data
        if policy.response:
            plaintext = await asyncio.to_thread(
                decrypt, data, connection.encryption_password
            )
            data = plaintext.encode("utf-8")

        return decode_body(data)

    async def dispatch(
        self,
        connection: ConnectionDescriptor,
        policy: EncryptionPolicy,
        method: str,
        path: str,
        body: Any = None,
        *,
        output: Any = None,
    ) -> Any:
        request = await self.build_request(connection, policy, method, path, body)

        for middleware in self._middlewares:
            request = middleware.on_request(request)

        route = route_of(request.url)
        logger.debug("Dispatching %s %s", request.method, route)
        start_time = time.time()

        response = await self._backend.request(request)

        logger.debug(
            "Received status=%s for %s %s in %.3fs",
            response.status_code,
            request.method,
            route,
            time.time() - start_time,
        )

        for response_middleware in self._response_middlewares:
            response = response_middleware.on_response(request, response)

        result = await self.parse_response(connection, policy, request, response)

        if output is not None:
            return validate_output(output, result)
        return result


@lru_cache(maxsize=1)
def default_fetcher() -> Fetcher:
    return Fetcher()


async def dispatch(
    connection: ConnectionDescriptor,
    policy: EncryptionPolicy,
    method: str,
    path: str,
    body: Any = None,
    *,
    output: Any = None,
    fetcher: Optional[Fetcher] = None,
) -> Any:
    """
    Run a single endpoint call.

    Raises:
        TransportError: the server could not be reached
        HttpStatusError: the server answered with a non-2xx status
        EncryptionError: the encryption envelope could not be applied or opened
        SerializationError: a body could not be encoded or parsed
    """
    return await (fetcher or default_fetcher()).dispatch(
        connection, policy, method, path, body, output=output
    )


__all__ = [
    "HttpMethod",
    "HTTP_METHODS",
    "HttpRPCRequest",
    "HttpRPCResponse",
    "HttpRPCAsyncBackend",
    "RequestMiddleware",
    "ResponseMiddleware",
    "AuthenticationMiddleware",
    "BearerTokenAuth",
    "BasicAuth",
    "ApiKeyAuth",
    "Fetcher",
    "default_fetcher",
    "dispatch",
    "encode_body",
    "decode_body",
    "validate_output",
]
