# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Runtime of generated HTTP endpoint functions:
- Connection descriptor (host, static headers, encryption password)
- Path and query builders
- Per-endpoint encryption envelope
- The dispatcher every endpoint delegates to
- Endpoint declaration (@endpoint, @Get, @Post, ..., @Query, @Body, @Encrypted)
"""

from .connection import ConnectionDescriptor, IConnection
from .dispatcher import (
    ApiKeyAuth,
    AuthenticationMiddleware,
    BasicAuth,
    BearerTokenAuth,
    Fetcher,
    HttpRPCAsyncBackend,
    HttpRPCRequest,
    HttpRPCResponse,
    RequestMiddleware,
    ResponseMiddleware,
    dispatch,
)
from .encryption import EncryptionPolicy, decrypt, encrypt
from .endpoint import (
    Body,
    Delete,
    Encrypted,
    Endpoint,
    Get,
    HttpMapping,
    Patch,
    Post,
    Put,
    Query,
    RouteDescriptor,
    endpoint,
)
from .errors import (
    EncryptionError,
    FetcherError,
    HttpStatusError,
    ResponseValidationError,
    SerializationError,
    TimeoutException,
    TransportError,
)
from .path import build_path, build_query
from .routes import RouteTable
from .backends.httpx import HTTPXHttpRPCAsyncBackend

__all__ = [
    # Connection
    "ConnectionDescriptor",
    "IConnection",
    # Builders
    "build_path",
    "build_query",
    # Encryption
    "EncryptionPolicy",
    "encrypt",
    "decrypt",
    # Dispatcher
    "Fetcher",
    "dispatch",
    "HttpRPCRequest",
    "HttpRPCResponse",
    "HttpRPCAsyncBackend",
    "HTTPXHttpRPCAsyncBackend",
    # Middlewares
    "RequestMiddleware",
    "ResponseMiddleware",
    "AuthenticationMiddleware",
    "BearerTokenAuth",
    "BasicAuth",
    "ApiKeyAuth",
    # Endpoints
    "endpoint",
    "Endpoint",
    "RouteDescriptor",
    "RouteTable",
    "HttpMapping",
    "Get",
    "Post",
    "Put",
    "Patch",
    "Delete",
    "Query",
    "Body",
    "Encrypted",
    # Exceptions
    "FetcherError",
    "TransportError",
    "TimeoutException",
    "HttpStatusError",
    "EncryptionError",
    "SerializationError",
    "ResponseValidationError",
]
