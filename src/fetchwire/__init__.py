# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fetchwire.fetcher.backends.httpx import HTTPXHttpRPCAsyncBackend
    from fetchwire.fetcher.backends.otel import TracedRequestMiddleware
    from fetchwire.fetcher.connection import ConnectionDescriptor, IConnection
    from fetchwire.fetcher.dispatcher import (
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
    from fetchwire.fetcher.encryption import EncryptionPolicy, decrypt, encrypt
    from fetchwire.fetcher.endpoint import (
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
    from fetchwire.fetcher.errors import (
        EncryptionError,
        FetcherError,
        HttpStatusError,
        ResponseValidationError,
        SerializationError,
        TimeoutException,
        TransportError,
    )
    from fetchwire.fetcher.path import build_path, build_query
    from fetchwire.fetcher.routes import RouteTable

    __all__ = [
        "ConnectionDescriptor",
        "IConnection",
        "build_path",
        "build_query",
        "EncryptionPolicy",
        "encrypt",
        "decrypt",
        "Fetcher",
        "dispatch",
        "HttpRPCRequest",
        "HttpRPCResponse",
        "HttpRPCAsyncBackend",
        "HTTPXHttpRPCAsyncBackend",
        "TracedRequestMiddleware",
        "RequestMiddleware",
        "ResponseMiddleware",
        "AuthenticationMiddleware",
        "BearerTokenAuth",
        "BasicAuth",
        "ApiKeyAuth",
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
        "FetcherError",
        "TransportError",
        "TimeoutException",
        "HttpStatusError",
        "EncryptionError",
        "SerializationError",
        "ResponseValidationError",
    ]

__SPEC_PARENT__: str = __spec__.parent  # type: ignore
# A mapping of {<member name>: (package, <module name>)} defining dynamic imports
_dynamic_imports: "dict[str, tuple[str, str]]" = {
    "ConnectionDescriptor": (__SPEC_PARENT__, "fetcher.connection"),
    "IConnection": (__SPEC_PARENT__, "fetcher.connection"),
    "build_path": (__SPEC_PARENT__, "fetcher.path"),
    "build_query": (__SPEC_PARENT__, "fetcher.path"),
    "EncryptionPolicy": (__SPEC_PARENT__, "fetcher.encryption"),
    "encrypt": (__SPEC_PARENT__, "fetcher.encryption"),
    "decrypt": (__SPEC_PARENT__, "fetcher.encryption"),
    "Fetcher": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "dispatch": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "HttpRPCRequest": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "HttpRPCResponse": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "HttpRPCAsyncBackend": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "RequestMiddleware": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "ResponseMiddleware": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "AuthenticationMiddleware": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "BearerTokenAuth": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "BasicAuth": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "ApiKeyAuth": (__SPEC_PARENT__, "fetcher.dispatcher"),
    "HTTPXHttpRPCAsyncBackend": (__SPEC_PARENT__, "fetcher.backends.httpx"),
    "TracedRequestMiddleware": (__SPEC_PARENT__, "fetcher.backends.otel"),
    "endpoint": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Endpoint": (__SPEC_PARENT__, "fetcher.endpoint"),
    "RouteDescriptor": (__SPEC_PARENT__, "fetcher.endpoint"),
    "HttpMapping": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Get": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Post": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Put": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Patch": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Delete": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Query": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Body": (__SPEC_PARENT__, "fetcher.endpoint"),
    "Encrypted": (__SPEC_PARENT__, "fetcher.endpoint"),
    "RouteTable": (__SPEC_PARENT__, "fetcher.routes"),
    "FetcherError": (__SPEC_PARENT__, "fetcher.errors"),
    "TransportError": (__SPEC_PARENT__, "fetcher.errors"),
    "TimeoutException": (__SPEC_PARENT__, "fetcher.errors"),
    "HttpStatusError": (__SPEC_PARENT__, "fetcher.errors"),
    "EncryptionError": (__SPEC_PARENT__, "fetcher.errors"),
    "SerializationError": (__SPEC_PARENT__, "fetcher.errors"),
    "ResponseValidationError": (__SPEC_PARENT__, "fetcher.errors"),
}


def __getattr__(attr_name: str) -> object:

    dynamic_attr = _dynamic_imports.get(attr_name)
    if dynamic_attr is None:
        raise AttributeError(f"module {__name__!r} has no attribute {attr_name!r}")

    package, module_name = dynamic_attr

    module = import_module(f"{package}.{module_name}", package=package)
    result = getattr(module, attr_name)
    globals()[attr_name] = result
    return result


def __dir__() -> "list[str]":
    return list(_dynamic_imports)
