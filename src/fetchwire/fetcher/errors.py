# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from fetchwire.fetcher.dispatcher import HttpRPCRequest


class FetcherError(Exception):
    """Base class for every error raised while dispatching an endpoint call"""


class TransportError(FetcherError):
    """The request never got an HTTP answer (DNS, TCP, TLS, timeout...)"""

    def __init__(
        self,
        message: str,
        request: "Optional[HttpRPCRequest]" = None,
        backend_request: Any = None,
    ):
        self.request = request
        self.backend_request = backend_request
        super().__init__(message)


class TimeoutException(TransportError):
    """Exception raised when a request times out"""


class HttpStatusError(FetcherError):
    """The server answered with a non-2xx status code.

    The body is kept exactly as the server sent it so callers can inspect
    server-defined error payloads.
    """

    def __init__(
        self,
        code: int,
        body: bytes,
        headers: Optional[Mapping[str, str]] = None,
        request: "Optional[HttpRPCRequest]" = None,
    ):
        self.code = code
        self.body = body
        self.headers = dict(headers or {})
        self.request = request
        super().__init__(f"HTTP {code}")

    @property
    def status_code(self) -> int:
        return self.code

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class EncryptionError(FetcherError):
    """Missing password, malformed envelope or failed authentication"""


class SerializationError(FetcherError):
    """A body could not be encoded to, or decoded from, JSON"""


class ResponseValidationError(SerializationError):

    def __init__(self, message: str, data: Any):
        self.data = data
        super().__init__(message)


__all__ = [
    "FetcherError",
    "TransportError",
    "TimeoutException",
    "HttpStatusError",
    "EncryptionError",
    "SerializationError",
    "ResponseValidationError",
]
