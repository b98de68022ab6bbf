# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from frozendict import frozendict


def _read_env(var_name: str) -> Optional[str]:
    value = os.environ.get(var_name)
    if value is None or not value.strip():
        return None
    return value


def _parse_headers(var_name: str, raw: Optional[str]) -> dict[str, str]:
    """Parse ``Name=value,Name=value``; values may contain ``=``"""
    headers: dict[str, str] = {}
    if raw is None:
        return headers

    for item in raw.split(","):
        if not item.strip():
            continue
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(
                "Environment variable %s expects Name=value pairs, got %r"
                % (var_name, item.strip())
            )
        headers[name.strip()] = value.strip()
    return headers


def _parse_timeout(var_name: str, raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        timeout = float(raw)
    except ValueError as err:
        raise ValueError(
            "Environment variable %s must be a number of seconds, got %r"
            % (var_name, raw)
        ) from err
    if timeout <= 0:
        raise ValueError(
            "Environment variable %s must be positive, got %r" % (var_name, raw)
        )
    return timeout


@dataclass(frozen=True)
class ConnectionDescriptor:
    """
    Remote host information shared read-only by every endpoint call.

    Descriptors are hashable, so they can key per-host caches.

    Args:
        host: Base URL of the remote server, e.g. ``https://api.example.com``
        headers: Static headers sent with every request
        encryption_password: Password of the encryption envelope, required only
            by endpoints whose encryption policy asks for it
        timeout: Per-request timeout in seconds, ``None`` to use the backend default
    """

    host: str
    headers: Mapping[str, str] = field(default_factory=frozendict)
    encryption_password: Optional[str] = field(default=None, repr=False)
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        # frozen: assign through object.__setattr__
        object.__setattr__(self, "headers", frozendict(self.headers))

    def with_headers(self, **headers: str) -> "ConnectionDescriptor":
        return replace(self, headers={**self.headers, **headers})

    @classmethod
    def from_env(cls, prefix: str = "FETCHWIRE_") -> "ConnectionDescriptor":
        """
        Build a descriptor from ``{prefix}HOST``, ``{prefix}HEADERS``
        (``Name=value,Name=value``), ``{prefix}ENCRYPTION_PASSWORD`` and
        ``{prefix}TIMEOUT`` (seconds). Only the host is required.
        """
        host = _read_env(f"{prefix}HOST")
        if host is None:
            raise ValueError("Environment variable %sHOST is not set" % prefix)

        return cls(
            host=host.strip(),
            headers=_parse_headers(
                f"{prefix}HEADERS", _read_env(f"{prefix}HEADERS")
            ),
            encryption_password=_read_env(f"{prefix}ENCRYPTION_PASSWORD"),
            timeout=_parse_timeout(f"{prefix}TIMEOUT", _read_env(f"{prefix}TIMEOUT")),
        )


IConnection = ConnectionDescriptor

__all__ = ["ConnectionDescriptor", "IConnection"]
