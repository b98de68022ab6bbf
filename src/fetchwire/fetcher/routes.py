# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import inspect
from types import ModuleType
from typing import Any, Iterable, Iterator

from fetchwire.fetcher.endpoint import Endpoint


class RouteTable:
    """Read-only view over a set of endpoints, for documentation, mocking or routing tools."""

    def __init__(self, endpoints: Iterable[Endpoint[..., Any]] = ()):
        self._endpoints: dict[tuple[str, str], Endpoint[..., Any]] = {}
        for ep in endpoints:
            self.register(ep)

    @classmethod
    def from_module(cls, module: ModuleType) -> "RouteTable":
        return cls(
            member
            for _, member in inspect.getmembers(module)
            if isinstance(member, Endpoint)
        )

    def register(self, ep: Endpoint[..., Any]) -> Endpoint[..., Any]:
        key = (ep.METHOD, ep.PATH)
        if key in self._endpoints:
            raise ValueError(
                f"Route {ep.METHOD} {ep.PATH} is already registered by "
                f"{self._endpoints[key].__name__}"
            )
        self._endpoints[key] = ep
        return ep

    def find(self, method: str, path: str) -> Endpoint[..., Any] | None:
        return self._endpoints.get((method.upper(), path))

    def describe(self) -> list[dict[str, Any]]:
        return [
            {"name": ep.__name__, **ep.describe().to_dict()}
            for ep in self._endpoints.values()
        ]

    def __iter__(self) -> Iterator[Endpoint[..., Any]]:
        return iter(self._endpoints.values())

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, ep: object) -> bool:
        return isinstance(ep, Endpoint) and self.find(ep.METHOD, ep.PATH) is ep
