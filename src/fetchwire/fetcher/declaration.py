# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from fetchwire.fetcher.encryption import EncryptionPolicy

STUB_T = TypeVar("STUB_T", bound=Callable[..., Any])


@dataclass
class EndpointDeclaration:
    """
    What the decorators stacked on an endpoint stub declared so far.

    ``@endpoint`` reads it once to build the endpoint's route descriptor.
    """

    method: Optional[str] = None
    path: Optional[str] = None
    encrypted: Optional[EncryptionPolicy] = None
    query: Optional[str] = None
    body: Optional[str] = None

    def set_once(self, attribute: str, value: Any, decorator: str) -> None:
        if getattr(self, attribute) is not None:
            raise ValueError(f"{decorator} is declared more than once on the same stub")
        setattr(self, attribute, value)


class DeclarationDecorator:
    """
    Base of the stub decorators (``@Get``, ``@Query``, ``@Encrypted``, ...).

    Applying one records its part of the declaration on the stub and returns
    the stub itself, so they can be stacked in any order under ``@endpoint``.
    """

    _ATTR_NAME: str = "__fetchwire_declaration__"

    def __call__(self, stub: STUB_T) -> STUB_T:
        declaration = self.declaration_of(stub)
        if declaration is None:
            declaration = EndpointDeclaration()
            setattr(stub, self._ATTR_NAME, declaration)
        self.declare(declaration)
        return stub

    def declare(self, declaration: EndpointDeclaration) -> None:
        raise NotImplementedError

    @classmethod
    def declaration_of(cls, stub: Any) -> Optional[EndpointDeclaration]:
        declaration = getattr(stub, cls._ATTR_NAME, None)
        if isinstance(declaration, EndpointDeclaration):
            return declaration
        return None
