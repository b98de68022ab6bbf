# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import inspect
import logging
from dataclasses import asdict, dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Literal,
    Optional,
    ParamSpec,
    TypeVar,
    cast,
    get_type_hints,
)

from fetchwire.fetcher.connection import ConnectionDescriptor
from fetchwire.fetcher.declaration import DeclarationDecorator, EndpointDeclaration
from fetchwire.fetcher.dispatcher import HTTP_METHODS, Fetcher, HttpMethod, dispatch
from fetchwire.fetcher.encryption import PLAIN, EncryptionPolicy
from fetchwire.fetcher.path import build_path, join_path_and_query, template_parameters

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class HttpMapping(DeclarationDecorator):

    def __init__(self, method: HttpMethod, path: str):
        self.method = method
        self.path = path

    def declare(self, declaration: EndpointDeclaration) -> None:
        declaration.set_once("method", self.method, "An HTTP mapping")
        declaration.path = self.path


class Post(HttpMapping):

    def __init__(self, path: str):
        super().__init__("POST", path)


class Get(HttpMapping):

    def __init__(self, path: str):
        super().__init__("GET", path)


class Patch(HttpMapping):

    def __init__(self, path: str):
        super().__init__("PATCH", path)


class Put(HttpMapping):

    def __init__(self, path: str):
        super().__init__("PUT", path)


class Delete(HttpMapping):

    def __init__(self, path: str):
        super().__init__("DELETE", path)


class RequestAttribute(DeclarationDecorator):

    def __init__(self, attribute_type: Literal["query", "body"], name: str):
        self.attribute_type = attribute_type
        self.name = name

    def declare(self, declaration: EndpointDeclaration) -> None:
        declaration.set_once(
            self.attribute_type, self.name, f"@{type(self).__name__}"
        )


class Query(RequestAttribute):
    """Marks the parameter holding the query record of the endpoint"""

    def __init__(self, name: str = "query"):
        super().__init__("query", name)


class Body(RequestAttribute):
    """Marks the parameter holding the request body of the endpoint"""

    def __init__(self, name: str = "input"):
        super().__init__("body", name)


class Encrypted(DeclarationDecorator):

    def __init__(self, request: bool = False, response: bool = False):
        self.policy = EncryptionPolicy(request=request, response=response)

    def declare(self, declaration: EndpointDeclaration) -> None:
        declaration.set_once("encrypted", self.policy, "@Encrypted")


@dataclass(frozen=True)
class RouteDescriptor:
    """
    Everything needed to call an endpoint, fixed when the endpoint is declared.

    ``parameters`` are the route parameter names in template order; they
    default to the placeholders of ``path``. ``query`` and ``body`` name the
    arguments carrying the query record and the request body, if any.
    """

    method: HttpMethod
    path: str
    encrypted: EncryptionPolicy = PLAIN
    parameters: tuple[str, ...] = None  # type: ignore[assignment]
    query: Optional[str] = None
    body: Optional[str] = None

    def __post_init__(self) -> None:
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.path.startswith("/"):
            raise ValueError(f"Path template must be absolute: {self.path}")
        if self.parameters is None:
            object.__setattr__(
                self, "parameters", tuple(template_parameters(self.path))
            )
        else:
            object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def arguments(self) -> tuple[str, ...]:
        """Positional argument names following the connection"""
        return self.parameters + tuple(
            name for name in (self.query, self.body) if name is not None
        )

    def build_path(self, *params: Any, query: Any = None) -> str:
        return join_path_and_query(build_path(self.path, *params), query)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Endpoint(Generic[P, T]):
    """
    A callable endpoint bound to a fixed :class:`RouteDescriptor`.

    The descriptor is exposed as ``METHOD``, ``PATH`` and ``ENCRYPTED`` and
    through :meth:`path` and :meth:`describe`, none of which performs a call.

    Calling the endpoint takes the connection, the route parameters in order,
    then the query record and/or body::

        comment = await store(connection, "general", 10, 55, {"body": "hi"})
    """

    def __init__(
        self,
        descriptor: RouteDescriptor,
        name: Optional[str] = None,
        output: Any = None,
        validate_output: bool = False,
        fetcher: Optional[Fetcher] = None,
        arguments: Optional[tuple[str, ...]] = None,
    ):
        self._descriptor = descriptor
        self._output = output
        self._validate_output = validate_output
        self._fetcher = fetcher
        self._arguments = arguments if arguments is not None else descriptor.arguments
        self.__name__ = name or "endpoint"

    @property
    def METHOD(self) -> HttpMethod:
        return self._descriptor.method

    @property
    def PATH(self) -> str:
        return self._descriptor.path

    @property
    def ENCRYPTED(self) -> EncryptionPolicy:
        return self._descriptor.encrypted

    @property
    def output(self) -> Any:
        return self._output

    def describe(self) -> RouteDescriptor:
        return self._descriptor

    def path(self, *params: Any, query: Any = None) -> str:
        return self._descriptor.build_path(*params, query=query)

    def with_fetcher(self, fetcher: Fetcher) -> "Endpoint[P, T]":
        """Same endpoint, dispatched through ``fetcher`` instead of the default one"""
        bound = cast("Endpoint[P, T]", object.__new__(type(self)))
        bound.__dict__.update(self.__dict__)
        bound._fetcher = fetcher
        return bound

    def _bind(
        self, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> tuple[list[Any], Any, Any]:
        values = dict(zip(self._arguments, args))
        surplus = list(args[len(self._arguments) :])

        for key, value in kwargs.items():
            if key not in self._arguments:
                raise TypeError(f"{self.__name__}() got an unexpected argument {key!r}")
            if key in values:
                raise TypeError(f"{self.__name__}() got multiple values for {key!r}")
            values[key] = value

        route_params = [
            values[name] for name in self._descriptor.parameters if name in values
        ]
        query = values.get(self._descriptor.query) if self._descriptor.query else None
        body = values.get(self._descriptor.body) if self._descriptor.body else None

        return route_params + surplus, query, body

    async def invoke(
        self,
        connection: ConnectionDescriptor,
        *args: Any,
        fetcher: Optional[Fetcher] = None,
        **kwargs: Any,
    ) -> T:
        route_params, query, body = self._bind(args, kwargs)
        descriptor = self._descriptor

        return cast(
            T,
            await dispatch(
                connection,
                descriptor.encrypted,
                descriptor.method,
                descriptor.build_path(*route_params, query=query),
                body,
                output=self._output if self._validate_output else None,
                fetcher=fetcher or self._fetcher,
            ),
        )

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Awaitable[T]:
        return self.invoke(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<Endpoint {self.__name__} {self.METHOD} {self.PATH}>"


def endpoint(
    func: Optional[Callable[P, Awaitable[T]]] = None,
    *,
    validate_output: bool = False,
) -> Any:
    """
    Turn a decorated async stub into an :class:`Endpoint`.

    The stub's first parameter receives the connection. Parameters named by
    ``@Query``/``@Body`` carry the query record and body, every other
    parameter is a route parameter, matched to the template placeholders by
    position::

        @endpoint
        @Encrypted(response=True)
        @Get("/sellers/:section/sales/:saleId/entire")
        @Query("query")
        async def index(
            connection: IConnection, section: str, sale_id: int, query: PageRequest
        ) -> Page: ...
    """

    def wrap(stub: Callable[P, Awaitable[T]]) -> Endpoint[P, T]:
        declaration = DeclarationDecorator.declaration_of(stub)
        if declaration is None or declaration.method is None:
            raise ValueError(
                f"{stub.__qualname__} has no HTTP mapping (@Get, @Post, ...)"
            )
        assert declaration.path is not None
        query, body = declaration.query, declaration.body

        signature_names = list(inspect.signature(stub).parameters.keys())
        if not signature_names:
            raise ValueError(f"{stub.__qualname__} must accept a connection argument")
        arguments = tuple(signature_names[1:])

        for name in (query, body):
            if name is not None and name not in arguments:
                raise ValueError(f"{stub.__qualname__} has no parameter named {name!r}")

        descriptor = RouteDescriptor(
            method=cast(HttpMethod, declaration.method),
            path=declaration.path,
            encrypted=declaration.encrypted or PLAIN,
            parameters=tuple(name for name in arguments if name not in (query, body)),
            query=query,
            body=body,
        )

        placeholders = template_parameters(descriptor.path)
        if len(placeholders) != len(descriptor.parameters):
            logger.warning(
                "%s declares %s route parameters but %s has %s placeholders",
                stub.__qualname__,
                len(descriptor.parameters),
                descriptor.path,
                len(placeholders),
            )

        output = get_type_hints(stub).get("return") if validate_output else None

        ep: Endpoint[P, T] = Endpoint(
            descriptor,
            name=stub.__name__,
            output=output,
            validate_output=validate_output,
            arguments=arguments,
        )
        ep.__doc__ = stub.__doc__
        ep.__module__ = stub.__module__
        ep.__qualname__ = stub.__qualname__
        ep.__wrapped__ = stub
        return ep

    if func is not None:
        return wrap(func)
    return wrap


__all__ = [
    "HttpMapping",
    "Get",
    "Post",
    "Put",
    "Patch",
    "Delete",
    "RequestAttribute",
    "Query",
    "Body",
    "Encrypted",
    "RouteDescriptor",
    "Endpoint",
    "endpoint",
]
