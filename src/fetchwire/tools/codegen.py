# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import importlib.resources
import keyword
from pathlib import Path
from typing import Literal, Optional

from mako.template import Template
from pydantic import BaseModel, Field, field_validator, model_validator

from fetchwire.fetcher.path import template_parameters

LIBRARY_FILES_PATH = importlib.resources.files("fetchwire.files")
ENDPOINTS_TEMPLATE_PATH = LIBRARY_FILES_PATH / "endpoints.py.mako"

RESERVED_ARGUMENT_NAMES = {"connection", "query", "input", "fetcher"}


def camel_case_to_snake_case(name: str) -> str:
    return "".join(["_" + c.lower() if c.isupper() else c for c in name]).lstrip("_")


class EncryptedSpec(BaseModel):
    request: bool = False
    response: bool = False


class ParameterSpec(BaseModel):
    name: str
    type: str = "str"


class RouteSpec(BaseModel):
    """
    One endpoint to generate.

    ``query``, ``body`` and ``output`` are Python type expressions written as-is
    into the generated module; names they use must be made available through
    :attr:`RoutesFile.imports`.
    """

    name: str
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
    path: str
    encrypted: EncryptedSpec = Field(default_factory=EncryptedSpec)
    parameters: Optional[list[ParameterSpec]] = None
    query: Optional[str] = None
    body: Optional[str] = None
    output: str = "Any"
    doc: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"{value!r} is not a valid Python function name")
        return value

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Path template must be absolute: {value}")
        return value

    @property
    def decorator_name(self) -> str:
        return self.method.capitalize()

    def route_parameters(self) -> list[ParameterSpec]:
        if self.parameters is not None:
            return self.parameters

        parameters = []
        for placeholder in template_parameters(self.path):
            name = camel_case_to_snake_case(placeholder)
            if keyword.iskeyword(name) or name in RESERVED_ARGUMENT_NAMES:
                name = f"{name}_"
            parameters.append(ParameterSpec(name=name))
        return parameters

    @model_validator(mode="after")
    def validate_route_parameters(self) -> "RouteSpec":
        names = [param.name for param in self.route_parameters()]
        for name in names:
            if not name.isidentifier() or keyword.iskeyword(name):
                raise ValueError(f"{name!r} is not a valid Python parameter name")
            if name in RESERVED_ARGUMENT_NAMES:
                raise ValueError(
                    f"{name!r} is reserved by the generated endpoint signature"
                )

        duplicated = sorted({name for name in names if names.count(name) > 1})
        if duplicated:
            raise ValueError(f"Duplicated route parameters: {', '.join(duplicated)}")
        return self


class RoutesFile(BaseModel):
    imports: list[str] = Field(default_factory=list)
    routes: list[RouteSpec]


def load_routes(file_path: str | Path) -> RoutesFile:
    return RoutesFile.model_validate_json(Path(file_path).read_text(encoding="utf-8"))


def render_endpoints(routes_file: RoutesFile, source: str = "routes") -> str:
    names = [route.name for route in routes_file.routes]
    duplicated = sorted({name for name in names if names.count(name) > 1})
    if duplicated:
        raise ValueError(f"Duplicated endpoint names: {', '.join(duplicated)}")

    fetchwire_imports = {"IConnection", "endpoint"}
    for route in routes_file.routes:
        fetchwire_imports.add(route.decorator_name)
        if route.encrypted.request or route.encrypted.response:
            fetchwire_imports.add("Encrypted")
        if route.query is not None:
            fetchwire_imports.add("Query")
        if route.body is not None:
            fetchwire_imports.add("Body")

    imports = list(routes_file.imports)
    if "from typing import Any" not in imports:
        imports.insert(0, "from typing import Any")

    template = Template(filename=str(ENDPOINTS_TEMPLATE_PATH))

    return str(
        template.render(
            source=source,
            fetchwire_imports=sorted(fetchwire_imports),
            imports=imports,
            routes=routes_file.routes,
        )
    )
