# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import importlib
import json
import logging
import sys
import time
from pathlib import Path
from types import ModuleType
from typing import Any

import click
from pydantic import ValidationError

from fetchwire.fetcher.endpoint import Endpoint
from fetchwire.fetcher.routes import RouteTable
from fetchwire.tools.codegen import load_routes, render_endpoints


def find_item_by_module_path(
    module_path: str,
) -> Any:
    module_name, _, attr = module_path.partition(":")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        if e.name == module_name:
            raise ImportError("Module %s not found" % module_name) from e
        else:
            raise

    if not attr:
        return module

    if not hasattr(module, attr):
        raise ValueError("module %s has no attribute %s" % (module, attr))

    return getattr(module, attr)


def find_route_table_by_module_path(module_path: str) -> RouteTable:

    item = find_item_by_module_path(module_path)

    if isinstance(item, RouteTable):
        return item
    if isinstance(item, ModuleType):
        return RouteTable.from_module(item)
    if isinstance(item, Endpoint):
        return RouteTable([item])

    raise ValueError(
        "%s must be a module, a RouteTable or an Endpoint (it is %s)"
        % (module_path, str(type(item)))
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="FETCHWIRE_LOG_LEVEL",
)
def cli(log_level: str) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.argument(
    "routes_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    envvar="ROUTES_PATH",
)
@click.argument(
    "file_path",
    type=click.Path(file_okay=True, dir_okay=False),
    required=False,
    envvar="FILE_PATH",
)
@click.option(
    "--stdout",
    is_flag=True,
    envvar="STDOUT",
    help="Print the generated module to stdout instead of writing to a file",
)
def gen(routes_path: str, file_path: str | None, stdout: bool) -> None:
    """Generate a module of typed endpoint functions from a JSON route list."""

    if not file_path and not stdout:
        raise click.UsageError("either FILE_PATH or --stdout must be provided")

    try:
        content = render_endpoints(
            load_routes(routes_path), source=Path(routes_path).name
        )
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid route list {routes_path}: {e}") from e

    if stdout:
        click.echo(content, nl=False)
        return

    assert file_path is not None
    Path(file_path).write_text(content, encoding="utf-8")

    click.echo(
        f"Generated endpoints at {time.strftime('%H:%M:%S')} at {str(Path(file_path).absolute())}",
        err=True,
    )


@cli.command()
@click.argument("module_path", type=str, envvar="MODULE_PATH")
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    default=False,
    help="Output the route table in JSON format",
)
def routes(module_path: str, output_json: bool) -> None:
    """Print the route table of a module of endpoints.

    MODULE_PATH is either a module (``package.api``) or ``module:attribute``
    pointing at a RouteTable or a single endpoint.

    Examples:

    \b
    fetchwire routes myapi.functional.sellers
    fetchwire routes myapi.functional:ROUTES --json
    """

    try:
        table = find_route_table_by_module_path(module_path)
    except (ImportError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if output_json:
        click.echo(json.dumps(table.describe(), indent=2))
        return

    if not len(table):
        click.echo("No endpoints found.", file=sys.stderr)
        return

    for route in table.describe():
        encrypted = ",".join(
            direction
            for direction in ("request", "response")
            if route["encrypted"][direction]
        )
        click.echo(
            f"{route['method']:<7} {route['path']:<60} {encrypted or '-':<17} {route['name']}"
        )
