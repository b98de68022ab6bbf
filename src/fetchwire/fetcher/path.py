# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import re
from typing import Any, Iterator, Mapping
from urllib.parse import quote, urlencode

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_json

from fetchwire.fetcher.errors import SerializationError

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

# URI component encoding keeps these literal, on top of the alphanumerics and
# "_.-~" that quote() never escapes.
_URI_COMPONENT_SAFE = "!*'()"

QueryRecord = Mapping[str, Any] | BaseModel


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_uri_component(value: Any) -> str:
    return quote(stringify(value), safe=_URI_COMPONENT_SAFE)


def template_parameters(template: str) -> list[str]:
    """Names of the ``:name`` placeholders of a path template, in order."""
    return PLACEHOLDER_PATTERN.findall(template)


def build_path(template: str, *params: Any) -> str:
    """
    Substitute ``params`` into the ``:name`` placeholders of ``template``, left to right.

    Every value is percent-encoded as a URI component. Mismatched counts are not
    checked: missing values leave their placeholders untouched and surplus values
    are dropped, so the server ends up answering 404/400.
    """
    remaining = iter(params)
    substituted = 0

    def substitute(match: "re.Match[str]") -> str:
        nonlocal substituted
        try:
            value = next(remaining)
        except StopIteration:
            return match.group(0)
        substituted += 1
        return encode_uri_component(value)

    path = PLACEHOLDER_PATTERN.sub(substitute, template)

    if substituted != len(params):
        logger.debug(
            "Path template %s received %s parameters, %s were used",
            template,
            len(params),
            substituted,
        )

    return path


def _encode_nested(key: str, value: Any) -> str:
    try:
        return to_json(value, by_alias=True).decode("utf-8")
    except PydanticSerializationError as err:
        raise SerializationError(
            f"Query value {key!r} of type {type(value).__name__} is not JSON serializable"
        ) from err


def _query_pairs(record: QueryRecord) -> Iterator[tuple[str, str]]:
    if isinstance(record, BaseModel):
        record = record.model_dump(mode="json", by_alias=True, exclude_none=True)

    for key, value in record.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            if any(isinstance(item, (Mapping, list, tuple, BaseModel)) for item in value):
                yield key, _encode_nested(key, value)
                continue
            for item in value:
                if item is not None:
                    yield key, stringify(item)
        elif isinstance(value, (Mapping, BaseModel)):
            yield key, _encode_nested(key, value)
        else:
            yield key, stringify(value)


def build_query(record: QueryRecord | None) -> str:
    """
    Encode ``record`` as an ``application/x-www-form-urlencoded`` string, without the leading ``?``.

    ``None`` values are omitted, primitive lists become repeated keys and
    nested structures are sent as a single JSON-encoded value.
    """
    if not record:
        return ""
    return urlencode(list(_query_pairs(record)))


def join_path_and_query(path: str, record: QueryRecord | None) -> str:
    query = build_query(record)
    if not query:
        return path
    return f"{path}?{query}"


__all__ = [
    "build_path",
    "build_query",
    "join_path_and_query",
    "encode_uri_component",
    "template_parameters",
    "stringify",
]
