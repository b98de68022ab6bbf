# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import asyncio
import logging
from typing import Any

from pydantic import BaseModel

from fetchwire import (
    BearerTokenAuth,
    Body,
    ConnectionDescriptor,
    Encrypted,
    Fetcher,
    Get,
    IConnection,
    Post,
    Query,
    endpoint,
)


class PageRequest(BaseModel):
    page: int = 1
    limit: int = 20


class Comment(BaseModel):
    id: int
    body: str


@endpoint(validate_output=True)
@Post("/sellers/:section/sales/:saleId/articles/:articleId/comments")
@Body("input")
async def store(
    connection: IConnection,
    section: str,
    sale_id: int,
    article_id: int,
    input: dict[str, Any],
) -> Comment: ...


@endpoint
@Encrypted(response=True)
@Get("/sellers/:section/sales/:saleId/entire")
@Query("query")
async def index(
    connection: IConnection, section: str, sale_id: int, query: PageRequest
) -> dict[str, Any]:
    """Paginated articles of a sale, answered encrypted."""
    ...


async def main() -> None:
    connection = ConnectionDescriptor.from_env()
    fetcher = Fetcher(middlewares=[BearerTokenAuth("token")])

    print(index.METHOD, index.path("general", 10, query=PageRequest(page=2)))

    comment = await store.with_fetcher(fetcher)(
        connection, "general", 10, 55, {"body": "hi"}
    )
    print(comment)

    page = await index.with_fetcher(fetcher)(
        connection, "general", 10, PageRequest(page=2)
    )
    print(page)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
