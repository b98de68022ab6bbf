# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Tests for the declaration recorded by the stub decorators.
"""

import pytest

from fetchwire.fetcher.declaration import DeclarationDecorator, EndpointDeclaration
from fetchwire.fetcher.encryption import EncryptionPolicy
from fetchwire.fetcher.endpoint import Body, Encrypted, Get, Post, Query


class TestEndpointDeclaration:
    """Test suite for DeclarationDecorator and EndpointDeclaration."""

    def test_returns_the_stub_unchanged(self) -> None:
        """Test that decorating only records the declaration."""

        async def stub() -> None: ...

        assert Get("/a")(stub) is stub

    def test_collects_every_decorator(self) -> None:
        """Test that stacked decorators fill one declaration."""

        @Encrypted(response=True)
        @Get("/a/:id")
        @Query("q")
        @Body("b")
        async def stub() -> None: ...

        assert DeclarationDecorator.declaration_of(stub) == EndpointDeclaration(
            method="GET",
            path="/a/:id",
            encrypted=EncryptionPolicy(request=False, response=True),
            query="q",
            body="b",
        )

    def test_undecorated_stub(self) -> None:
        """Test that plain functions carry no declaration."""

        def plain() -> None: ...

        assert DeclarationDecorator.declaration_of(plain) is None

    @pytest.mark.parametrize(
        "first,second",
        [
            (Get("/a"), Post("/a")),
            (Query("q"), Query("other")),
            (Body("b"), Body("other")),
            (Encrypted(request=True), Encrypted(response=True)),
        ],
    )
    def test_conflicting_declarations(
        self, first: DeclarationDecorator, second: DeclarationDecorator
    ) -> None:
        """Test that a part of the declaration cannot be given twice."""

        async def stub() -> None: ...

        first(stub)

        with pytest.raises(ValueError, match="more than once"):
            second(stub)
