"""
Pytest fixtures for the products API tests.

The unit tests run the real FastAPI app against an in-memory pool that
counts acquires and releases, so connection handling can be asserted
without a database.
"""

from __future__ import annotations

from typing import Any

import asyncpg
import pytest
from fastapi.testclient import TestClient

from core import db
from main import app


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


class FakeConnection:
    """
    Understands exactly the statements in `products/repository.py`.

    Set `fail` to an exception to make the next statements raise it.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.fail: Exception | None = None
        self.statements: list[tuple[str, tuple[Any, ...]]] = []

    def _check(self, sql: str, args: tuple[Any, ...]) -> str:
        sql = _normalize(sql)
        self.statements.append((sql, args))
        if self.fail is not None:
            raise self.fail
        return sql

    async def fetch(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        sql = self._check(sql, args)
        if sql == "SELECT * FROM products":
            return [dict(row) for row in self.rows.values()]
        if sql == "SELECT * FROM products WHERE id = $1":
            row = self.rows.get(args[0])
            return [dict(row)] if row is not None else []
        if sql.startswith("INSERT INTO products"):
            price = args[2]
            if price is not None and not isinstance(price, (int, float)):
                raise asyncpg.DataError(
                    f"invalid input for query argument $3: {price!r} (a number is required)"
                )
            product_id = self.next_id
            self.next_id += 1
            self.rows[product_id] = {
                "id": product_id,
                "title": args[0],
                "description": args[1],
                "price": args[2],
                "brand": args[3],
                "category": args[4],
                "thumbnail": args[5],
            }
            return [{"id": product_id}]
        raise AssertionError(f"unexpected fetch: {sql}")

    async def execute(self, sql: str, *args: Any) -> str:
        sql = self._check(sql, args)
        if sql.startswith("UPDATE products"):
            price = args[2]
            if price is not None and not isinstance(price, (int, float)):
                raise asyncpg.DataError(
                    f"invalid input for query argument $3: {price!r} (a number is required)"
                )
            row = self.rows.get(args[6])
            if row is None:
                return "UPDATE 0"
            row.update(
                title=args[0],
                description=args[1],
                price=args[2],
                brand=args[3],
                category=args[4],
                thumbnail=args[5],
            )
            return "UPDATE 1"
        if sql == "DELETE FROM products WHERE id = $1":
            removed = self.rows.pop(args[0], None)
            return f"DELETE {1 if removed is not None else 0}"
        raise AssertionError(f"unexpected execute: {sql}")


class _FakeAcquire:
    def __init__(self, pool: FakePool) -> None:
        self._pool = pool

    async def __aenter__(self) -> FakeConnection:
        if self._pool.acquire_error is not None:
            raise self._pool.acquire_error
        self._pool.acquired += 1
        self._pool.in_use += 1
        return self._pool.connection

    async def __aexit__(self, *exc_info: Any) -> bool:
        self._pool.released += 1
        self._pool.in_use -= 1
        return False


class FakePool:
    def __init__(self) -> None:
        self.connection = FakeConnection()
        self.acquired = 0
        self.released = 0
        self.in_use = 0
        self.acquire_error: Exception | None = None

    def acquire(self) -> _FakeAcquire:
        return _FakeAcquire(self)


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def client(fake_pool: FakePool):
    """
    Test client wired to `fake_pool`. The lifespan is not entered, so no
    real pool is created.
    """
    app.dependency_overrides[db.get_pool] = lambda: fake_pool
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_product_data() -> dict[str, Any]:
    return {
        "title": "Shirt",
        "description": "Cotton",
        "price": 19.99,
        "brand": "Acme",
        "category": "Apparel",
        "thumbnail": "http://x/1.png",
    }
