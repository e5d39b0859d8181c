"""
Products API endpoints.

Each handler borrows one pooled connection for one statement. A failing
statement is logged by `db.pooled_connection` and the handler returns None,
so the client gets a 200 with a `null` body rather than an error status.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Depends

from core import db

from . import repository, schemas

router = APIRouter()


@router.get("/")
async def list_products(
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict[str, Any]] | None:
    async with db.pooled_connection(pool, "list_products") as conn:
        return await repository.list_products(conn)
    return None


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[dict[str, Any]] | None:
    async with db.pooled_connection(pool, "get_product") as conn:
        return await repository.get_product(conn, product_id)
    return None


@router.post("/add")
async def create_product(
    request: schemas.ProductBody,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict[str, Any] | None:
    async with db.pooled_connection(pool, "create_product") as conn:
        return await repository.create_product(conn, **request.model_dump())
    return None


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    request: schemas.ProductBody,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict[str, Any] | None:
    async with db.pooled_connection(pool, "update_product") as conn:
        return await repository.update_product(conn, product_id, **request.model_dump())
    return None


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict[str, Any] | None:
    async with db.pooled_connection(pool, "delete_product") as conn:
        return await repository.delete_product(conn, product_id)
    return None
