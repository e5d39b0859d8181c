"""
Product persistence (raw SQL).

Every function runs exactly one statement on a connection the caller has
already acquired.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


async def list_products(conn: asyncpg.Connection) -> list[dict[str, Any]]:
    return await db.fetch_all(conn, "SELECT * FROM products")


async def get_product(conn: asyncpg.Connection, product_id: int) -> list[dict[str, Any]]:
    """
    Return the matching row as a row set: empty when the id does not exist.
    """
    return await db.fetch_all(
        conn,
        """
        SELECT *
        FROM products
        WHERE id = $1
        """,
        product_id,
    )


async def create_product(
    conn: asyncpg.Connection,
    *,
    title: Any,
    description: Any,
    price: Any,
    brand: Any,
    category: Any,
    thumbnail: Any,
) -> dict[str, Any]:
    return await db.fetch_ack(
        conn,
        "INSERT",
        """
        INSERT INTO products (title, description, price, brand, category, thumbnail)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING id
        """,
        title,
        description,
        price,
        brand,
        category,
        thumbnail,
    )


async def update_product(
    conn: asyncpg.Connection,
    product_id: int,
    *,
    title: Any,
    description: Any,
    price: Any,
    brand: Any,
    category: Any,
    thumbnail: Any,
) -> dict[str, Any]:
    """
    Overwrite all six non-id columns. row_count is 0 when the id does not exist.
    """
    return await db.execute_ack(
        conn,
        """
        UPDATE products
        SET title = $1,
            description = $2,
            price = $3,
            brand = $4,
            category = $5,
            thumbnail = $6
        WHERE id = $7
        """,
        title,
        description,
        price,
        brand,
        category,
        thumbnail,
        product_id,
    )


async def delete_product(conn: asyncpg.Connection, product_id: int) -> dict[str, Any]:
    return await db.execute_ack(
        conn,
        """
        DELETE FROM products
        WHERE id = $1
        """,
        product_id,
    )
