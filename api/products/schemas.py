"""
Pydantic schemas for product endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ProductBody(BaseModel):
    """
    Create/update payload. Fields are passed to SQL as received;
    a missing field is stored as NULL.
    """

    title: Any = None
    description: Any = None
    price: Any = None
    brand: Any = None
    category: Any = None
    thumbnail: Any = None
