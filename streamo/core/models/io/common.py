"""
Shared I/O models.

Pagination envelope and small message payloads reused by several routers.
"""

from __future__ import annotations

import math
import re
from typing import Annotated, Generic, List, TypeVar

from pydantic import AfterValidator, BaseModel, Field

ItemT = TypeVar("ItemT")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str) -> str:
    """Lowercase and validate an email address."""
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class Page(BaseModel, Generic[ItemT]):
    """One page of a paginated listing."""

    items: List[ItemT]
    total: int = Field(description="Total number of matching rows")
    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    pages: int = Field(description="Total number of pages")

    @classmethod
    def build(cls, items: List[ItemT], total: int, page: int, limit: int) -> "Page[ItemT]":
        return cls(items=items, total=total, page=page, limit=limit, pages=math.ceil(total / limit) if limit else 0)


class MessageResponse(BaseModel):
    message: str


EmailAddress = Annotated[str, AfterValidator(normalize_email)]

# bcrypt only looks at the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


def check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=6), AfterValidator(check_password_length)]
