# app/schemas/common.py
import math

from sqlmodel import SQLModel


class Pagination(SQLModel):
    """
    Page metadata returned next to every paginated listing.
    """

    page: int
    limit: int
    total: int
    pages: int


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
    )


class Message(SQLModel):
    message: str
