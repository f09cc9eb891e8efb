import math
from dataclasses import dataclass
from typing import Any, Callable, List

from loguru import logger
from sqlalchemy import Select, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import InvalidArgument
from vidtube.schemas.common import OwnerSummary, Page

SORT_DIRECTIONS = {
    "asc": asc,
    "ascending": asc,
    "desc": desc,
    "descending": desc,
}


@dataclass
class PageResult:
    rows: List[Any]
    total_items: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.limit)


def validate_page(page: int, limit: int) -> None:
    if page is None or page < 1:
        raise InvalidArgument("page must be a positive integer")
    if limit is None or limit < 1:
        raise InvalidArgument("limit must be a positive integer")


def order_by(column, direction: str):
    try:
        return SORT_DIRECTIONS[direction.lower()](column)
    except (KeyError, AttributeError):
        raise InvalidArgument(f"Unsupported sort direction: {direction}")


async def paginate(
    db: AsyncSession,
    stmt: Select,
    count_stmt: Select,
    page: int,
    limit: int,
) -> PageResult:
    """Run ``stmt`` for one page and ``count_stmt`` for the total.

    ``stmt`` must already carry its ordering; skip and take are applied after it.
    """
    validate_page(page, limit)

    total_items = (await db.execute(count_stmt)).scalar_one() or 0

    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    rows = result.all()

    logger.debug(f"Page {page} (limit {limit}): {len(rows)} of {total_items} rows")
    return PageResult(rows=list(rows), total_items=int(total_items), page=page, limit=limit)


def with_owner(schema, entity, owner, summary=OwnerSummary):
    """Validate ``entity`` into ``schema`` and nest the owner's public summary, if it resolved."""
    item = schema.model_validate(entity)
    item.owner = summary.model_validate(owner) if owner is not None else None
    return item


def to_page(result: PageResult, build: Callable[[Any], Any]) -> Page:
    return Page(
        items=[build(row) for row in result.rows],
        total_items=result.total_items,
        page=result.page,
        total_pages=result.total_pages,
    )
