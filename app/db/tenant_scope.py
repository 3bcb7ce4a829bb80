"""
Query helpers that keep every tenant-owned lookup parameterised by tenant_id.
"""

from typing import Any, List, Optional, Sequence, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.pagination import PaginationParams

ModelT = TypeVar("ModelT")


class TenantPredicateError(RuntimeError):
    pass


def tenant_predicate(model, tenant_id: Optional[UUID]):
    # Build tenant predicates through a single helper so a missing tenant never widens a query.
    if tenant_id is None:
        raise TenantPredicateError(f"tenant_id is required to query {model.__tablename__}")
    return model.tenant_id == tenant_id


def search_clause(term: str, *columns):
    """Case-insensitive partial match of `term` against any of `columns`."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))


async def get_in_tenant(
    db: AsyncSession,
    model: Type[ModelT],
    tenant_id: UUID,
    entity_id: UUID,
    options: Sequence[Any] = (),
) -> Optional[ModelT]:
    """Fetch a row by id, only if it belongs to the tenant."""
    query = select(model).where(tenant_predicate(model, tenant_id), model.id == entity_id)
    if options:
        query = query.options(*options)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def fetch_page(
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
    options: Sequence[Any] = (),
) -> Tuple[List[Any], int]:
    """
    Run a filtered query as one page plus an independent count.

    The page and the count are separate statements and may observe slightly
    different snapshots under concurrent writes.
    """
    page_query = query.offset(params.offset).limit(params.limit)
    if options:
        page_query = page_query.options(*options)
    page_result = await db.execute(page_query)
    items = list(page_result.unique().scalars().all())

    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()
    return items, total
