"""
Sock inventory mutations and queries.

Arrivals and departures are written as single conditional statements (upsert,
guarded UPDATE / DELETE with RETURNING) so concurrent requests against the same
(color, cotton percentage) pair cannot lose updates.
"""
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import MAX_AMOUNT
from core.exceptions import DuplicateSockError, IllegalAmountError, NoSuchSockError
from core.logging import get_logger
from db.sock import Sock as SockModel
from schemas.socks import AmountResponse, SockRequest, SockResponse, SocksList, SockUpdate
from services.filters import (
    SockOperation,
    SortField,
    cotton_percentage_between,
    has_color,
    has_cotton_percentage,
    order_by_field,
)

logger = get_logger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _pair_matches(color: str, cotton_percentage: int):
    tbl = SockModel.__table__
    return (tbl.c.color == color) & (tbl.c.cotton_percentage == cotton_percentage)


def _response_from_row(row) -> SockResponse:
    return SockResponse(
        id=row.id,
        color=row.color,
        cotton_percentage=row.cotton_percentage,
        amount=int(row.amount),
    )


async def _find_sock(db: AsyncSession, color: str, cotton_percentage: int, *, for_update: bool = False) -> Optional[SockModel]:
    stmt = select(SockModel).where(
        SockModel.color == color,
        SockModel.cotton_percentage == cotton_percentage,
    ).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    res = await db.execute(stmt)
    return res.scalar_one_or_none()


def _raise_amount_overflow(payload: SockRequest):
    logger.warning("Arrival would overflow stored amount: {}", payload)
    raise IllegalAmountError(
        f"Adding {payload.amount} socks would exceed the maximum stored amount of {MAX_AMOUNT}"
    )


async def register_arrival(db: AsyncSession, payload: SockRequest) -> SockResponse:
    """Add ``payload.amount`` socks to the matching record, creating it if absent."""
    logger.info("Adding socks: {}", payload)

    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        return await _register_arrival_locked(db, payload)

    tbl = SockModel.__table__
    stmt = insert(tbl).values(
        color=payload.color,
        cotton_percentage=payload.cotton_percentage,
        amount=payload.amount,
    )
    upsert = stmt.on_conflict_do_update(
        index_elements=[tbl.c.color, tbl.c.cotton_percentage],
        set_={"amount": tbl.c.amount + stmt.excluded.amount},
        where=tbl.c.amount <= MAX_AMOUNT - stmt.excluded.amount,
    ).returning(tbl.c.id, tbl.c.color, tbl.c.cotton_percentage, tbl.c.amount)

    # no row back: the pair exists and the sum would pass MAX_AMOUNT
    row = (await db.execute(upsert)).first()
    if row is None:
        await db.rollback()
        _raise_amount_overflow(payload)
    await db.commit()

    response = _response_from_row(row)
    logger.info("Socks added: {}", response)
    return response


async def _register_arrival_locked(db: AsyncSession, payload: SockRequest) -> SockResponse:
    logger.debug("No upsert support for {}, locking row instead", db.get_bind().dialect.name)
    sock = await _find_sock(db, payload.color, payload.cotton_percentage, for_update=True)
    if sock and sock.amount > MAX_AMOUNT - payload.amount:
        await db.rollback()
        _raise_amount_overflow(payload)
    if sock:
        sock.amount = sock.amount + payload.amount
    else:
        sock = SockModel(
            color=payload.color,
            cotton_percentage=payload.cotton_percentage,
            amount=payload.amount,
        )
        db.add(sock)
    await db.commit()
    await db.refresh(sock)
    return SockResponse(**sock.to_schema)


async def register_departure(db: AsyncSession, payload: SockRequest) -> SockResponse:
    """
    Take ``payload.amount`` socks out of stock.

    - stored > requested: decrement and return the updated record
    - stored == requested: delete the record, return it with amount 0 and no id
    - stored < requested: IllegalAmountError, nothing changes
    - no record: NoSuchSockError
    """
    logger.info("Removing socks: {}", payload)
    tbl = SockModel.__table__
    match = _pair_matches(payload.color, payload.cotton_percentage)

    decreased = (
        await db.execute(
            update(tbl)
            .where(match, tbl.c.amount > payload.amount)
            .values(amount=tbl.c.amount - payload.amount)
            .returning(tbl.c.id, tbl.c.color, tbl.c.cotton_percentage, tbl.c.amount)
        )
    ).first()
    if decreased:
        await db.commit()
        response = _response_from_row(decreased)
        logger.info("Socks amount decreased: {}", response)
        return response

    removed = (
        await db.execute(
            delete(tbl)
            .where(match, tbl.c.amount == payload.amount)
            .returning(tbl.c.id)
        )
    ).first()
    if removed:
        await db.commit()
        logger.info("Socks exhausted, deleted record id={}", removed.id)
        return SockResponse(
            id=None,
            color=payload.color,
            cotton_percentage=payload.cotton_percentage,
            amount=0,
        )

    available = (await db.execute(select(tbl.c.amount).where(match))).scalar_one_or_none()
    await db.rollback()
    if available is None:
        logger.warning("No such socks: {}", payload)
        raise NoSuchSockError(
            f"No socks with color {payload.color!r} and cotton percentage {payload.cotton_percentage} in stock"
        )
    logger.warning("Illegal amount: requested={}, available={}", payload.amount, available)
    raise IllegalAmountError(
        f"Not enough socks in stock: requested {payload.amount}, available {available}"
    )


async def update_sock(db: AsyncSession, sock_id: int, payload: SockUpdate) -> SockResponse:
    """Apply the fields present in ``payload`` to the sock with ``sock_id``."""
    logger.info("Updating socks with id={}, request={}", sock_id, payload)

    # populate_existing: Core writes above do not refresh loaded instances
    res = await db.execute(
        select(SockModel)
        .where(SockModel.id == sock_id)
        .execution_options(populate_existing=True)
    )
    sock = res.scalar_one_or_none()
    if not sock:
        logger.warning("No such socks with id={}", sock_id)
        raise NoSuchSockError(f"No socks with id {sock_id} in stock")

    data = payload.model_dump(exclude_none=True)
    color = data.get("color", sock.color)
    cotton_percentage = data.get("cotton_percentage", sock.cotton_percentage)

    if (color, cotton_percentage) != (sock.color, sock.cotton_percentage):
        clash = await db.execute(
            select(SockModel.id).where(
                SockModel.color == color,
                SockModel.cotton_percentage == cotton_percentage,
                SockModel.id != sock_id,
            )
        )
        other_id = clash.scalar_one_or_none()
        if other_id is not None:
            await db.rollback()
            logger.warning("Update of id={} clashes with id={}", sock_id, other_id)
            raise DuplicateSockError(
                f"Socks with color {color!r} and cotton percentage {cotton_percentage} already exist (id {other_id})"
            )

    for field, value in data.items():
        setattr(sock, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateSockError()
    await db.refresh(sock)

    response = SockResponse(**sock.to_schema)
    logger.info("Socks updated: {}", response)
    return response


async def get_socks_amount(
    db: AsyncSession,
    color: str,
    operation: SockOperation,
    cotton_percentage: int,
) -> AmountResponse:
    """Total amount of ``color`` socks whose cotton percentage satisfies ``operation``."""
    logger.info(
        "Getting socks amount for color={}, operation={}, cottonPercentage={}",
        color, operation.value, cotton_percentage,
    )
    stmt = select(func.coalesce(func.sum(SockModel.amount), 0)).where(
        has_color(color),
        has_cotton_percentage(operation, cotton_percentage),
    )
    total = (await db.execute(stmt)).scalar_one()
    logger.info("Found total amount: {}", total)
    return AmountResponse(amount=int(total))


async def list_socks_by_cotton(
    db: AsyncSession,
    from_: int,
    to: int,
    sorted_by: Optional[SortField] = None,
) -> SocksList:
    logger.info("Getting socks by filter: from={}, to={}, sortedBy={}", from_, to, sorted_by)
    stmt = (
        select(SockModel)
        .where(cotton_percentage_between(from_, to))
        .execution_options(populate_existing=True)
    )
    if sorted_by is not None:
        stmt = stmt.order_by(order_by_field(sorted_by))

    res = await db.execute(stmt)
    socks: List[SockModel] = list(res.scalars().all())
    logger.debug("Found socks: {}", socks)
    return SocksList(sock_list=[SockResponse(**s.to_schema) for s in socks])
