"""Trade journal: maps program events to SQLAlchemy rows."""

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.launchpad.events import LaunchpadEvent, MigrateEvent, TradeEvent
from src.models.trade import CurveMigration, CurveTrade


async def save_trade_event(session: AsyncSession, event: TradeEvent) -> CurveTrade:
    row = CurveTrade(
        mint=event.mint,
        trader=event.trader,
        is_buy=event.is_buy,
        sol_amount=event.sol_amount,
        token_amount=event.token_amount,
        fee=event.fee,
        referrer=event.referrer,
        virtual_sol=event.virtual_sol,
        virtual_token=event.virtual_token,
        block_time=event.timestamp,
    )
    session.add(row)
    await session.flush()
    return row


async def save_migration_event(session: AsyncSession, event: MigrateEvent) -> CurveMigration:
    row = CurveMigration(
        mint=event.mint,
        sol_to_pool=event.sol_to_pool,
        tokens_to_pool=event.tokens_to_pool,
        migration_fee=event.migration_fee,
        block_time=event.timestamp,
    )
    session.add(row)
    await session.flush()
    return row


async def save_events(session: AsyncSession, events: list[LaunchpadEvent]) -> int:
    """Persist journaled events. Create/complete events carry no journal row."""
    saved = 0
    for event in events:
        if isinstance(event, TradeEvent):
            await save_trade_event(session, event)
            saved += 1
        elif isinstance(event, MigrateEvent):
            await save_migration_event(session, event)
            saved += 1
    logger.debug(f"[JOURNAL] Saved {saved}/{len(events)} events")
    return saved


async def get_trades_for_mint(
    session: AsyncSession, mint: str, *, limit: int = 50
) -> list[CurveTrade]:
    """Most recent trades first."""
    result = await session.execute(
        select(CurveTrade)
        .where(CurveTrade.mint == mint)
        .order_by(CurveTrade.block_time.desc(), CurveTrade.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_volume_for_mint(session: AsyncSession, mint: str) -> tuple[int, int]:
    """Total (buy, sell) SOL volume in lamports."""
    result = await session.execute(
        select(CurveTrade.is_buy, func.coalesce(func.sum(CurveTrade.sol_amount), 0))
        .where(CurveTrade.mint == mint)
        .group_by(CurveTrade.is_buy)
    )
    buy_volume = sell_volume = 0
    for is_buy, total in result.all():
        if is_buy:
            buy_volume = int(total)
        else:
            sell_volume = int(total)
    return buy_volume, sell_volume
