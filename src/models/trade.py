from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base

# u64 amounts exceed BIGINT (signed 64-bit); NUMERIC(20, 0) holds 2**64 - 1
U64 = Numeric(20, 0)


class CurveTrade(Base):
    """Executed bonding-curve trade, one row per TradeEvent."""

    __tablename__ = "curve_trades"

    id: Mapped[int] = mapped_column(primary_key=True)
    mint: Mapped[str] = mapped_column(String(64))
    trader: Mapped[str] = mapped_column(String(64))
    is_buy: Mapped[bool] = mapped_column(Boolean)
    # Lamports: sol_in for buys, net payout for sells
    sol_amount: Mapped[Decimal] = mapped_column(U64)
    token_amount: Mapped[Decimal] = mapped_column(U64)
    fee: Mapped[Decimal] = mapped_column(U64)
    referrer: Mapped[str | None] = mapped_column(String(64))
    virtual_sol: Mapped[Decimal | None] = mapped_column(U64)
    virtual_token: Mapped[Decimal | None] = mapped_column(U64)
    block_time: Mapped[int] = mapped_column(BigInteger, default=0)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_curve_trades_mint", "mint"),
        Index("idx_curve_trades_trader", "trader"),
    )


class CurveMigration(Base):
    """Handoff of a graduated curve to the liquidity venue."""

    __tablename__ = "curve_migrations"

    id: Mapped[int] = mapped_column(primary_key=True)
    mint: Mapped[str] = mapped_column(String(64), unique=True)
    sol_to_pool: Mapped[Decimal] = mapped_column(U64)
    tokens_to_pool: Mapped[Decimal] = mapped_column(U64)
    migration_fee: Mapped[Decimal] = mapped_column(U64)
    block_time: Mapped[int] = mapped_column(BigInteger, default=0)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
