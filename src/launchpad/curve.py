"""Constant-product bonding curve: buy/sell quotes and reserve updates.

Virtual reserves set the price; real reserves bound what can actually be
bought or paid out. The fee is always taken from the SOL leg.

Quotes are pure. ``buy``/``sell`` compute the full quote and check
slippage before touching the curve, so a failed trade leaves no trace.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger

from src.launchpad.constants import LAMPORTS_PER_SOL
from src.launchpad.errors import (
    CurveCompletedError,
    InsufficientReservesError,
    NotEnoughTokensError,
    SlippageExceededError,
    TradePausedError,
    ZeroAmountError,
)
from src.launchpad.fees import FeeSplit, compute_trade_fee, split_fee
from src.launchpad.fixed_point import checked_add, checked_sub, mul_div_floor
from src.launchpad.graduation import check_graduation
from src.launchpad.state import BondingCurve, GlobalConfig


@dataclass(frozen=True)
class Reserves:
    virtual_sol: int
    virtual_token: int
    real_token: int
    real_sol_reserves: int


@dataclass(frozen=True)
class BuyQuote:
    sol_in: int
    net_sol_in: int
    tokens_out: int
    fee: FeeSplit
    after: Reserves


@dataclass(frozen=True)
class SellQuote:
    tokens_in: int
    sol_out: int  # gross, before fee
    net_sol_out: int
    fee: FeeSplit
    after: Reserves


@dataclass(frozen=True)
class TradeResult:
    is_buy: bool
    sol_amount: int  # sol_in for buys, net_sol_out for sells
    token_amount: int
    fee: FeeSplit
    graduated: bool = False


def _ensure_tradable(curve: BondingCurve, config: GlobalConfig, amount: int) -> None:
    if not config.trading_allowed:
        raise TradePausedError()
    if not curve.is_active:
        raise CurveCompletedError(curve.mint)
    if amount <= 0:
        raise ZeroAmountError()


def quote_buy(
    curve: BondingCurve,
    config: GlobalConfig,
    sol_in: int,
    *,
    has_referrer: bool = False,
) -> BuyQuote:
    """Tokens received for ``sol_in`` lamports, fee deducted up front."""
    _ensure_tradable(curve, config, sol_in)

    fee = compute_trade_fee(sol_in, config)
    net_sol_in = checked_sub(sol_in, fee)
    new_virtual_sol = checked_add(curve.virtual_sol, net_sol_in)
    # vt - ceil(k / (vs + net)): rounds against the trader so k never shrinks
    tokens_out = mul_div_floor(curve.virtual_token, net_sol_in, new_virtual_sol)
    if tokens_out > curve.real_token:
        raise NotEnoughTokensError(f"{tokens_out} > {curve.real_token} remaining")

    return BuyQuote(
        sol_in=sol_in,
        net_sol_in=net_sol_in,
        tokens_out=tokens_out,
        fee=split_fee(fee, config, has_referrer=has_referrer),
        after=Reserves(
            virtual_sol=new_virtual_sol,
            virtual_token=curve.virtual_token - tokens_out,
            real_token=curve.real_token - tokens_out,
            real_sol_reserves=checked_add(curve.real_sol_reserves, net_sol_in),
        ),
    )


def quote_sell(
    curve: BondingCurve,
    config: GlobalConfig,
    tokens_in: int,
    *,
    has_referrer: bool = False,
) -> SellQuote:
    """SOL paid out for ``tokens_in``, fee deducted from the payout."""
    _ensure_tradable(curve, config, tokens_in)

    new_virtual_token = checked_add(curve.virtual_token, tokens_in)
    # vs - ceil(k / (vt + tokens_in))
    sol_out = mul_div_floor(curve.virtual_sol, tokens_in, new_virtual_token)
    if sol_out > curve.real_sol_reserves:
        raise InsufficientReservesError(f"{sol_out} > {curve.real_sol_reserves} held")

    fee = compute_trade_fee(sol_out, config)
    net_sol_out = checked_sub(sol_out, fee)
    # Sells only return previously sold tokens to the real reserve
    new_real_token = min(checked_add(curve.real_token, tokens_in), curve.token_total_supply)

    return SellQuote(
        tokens_in=tokens_in,
        sol_out=sol_out,
        net_sol_out=net_sol_out,
        fee=split_fee(fee, config, has_referrer=has_referrer),
        after=Reserves(
            virtual_sol=curve.virtual_sol - sol_out,
            virtual_token=new_virtual_token,
            real_token=new_real_token,
            real_sol_reserves=curve.real_sol_reserves - sol_out,
        ),
    )


def _apply(curve: BondingCurve, after: Reserves) -> None:
    curve.virtual_sol = after.virtual_sol
    curve.virtual_token = after.virtual_token
    curve.real_token = after.real_token
    curve.real_sol_reserves = after.real_sol_reserves


def buy(
    curve: BondingCurve,
    config: GlobalConfig,
    sol_in: int,
    min_tokens_out: int,
    *,
    has_referrer: bool = False,
) -> tuple[BuyQuote, TradeResult]:
    """Execute a buy against the curve, then run the graduation check."""
    quote = quote_buy(curve, config, sol_in, has_referrer=has_referrer)
    if quote.tokens_out < min_tokens_out:
        raise SlippageExceededError(f"tokens_out {quote.tokens_out} < min {min_tokens_out}")

    _apply(curve, quote.after)
    graduated = check_graduation(curve, config)
    logger.debug(
        f"[CURVE] BUY {curve.mint[:12]} sol_in={sol_in} tokens_out={quote.tokens_out} "
        f"fee={quote.fee.total} real_sol={curve.real_sol_reserves}"
    )
    return quote, TradeResult(
        is_buy=True,
        sol_amount=sol_in,
        token_amount=quote.tokens_out,
        fee=quote.fee,
        graduated=graduated,
    )


def sell(
    curve: BondingCurve,
    config: GlobalConfig,
    tokens_in: int,
    min_sol_out: int,
    *,
    has_referrer: bool = False,
) -> tuple[SellQuote, TradeResult]:
    quote = quote_sell(curve, config, tokens_in, has_referrer=has_referrer)
    if quote.net_sol_out < min_sol_out:
        raise SlippageExceededError(f"sol_out {quote.net_sol_out} < min {min_sol_out}")

    _apply(curve, quote.after)
    logger.debug(
        f"[CURVE] SELL {curve.mint[:12]} tokens_in={tokens_in} sol_out={quote.net_sol_out} "
        f"fee={quote.fee.total} real_sol={curve.real_sol_reserves}"
    )
    return quote, TradeResult(
        is_buy=False,
        sol_amount=quote.net_sol_out,
        token_amount=tokens_in,
        fee=quote.fee,
    )


# Display helpers


def spot_price_sol(curve: BondingCurve, config: GlobalConfig) -> Decimal:
    """Marginal price of one whole token in SOL."""
    sol = Decimal(curve.virtual_sol) / Decimal(LAMPORTS_PER_SOL)
    tokens = Decimal(curve.virtual_token) / Decimal(10**config.token_decimals)
    return sol / tokens


def market_cap_sol(curve: BondingCurve, config: GlobalConfig) -> Decimal:
    supply = Decimal(curve.token_total_supply) / Decimal(10**config.token_decimals)
    return spot_price_sol(curve, config) * supply


def graduation_progress_pct(curve: BondingCurve, config: GlobalConfig) -> Decimal:
    """Real SOL raised as a percentage of the graduation threshold, capped at 100."""
    if not curve.is_active:
        return Decimal(100)
    return min(
        Decimal(curve.real_sol_reserves * 100) / Decimal(config.graduation_threshold),
        Decimal(100),
    )
