"""Trade fee computation and the protocol / creator / referrer split."""

from __future__ import annotations

from dataclasses import dataclass

from src.launchpad.fixed_point import apply_bps, checked_sub
from src.launchpad.state import GlobalConfig


@dataclass(frozen=True)
class FeeSplit:
    total: int
    creator_cut: int
    referral_cut: int
    protocol_cut: int


def compute_trade_fee(sol_amount: int, config: GlobalConfig) -> int:
    """Fee on the SOL leg of a trade, floored."""
    return apply_bps(sol_amount, config.trade_fee_bps)


def split_fee(fee: int, config: GlobalConfig, *, has_referrer: bool) -> FeeSplit:
    """Divide a collected fee.

    Without a registered referrer the referral share stays with the
    protocol. The protocol cut is the remainder, so the three parts
    always sum to ``fee``.
    """
    creator_cut = apply_bps(fee, config.creator_share_bps)
    referral_cut = apply_bps(fee, config.referral_share_bps) if has_referrer else 0
    protocol_cut = checked_sub(checked_sub(fee, creator_cut), referral_cut)
    return FeeSplit(
        total=fee,
        creator_cut=creator_cut,
        referral_cut=referral_cut,
        protocol_cut=protocol_cut,
    )
