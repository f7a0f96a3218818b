"""Program account state: global config snapshot, bonding curves, referrals.

Identities (mints, wallets, PDAs) are base58 pubkey strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, StrictInt, ValidationError, model_validator

from src.launchpad.constants import (
    BPS_DENOMINATOR,
    DEFAULT_CREATOR_SHARE_BPS,
    DEFAULT_DECIMALS,
    DEFAULT_GRADUATION_THRESHOLD,
    DEFAULT_REAL_TOKENS,
    DEFAULT_REFERRAL_SHARE_BPS,
    DEFAULT_TOKEN_SUPPLY,
    DEFAULT_TRADE_FEE_BPS,
    DEFAULT_VIRTUAL_SOL,
    DEFAULT_VIRTUAL_TOKENS,
)
from src.launchpad.errors import InvalidConfigError

if TYPE_CHECKING:
    from config.settings import Settings


class ProgramStatus(str, Enum):
    RUNNING = "running"
    SWAP_ONLY = "swap_only"  # trading allowed, launches rejected
    PAUSED = "paused"


class CurvePhase(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    MIGRATED = "migrated"


# Legal forward transitions; everything else is rejected.
_NEXT_PHASE: dict[CurvePhase, CurvePhase] = {
    CurvePhase.ACTIVE: CurvePhase.COMPLETED,
    CurvePhase.COMPLETED: CurvePhase.MIGRATED,
}


class GlobalConfig(BaseModel):
    """Immutable snapshot of the program-wide parameters.

    Pricing functions receive a snapshot explicitly; admin updates
    produce a new instance via ``updated``. Amounts and bps must be real
    ints; ``status`` accepts a ``ProgramStatus`` or its string value.
    """

    authority: str
    fee_receiver: str
    initial_virtual_sol_reserves: StrictInt = DEFAULT_VIRTUAL_SOL
    initial_virtual_token_reserves: StrictInt = DEFAULT_VIRTUAL_TOKENS
    initial_real_token_reserves: StrictInt = DEFAULT_REAL_TOKENS
    token_total_supply: StrictInt = DEFAULT_TOKEN_SUPPLY
    token_decimals: StrictInt = DEFAULT_DECIMALS
    trade_fee_bps: StrictInt = DEFAULT_TRADE_FEE_BPS
    creator_share_bps: StrictInt = DEFAULT_CREATOR_SHARE_BPS
    referral_share_bps: StrictInt = DEFAULT_REFERRAL_SHARE_BPS
    graduation_threshold: StrictInt = DEFAULT_GRADUATION_THRESHOLD
    status: ProgramStatus = ProgramStatus.RUNNING

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def _check_invariants(self) -> GlobalConfig:
        if self.trade_fee_bps < 0 or self.trade_fee_bps > BPS_DENOMINATOR:
            raise InvalidConfigError(f"trade_fee_bps={self.trade_fee_bps}")
        if self.creator_share_bps < 0 or self.referral_share_bps < 0:
            raise InvalidConfigError("share bps must be non-negative")
        if self.creator_share_bps + self.referral_share_bps > BPS_DENOMINATOR:
            raise InvalidConfigError(
                f"creator_share_bps + referral_share_bps = "
                f"{self.creator_share_bps + self.referral_share_bps} > {BPS_DENOMINATOR}"
            )
        if self.initial_virtual_sol_reserves <= 0 or self.initial_virtual_token_reserves <= 0:
            raise InvalidConfigError("virtual reserves must be positive")
        if self.token_total_supply <= 0:
            raise InvalidConfigError("token_total_supply must be positive")
        if self.initial_real_token_reserves > self.token_total_supply:
            raise InvalidConfigError(
                f"initial_real_token_reserves {self.initial_real_token_reserves} "
                f"> token_total_supply {self.token_total_supply}"
            )
        if self.graduation_threshold <= 0:
            raise InvalidConfigError("graduation_threshold must be positive")
        return self

    @property
    def trading_allowed(self) -> bool:
        return self.status != ProgramStatus.PAUSED

    @property
    def launch_allowed(self) -> bool:
        return self.status == ProgramStatus.RUNNING

    def updated(self, **changes: object) -> GlobalConfig:
        """Return a validated copy with the given fields replaced."""
        try:
            return GlobalConfig.model_validate({**self.model_dump(), **changes})
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise InvalidConfigError(f"bad value for {fields or 'config'}") from e

    @classmethod
    def from_settings(cls, authority: str, settings: Settings) -> GlobalConfig:
        return cls(
            authority=authority,
            fee_receiver=authority,
            initial_virtual_sol_reserves=settings.initial_virtual_sol_reserves,
            initial_virtual_token_reserves=settings.initial_virtual_token_reserves,
            initial_real_token_reserves=settings.initial_real_token_reserves,
            token_total_supply=settings.token_total_supply,
            token_decimals=settings.token_decimals,
            trade_fee_bps=settings.trade_fee_bps,
            creator_share_bps=settings.creator_share_bps,
            referral_share_bps=settings.referral_share_bps,
            graduation_threshold=settings.graduation_threshold,
        )


@dataclass
class BondingCurve:
    """Reserve state of one launched token."""

    mint: str
    creator: str
    virtual_sol: int
    virtual_token: int
    real_token: int
    real_sol_reserves: int
    token_total_supply: int
    start_time: int
    phase: CurvePhase = CurvePhase.ACTIVE

    @classmethod
    def launch(cls, mint: str, creator: str, config: GlobalConfig, start_time: int) -> BondingCurve:
        """New curve with reserves copied from the config defaults."""
        return cls(
            mint=mint,
            creator=creator,
            virtual_sol=config.initial_virtual_sol_reserves,
            virtual_token=config.initial_virtual_token_reserves,
            real_token=config.initial_real_token_reserves,
            real_sol_reserves=0,
            token_total_supply=config.token_total_supply,
            start_time=start_time,
        )

    @property
    def completed(self) -> bool:
        return self.phase != CurvePhase.ACTIVE

    @property
    def migrated(self) -> bool:
        return self.phase == CurvePhase.MIGRATED

    @property
    def is_active(self) -> bool:
        return self.phase == CurvePhase.ACTIVE

    @property
    def invariant_k(self) -> int:
        return self.virtual_sol * self.virtual_token

    def advance_to(self, target: CurvePhase) -> None:
        """Move one step forward in the lifecycle. Raises ValueError otherwise."""
        if _NEXT_PHASE.get(self.phase) != target:
            raise ValueError(f"Illegal curve transition {self.phase.value} -> {target.value}")
        self.phase = target


@dataclass
class Referral:
    """Cumulative earnings of one referrer wallet."""

    referrer: str
    total_earned: int = 0
    trade_count: int = 0
    claimed_total: int = 0

    @property
    def unclaimed(self) -> int:
        return self.total_earned - self.claimed_total
