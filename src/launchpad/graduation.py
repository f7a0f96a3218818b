"""Graduation: Active -> Completed on threshold, Completed -> Migrated on handoff."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

from src.launchpad.constants import MIGRATION_FEE
from src.launchpad.errors import (
    AlreadyMigratedError,
    CurveNotCompletedError,
    NotEnoughLamportsError,
)
from src.launchpad.state import BondingCurve, CurvePhase, GlobalConfig


@dataclass(frozen=True)
class MigrationHandoff:
    """Amounts handed to the external liquidity venue."""

    mint: str
    sol_to_pool: int
    tokens_to_pool: int
    migration_fee: int


class LiquidityVenue(Protocol):
    address: str

    def receive_migration(self, handoff: MigrationHandoff) -> None: ...


@dataclass
class RecordingVenue:
    """Venue that only records handoffs. Used when no real pool is wired in."""

    address: str = "liquidity-venue"
    handoffs: list[MigrationHandoff] = field(default_factory=list)

    def receive_migration(self, handoff: MigrationHandoff) -> None:
        self.handoffs.append(handoff)


def check_graduation(curve: BondingCurve, config: GlobalConfig) -> bool:
    """Complete the curve once real SOL reaches the threshold.

    Returns True only on the call that performs the transition.
    """
    if not curve.is_active:
        return False
    if curve.real_sol_reserves < config.graduation_threshold:
        return False
    curve.advance_to(CurvePhase.COMPLETED)
    logger.info(
        f"[GRAD] Curve {curve.mint[:12]} completed: real_sol={curve.real_sol_reserves} "
        f">= threshold={config.graduation_threshold}"
    )
    return True


def plan_migration(curve: BondingCurve, vault_tokens: int) -> MigrationHandoff:
    """Compute the handoff without mutating the curve."""
    if curve.phase == CurvePhase.MIGRATED:
        raise AlreadyMigratedError(curve.mint)
    if curve.phase != CurvePhase.COMPLETED:
        raise CurveNotCompletedError(curve.mint)
    if curve.real_sol_reserves < MIGRATION_FEE:
        raise NotEnoughLamportsError(
            f"real_sol_reserves {curve.real_sol_reserves} < migration fee {MIGRATION_FEE}"
        )
    return MigrationHandoff(
        mint=curve.mint,
        sol_to_pool=curve.real_sol_reserves - MIGRATION_FEE,
        tokens_to_pool=vault_tokens,
        migration_fee=MIGRATION_FEE,
    )


def migrate(curve: BondingCurve, vault_tokens: int) -> MigrationHandoff:
    """Drain real reserves into a handoff and mark the curve migrated."""
    handoff = plan_migration(curve, vault_tokens)
    curve.real_sol_reserves = 0
    curve.real_token = 0
    curve.advance_to(CurvePhase.MIGRATED)
    logger.info(
        f"[GRAD] Curve {curve.mint[:12]} migrated: sol={handoff.sol_to_pool} "
        f"tokens={handoff.tokens_to_pool} fee={handoff.migration_fee}"
    )
    return handoff
