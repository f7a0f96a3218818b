"""Tests for config snapshots and the curve phase machine."""

import pytest
from pydantic import ValidationError

from config.settings import Settings
from src.launchpad.constants import (
    DEFAULT_GRADUATION_THRESHOLD,
    DEFAULT_REAL_TOKENS,
    DEFAULT_TOKEN_SUPPLY,
    DEFAULT_VIRTUAL_SOL,
    DEFAULT_VIRTUAL_TOKENS,
)
from src.launchpad.errors import InvalidConfigError
from src.launchpad.state import (
    BondingCurve,
    CurvePhase,
    GlobalConfig,
    ProgramStatus,
    Referral,
)


class TestGlobalConfig:
    def test_defaults(self, config: GlobalConfig):
        assert config.fee_receiver == config.authority
        assert config.initial_virtual_sol_reserves == DEFAULT_VIRTUAL_SOL
        assert config.initial_virtual_token_reserves == DEFAULT_VIRTUAL_TOKENS
        assert config.initial_real_token_reserves == DEFAULT_REAL_TOKENS
        assert config.token_total_supply == DEFAULT_TOKEN_SUPPLY
        assert config.token_decimals == 6
        assert config.trade_fee_bps == 100
        assert config.graduation_threshold == DEFAULT_GRADUATION_THRESHOLD
        assert config.status == ProgramStatus.RUNNING

    def test_snapshot_is_immutable(self, config: GlobalConfig):
        with pytest.raises(ValidationError):
            config.trade_fee_bps = 500  # type: ignore[misc]

    def test_updated_returns_new_snapshot(self, config: GlobalConfig):
        updated = config.updated(trade_fee_bps=200)
        assert updated.trade_fee_bps == 200
        assert config.trade_fee_bps == 100

    def test_updated_is_validated(self, config: GlobalConfig):
        with pytest.raises(InvalidConfigError):
            config.updated(initial_real_token_reserves=config.token_total_supply + 1)

    def test_zero_threshold_rejected(self, config: GlobalConfig):
        with pytest.raises(InvalidConfigError):
            config.updated(graduation_threshold=0)

    def test_status_gates(self, config: GlobalConfig):
        assert config.trading_allowed and config.launch_allowed
        swap_only = config.updated(status=ProgramStatus.SWAP_ONLY)
        assert swap_only.trading_allowed and not swap_only.launch_allowed
        paused = config.updated(status=ProgramStatus.PAUSED)
        assert not paused.trading_allowed and not paused.launch_allowed

    def test_status_string_is_converted(self, config: GlobalConfig):
        swap_only = config.updated(status="swap_only")
        assert swap_only.status is ProgramStatus.SWAP_ONLY
        assert not swap_only.launch_allowed

    def test_unknown_status_rejected(self, config: GlobalConfig):
        with pytest.raises(InvalidConfigError, match="status"):
            config.updated(status="halted")

    def test_numeric_string_rejected(self, config: GlobalConfig):
        with pytest.raises(InvalidConfigError, match="trade_fee_bps"):
            config.updated(trade_fee_bps="100")
        assert config.trade_fee_bps == 100

    def test_float_amount_rejected(self, config: GlobalConfig):
        with pytest.raises(InvalidConfigError, match="graduation_threshold"):
            config.updated(graduation_threshold=85e9)

    def test_unknown_field_rejected(self, config: GlobalConfig):
        with pytest.raises(InvalidConfigError, match="trade_fee"):
            config.updated(trade_fee=100)

    def test_from_settings(self):
        settings = Settings(trade_fee_bps=250, graduation_threshold=42)
        config = GlobalConfig.from_settings("auth", settings)
        assert config.authority == "auth"
        assert config.fee_receiver == "auth"
        assert config.trade_fee_bps == 250
        assert config.graduation_threshold == 42


class TestBondingCurvePhases:
    def test_launch_copies_config_reserves(self, config: GlobalConfig):
        curve = BondingCurve.launch("mint", "creator", config, start_time=123)
        assert curve.virtual_sol == config.initial_virtual_sol_reserves
        assert curve.virtual_token == config.initial_virtual_token_reserves
        assert curve.real_token == config.initial_real_token_reserves
        assert curve.real_sol_reserves == 0
        assert curve.start_time == 123
        assert curve.phase == CurvePhase.ACTIVE
        assert not curve.completed and not curve.migrated

    def test_forward_transitions(self, curve: BondingCurve):
        curve.advance_to(CurvePhase.COMPLETED)
        assert curve.completed and not curve.migrated
        curve.advance_to(CurvePhase.MIGRATED)
        assert curve.completed and curve.migrated

    def test_cannot_skip_completed(self, curve: BondingCurve):
        """Migrated without Completed is unrepresentable."""
        with pytest.raises(ValueError):
            curve.advance_to(CurvePhase.MIGRATED)

    def test_no_reverse_transition(self, curve: BondingCurve):
        curve.advance_to(CurvePhase.COMPLETED)
        with pytest.raises(ValueError):
            curve.advance_to(CurvePhase.ACTIVE)


def test_referral_unclaimed():
    referral = Referral(referrer="r", total_earned=1_000, trade_count=3, claimed_total=400)
    assert referral.unclaimed == 600
