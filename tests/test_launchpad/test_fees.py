"""Tests for trade fee computation and the three-way split."""

import pytest

from src.launchpad.errors import InvalidConfigError
from src.launchpad.fees import compute_trade_fee, split_fee
from src.launchpad.state import GlobalConfig


def _config(**overrides) -> GlobalConfig:
    return GlobalConfig(authority="auth", fee_receiver="auth", **overrides)


class TestComputeTradeFee:
    def test_default_one_percent(self):
        assert compute_trade_fee(1_000_000_000, _config()) == 10_000_000

    def test_zero_fee_config(self):
        assert compute_trade_fee(1_000_000_000, _config(trade_fee_bps=0)) == 0

    def test_tiny_trade_rounds_to_zero_fee(self):
        assert compute_trade_fee(99, _config()) == 0


class TestSplitFee:
    def test_split_with_referrer(self):
        """30% creator, 10% referral, remainder to protocol."""
        split = split_fee(10_000_000, _config(), has_referrer=True)
        assert split.creator_cut == 3_000_000
        assert split.referral_cut == 1_000_000
        assert split.protocol_cut == 6_000_000
        assert split.total == 10_000_000

    def test_referral_share_goes_to_protocol_without_referrer(self):
        split = split_fee(10_000_000, _config(), has_referrer=False)
        assert split.creator_cut == 3_000_000
        assert split.referral_cut == 0
        assert split.protocol_cut == 7_000_000

    def test_rounding_dust_goes_to_protocol(self):
        config = _config(creator_share_bps=3_333, referral_share_bps=3_333)
        split = split_fee(7, config, has_referrer=True)
        assert split.creator_cut == 2
        assert split.referral_cut == 2
        assert split.protocol_cut == 3

    def test_parts_always_sum_to_fee(self):
        config = _config(creator_share_bps=4_999, referral_share_bps=3_001)
        for fee in (0, 1, 2, 3, 7, 99, 10_001, 123_456_789, 987_654_321_987):
            for has_referrer in (True, False):
                split = split_fee(fee, config, has_referrer=has_referrer)
                assert split.creator_cut + split.referral_cut + split.protocol_cut == fee
                assert split.protocol_cut >= 0

    def test_full_share_leaves_nothing_for_protocol(self):
        config = _config(creator_share_bps=9_000, referral_share_bps=1_000)
        split = split_fee(10_000, config, has_referrer=True)
        assert split.protocol_cut == 0


class TestShareInvariant:
    def test_shares_over_100_percent_rejected(self):
        with pytest.raises(InvalidConfigError):
            _config(creator_share_bps=6_000, referral_share_bps=5_000)

    def test_fee_over_100_percent_rejected(self):
        with pytest.raises(InvalidConfigError):
            _config(trade_fee_bps=10_001)
