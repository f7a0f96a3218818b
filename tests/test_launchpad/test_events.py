"""Tests for TradeEvent log encoding and decoding."""

import base64
import hashlib

from solders.keypair import Keypair  # type: ignore[import-untyped]

from src.launchpad.events import (
    TRADE_EVENT_DISCRIMINATOR,
    TRADE_EVENT_SIZE,
    TradeEvent,
    decode_trade_event,
    encode_trade_event,
    event_discriminator,
)


def _event(**overrides) -> TradeEvent:
    fields = {
        "mint": str(Keypair().pubkey()),
        "trader": str(Keypair().pubkey()),
        "is_buy": True,
        "sol_amount": 1_000_000_000,
        "token_amount": 33_620_516_298_806,
        "fee": 10_000_000,
    }
    fields.update(overrides)
    return TradeEvent(**fields)


class TestDiscriminator:
    def test_anchor_style_hash(self):
        expected = hashlib.sha256(b"event:TradeEvent").digest()[:8]
        assert TRADE_EVENT_DISCRIMINATOR == expected
        assert len(event_discriminator("CreateEvent")) == 8
        assert event_discriminator("CreateEvent") != TRADE_EVENT_DISCRIMINATOR

    def test_payload_size(self):
        raw = base64.b64decode(encode_trade_event(_event()))
        assert len(raw) == TRADE_EVENT_SIZE == 97
        assert raw[:8] == TRADE_EVENT_DISCRIMINATOR


class TestDecode:
    def test_on_chain_fields_survive(self):
        event = _event(is_buy=False, timestamp=123, referrer="ignored", virtual_sol=1)
        decoded = decode_trade_event(encode_trade_event(event), timestamp=456)
        assert decoded is not None
        assert decoded.mint == event.mint
        assert decoded.trader == event.trader
        assert decoded.is_buy is False
        assert decoded.sol_amount == event.sol_amount
        assert decoded.token_amount == event.token_amount
        assert decoded.fee == event.fee
        assert decoded.timestamp == 456
        assert decoded.referrer is None
        assert decoded.virtual_sol is None

    def test_u64_max_amount(self):
        decoded = decode_trade_event(encode_trade_event(_event(sol_amount=2**64 - 1)))
        assert decoded.sol_amount == 2**64 - 1

    def test_invalid_base64(self):
        assert decode_trade_event("not base64 !!!") is None

    def test_too_short(self):
        short = base64.b64encode(TRADE_EVENT_DISCRIMINATOR + b"\x00" * 10).decode()
        assert decode_trade_event(short) is None

    def test_other_event(self):
        raw = bytearray(base64.b64decode(encode_trade_event(_event())))
        raw[:8] = event_discriminator("CompleteEvent")
        assert decode_trade_event(base64.b64encode(bytes(raw)).decode()) is None
