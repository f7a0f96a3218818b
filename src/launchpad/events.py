"""Program events and the binary log encoding of TradeEvent.

TradeEvent log layout (after the 8-byte discriminator):
  0:32   mint (Pubkey)
  32:64  trader (Pubkey)
  64     is_buy (u8 bool)
  65:73  sol_amount (u64 LE)
  73:81  token_amount (u64 LE)
  81:89  fee (u64 LE)
"""

import base64
import hashlib
import struct

from loguru import logger
from pydantic import BaseModel
from solders.pubkey import Pubkey  # type: ignore[import-untyped]


def event_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"event:{name}".encode()).digest()[:8]


TRADE_EVENT_DISCRIMINATOR = event_discriminator("TradeEvent")
TRADE_EVENT_SIZE = 8 + 32 + 32 + 1 + 8 + 8 + 8


class CreateEvent(BaseModel):
    mint: str
    creator: str
    bonding_curve: str
    name: str
    symbol: str
    uri: str
    timestamp: int

    model_config = {"extra": "ignore"}


class TradeEvent(BaseModel):
    mint: str
    trader: str
    is_buy: bool
    sol_amount: int
    token_amount: int
    fee: int
    timestamp: int = 0
    referrer: str | None = None
    virtual_sol: int | None = None
    virtual_token: int | None = None

    model_config = {"extra": "ignore"}


class CompleteEvent(BaseModel):
    mint: str
    bonding_curve: str
    real_sol_reserves: int
    timestamp: int

    model_config = {"extra": "ignore"}


class MigrateEvent(BaseModel):
    mint: str
    sol_to_pool: int
    tokens_to_pool: int
    migration_fee: int
    timestamp: int

    model_config = {"extra": "ignore"}


LaunchpadEvent = CreateEvent | TradeEvent | CompleteEvent | MigrateEvent


def encode_trade_event(event: TradeEvent) -> str:
    """Encode as a base64 "Program data:" payload. Only on-chain fields are kept."""
    buf = bytearray(TRADE_EVENT_DISCRIMINATOR)
    buf += bytes(Pubkey.from_string(event.mint))
    buf += bytes(Pubkey.from_string(event.trader))
    buf += struct.pack("<?QQQ", event.is_buy, event.sol_amount, event.token_amount, event.fee)
    return base64.b64encode(bytes(buf)).decode()


def decode_trade_event(data_b64: str, *, timestamp: int = 0) -> TradeEvent | None:
    """Decode a "Program data:" payload. Returns None if it is not a TradeEvent."""
    try:
        data = base64.b64decode(data_b64, validate=True)
    except ValueError:
        logger.debug("[EVENTS] Failed to base64-decode event payload")
        return None

    if len(data) < TRADE_EVENT_SIZE:
        logger.debug(f"[EVENTS] Event data too short: {len(data)} < {TRADE_EVENT_SIZE}")
        return None

    if data[:8] != TRADE_EVENT_DISCRIMINATOR:
        return None

    mint = str(Pubkey.from_bytes(data[8:40]))
    trader = str(Pubkey.from_bytes(data[40:72]))
    is_buy, sol_amount, token_amount, fee = struct.unpack_from("<?QQQ", data, 72)
    return TradeEvent(
        mint=mint,
        trader=trader,
        is_buy=is_buy,
        sol_amount=sol_amount,
        token_amount=token_amount,
        fee=fee,
        timestamp=timestamp,
    )
