"""Referral ledger: registration, per-trade crediting and claims.

One Referral record per referrer wallet, stored at its PDA. The PDA's
lamports are the escrow: rent floor plus unclaimed earnings.
"""

from __future__ import annotations

from loguru import logger

from src.launchpad.constants import REFERRAL_ACCOUNT_SIZE
from src.launchpad.fixed_point import checked_add
from src.launchpad.pda import find_referral_pda
from src.launchpad.state import Referral
from src.launchpad.store import AccountStore


class ReferralLedger:
    def __init__(self, store: AccountStore, program_id: str) -> None:
        self._store = store
        self._program_id = program_id

    def address_of(self, referrer: str) -> str:
        return find_referral_pda(self._program_id, referrer)

    def find(self, referrer: str) -> Referral | None:
        return self._store.find(self.address_of(referrer), Referral)

    def register(self, referrer: str) -> Referral:
        """Create the referrer's record. The referrer pays its rent floor."""
        record = Referral(referrer=referrer)
        self._store.create(
            self.address_of(referrer),
            record,
            payer=referrer,
            space=REFERRAL_ACCOUNT_SIZE,
        )
        logger.info(f"[REFERRAL] Registered {referrer[:12]}")
        return record

    def credit(self, referrer: str, amount: int, *, source: str) -> Referral:
        """Record one referred trade and move its cut from ``source`` into escrow."""
        address = self.address_of(referrer)
        record = self._store.get(address, Referral)
        total_earned = checked_add(record.total_earned, amount)
        trade_count = checked_add(record.trade_count, 1)
        self._store.transfer(source, address, amount)
        record.total_earned = total_earned
        record.trade_count = trade_count
        return record

    def claim(self, referrer: str) -> int:
        """Send everything above the rent floor to the referrer's wallet.

        ``total_earned`` and ``trade_count`` are lifetime counters and are
        left untouched; ``claimed_total`` tracks what has been paid out.
        """
        address = self.address_of(referrer)
        record = self._store.get(address, Referral)
        amount = self._store.withdrawable(address)
        claimed_total = checked_add(record.claimed_total, amount)
        self._store.transfer(address, referrer, amount)
        record.claimed_total = claimed_total
        logger.info(f"[REFERRAL] {referrer[:12]} claimed {amount} lamports")
        return amount
