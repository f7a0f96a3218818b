"""In-memory account store: records, lamport and token balances.

Stands in for the host runtime's account storage and system transfers.
``transaction()`` gives each instruction all-or-nothing semantics: any
exception restores every record and balance to its state at entry.

Only what a transaction touches is saved. A record's state is copied the
first time it is read, created or replaced inside the transaction, and
on rollback it is written back into the same object, so references held
by callers never observe a partial update.
"""

from __future__ import annotations

import copy
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TypeVar

from loguru import logger

from src.launchpad.constants import (
    ACCOUNT_STORAGE_OVERHEAD,
    EXEMPTION_THRESHOLD_YEARS,
    LAMPORTS_PER_BYTE_YEAR,
)
from src.launchpad.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    NotEnoughLamportsError,
    NotEnoughTokensError,
    ZeroAmountError,
)
from src.launchpad.fixed_point import checked_add, checked_sub

T = TypeVar("T")

_MISSING = object()


def minimum_balance(space: int) -> int:
    """Rent-exempt minimum for an account with ``space`` bytes of data."""
    return (ACCOUNT_STORAGE_OVERHEAD + space) * LAMPORTS_PER_BYTE_YEAR * EXEMPTION_THRESHOLD_YEARS


@dataclass
class _UndoLog:
    # address -> (record at entry or _MISSING, its saved state, size at entry or _MISSING)
    records: dict[str, tuple[object, dict | None, object]] = field(default_factory=dict)
    lamports: dict[str, object] = field(default_factory=dict)
    tokens: dict[tuple[str, str], object] = field(default_factory=dict)


class AccountStore:
    def __init__(self, *, clock: Callable[[], int] | None = None) -> None:
        self._records: dict[str, object] = {}
        self._sizes: dict[str, int] = {}
        self._lamports: dict[str, int] = {}
        self._tokens: dict[tuple[str, str], int] = {}
        self._clock = clock or (lambda: int(time.time()))
        self._undo: _UndoLog | None = None

    def now(self) -> int:
        return self._clock()

    # Transactions

    @contextmanager
    def transaction(self) -> Iterator[AccountStore]:
        if self._undo is not None:
            # Nested: the outermost transaction owns the undo log
            yield self
            return

        self._undo = _UndoLog()
        try:
            yield self
        except Exception:
            self._rollback(self._undo)
            logger.debug("[STORE] Transaction rolled back")
            raise
        finally:
            self._undo = None

    def _rollback(self, undo: _UndoLog) -> None:
        for address, (record, state, size) in undo.records.items():
            if record is _MISSING:
                self._records.pop(address, None)
            else:
                record.__dict__.clear()
                record.__dict__.update(state)
                self._records[address] = record
            if size is _MISSING:
                self._sizes.pop(address, None)
            else:
                self._sizes[address] = size
        for address, amount in undo.lamports.items():
            if amount is _MISSING:
                self._lamports.pop(address, None)
            else:
                self._lamports[address] = amount
        for key, amount in undo.tokens.items():
            if amount is _MISSING:
                self._tokens.pop(key, None)
            else:
                self._tokens[key] = amount

    def _track_record(self, address: str) -> None:
        if self._undo is None or address in self._undo.records:
            return
        record = self._records.get(address, _MISSING)
        state = None if record is _MISSING else copy.deepcopy(record.__dict__)
        self._undo.records[address] = (record, state, self._sizes.get(address, _MISSING))

    def _set_lamports(self, address: str, amount: int) -> None:
        if self._undo is not None and address not in self._undo.lamports:
            self._undo.lamports[address] = self._lamports.get(address, _MISSING)
        self._lamports[address] = amount

    def _set_tokens(self, key: tuple[str, str], amount: int) -> None:
        if self._undo is not None and key not in self._undo.tokens:
            self._undo.tokens[key] = self._tokens.get(key, _MISSING)
        self._tokens[key] = amount

    # Records

    def exists(self, address: str) -> bool:
        return address in self._records

    def find(self, address: str, kind: type[T]) -> T | None:
        record = self._records.get(address)
        if record is None or not isinstance(record, kind):
            return None
        # Callers may mutate what they read
        self._track_record(address)
        return record

    def get(self, address: str, kind: type[T]) -> T:
        record = self.find(address, kind)
        if record is None:
            raise AccountNotFoundError(f"{kind.__name__} at {address}")
        return record

    def create(self, address: str, record: object, *, payer: str, space: int) -> None:
        """Allocate a new record, funding its rent floor from ``payer``."""
        if address in self._records:
            raise AccountAlreadyExistsError(address)
        rent = minimum_balance(space)
        self.transfer(payer, address, rent)
        self._track_record(address)
        self._records[address] = record
        self._sizes[address] = space

    def put(self, address: str, record: object) -> None:
        """Replace an existing record (immutable snapshots)."""
        if address not in self._records:
            raise AccountNotFoundError(address)
        self._track_record(address)
        self._records[address] = record

    def rent_floor(self, address: str) -> int:
        return minimum_balance(self._sizes.get(address, 0))

    def withdrawable(self, address: str) -> int:
        """Lamports held above the rent floor. Raises if there are none."""
        balance = self.balance(address)
        floor = self.rent_floor(address)
        if balance <= floor:
            raise NotEnoughLamportsError(f"{address} holds {balance}, rent floor {floor}")
        return balance - floor

    # Lamports

    def balance(self, address: str) -> int:
        return self._lamports.get(address, 0)

    def deposit(self, address: str, amount: int) -> None:
        """Credit lamports from outside the program (airdrop, external transfer)."""
        self._set_lamports(address, checked_add(self.balance(address), amount))

    def transfer(self, source: str, destination: str, amount: int) -> None:
        if amount == 0:
            return
        if amount < 0:
            raise ZeroAmountError(f"negative transfer {amount}")
        available = self.balance(source)
        if available < amount:
            raise NotEnoughLamportsError(f"{source} holds {available} < {amount}")
        self._set_lamports(source, available - amount)
        self._set_lamports(destination, checked_add(self.balance(destination), amount))

    # Tokens

    def token_balance(self, mint: str, owner: str) -> int:
        return self._tokens.get((mint, owner), 0)

    def mint_to(self, mint: str, owner: str, amount: int) -> None:
        key = (mint, owner)
        self._set_tokens(key, checked_add(self._tokens.get(key, 0), amount))

    def transfer_tokens(self, mint: str, source: str, destination: str, amount: int) -> None:
        if amount == 0:
            return
        available = self.token_balance(mint, source)
        if available < amount:
            raise NotEnoughTokensError(f"{source} holds {available} < {amount}")
        self._set_tokens((mint, source), checked_sub(available, amount))
        self.mint_to(mint, destination, amount)
