"""Launchpad program: the instruction set over an AccountStore.

Each public method is one instruction. It runs inside a store
transaction, so an error at any step leaves every curve, referral and
balance exactly as it was. Signer identities are trusted as given; the
host runtime verifies signatures.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger

from src.launchpad import admin
from src.launchpad import curve as reserve_curve
from src.launchpad.constants import BONDING_CURVE_ACCOUNT_SIZE
from src.launchpad.errors import AdminPausedError, LaunchpadError
from src.launchpad.events import (
    CompleteEvent,
    CreateEvent,
    LaunchpadEvent,
    MigrateEvent,
    TradeEvent,
)
from src.launchpad.fees import FeeSplit
from src.launchpad.graduation import LiquidityVenue, MigrationHandoff, RecordingVenue, migrate
from src.launchpad.pda import find_bonding_curve_pda, find_fee_vault_pda
from src.launchpad.referral import ReferralLedger
from src.launchpad.state import BondingCurve, GlobalConfig, Referral
from src.launchpad.store import AccountStore


class LaunchpadProgram:
    def __init__(
        self,
        store: AccountStore,
        program_id: str,
        *,
        venue: LiquidityVenue | None = None,
    ) -> None:
        self.store = store
        self.program_id = program_id
        self.venue: LiquidityVenue = venue or RecordingVenue()
        self.referrals = ReferralLedger(store, program_id)
        self.events: list[LaunchpadEvent] = []

    @contextmanager
    def _instruction(self, name: str) -> Iterator[list[LaunchpadEvent]]:
        """Atomic instruction boundary. Events are published only on success."""
        pending: list[LaunchpadEvent] = []
        try:
            with self.store.transaction():
                yield pending
        except LaunchpadError as e:
            logger.warning(f"[PROGRAM] {name} failed: {e.code} ({e})")
            raise
        self.events.extend(pending)

    def drain_events(self) -> list[LaunchpadEvent]:
        events, self.events = self.events, []
        return events

    # Accessors

    @property
    def fee_vault(self) -> str:
        return find_fee_vault_pda(self.program_id)

    def bonding_curve_address(self, mint: str) -> str:
        return find_bonding_curve_pda(self.program_id, mint)

    def get_config(self) -> GlobalConfig:
        return admin.load_config(self.store, self.program_id)

    def get_bonding_curve(self, mint: str) -> BondingCurve:
        return self.store.get(self.bonding_curve_address(mint), BondingCurve)

    def get_referral(self, referrer: str) -> Referral | None:
        return self.referrals.find(referrer)

    # Admin

    def initialize(self, authority: str, config: GlobalConfig | None = None) -> GlobalConfig:
        with self._instruction("initialize"):
            return admin.initialize(self.store, self.program_id, authority, config)

    def update_config(self, signer: str, **changes: object) -> GlobalConfig:
        with self._instruction("update_config"):
            return admin.update_config(self.store, self.program_id, signer, **changes)

    def withdraw_fees(self, signer: str) -> int:
        with self._instruction("withdraw_fees"):
            return admin.withdraw_fees(self.store, self.program_id, signer)

    # Launch

    def create_token(
        self,
        creator: str,
        mint: str,
        name: str,
        symbol: str,
        uri: str,
    ) -> BondingCurve:
        """Launch a token: new curve from config defaults, full supply in its vault."""
        with self._instruction("create_token") as events:
            config = self.get_config()
            if not config.launch_allowed:
                raise AdminPausedError(f"status={config.status.value}")

            address = self.bonding_curve_address(mint)
            now = self.store.now()
            curve = BondingCurve.launch(mint, creator, config, start_time=now)
            self.store.create(address, curve, payer=creator, space=BONDING_CURVE_ACCOUNT_SIZE)
            self.store.mint_to(mint, address, config.token_total_supply)

            events.append(
                CreateEvent(
                    mint=mint,
                    creator=creator,
                    bonding_curve=address,
                    name=name,
                    symbol=symbol,
                    uri=uri,
                    timestamp=now,
                )
            )
            logger.info(f"[PROGRAM] Launched {symbol} mint={mint[:12]} creator={creator[:12]}")
            return curve

    # Trading

    def _resolve_referrer(self, referrer: str | None) -> str | None:
        if referrer is None:
            return None
        if self.referrals.find(referrer) is None:
            logger.debug(f"[PROGRAM] Referrer {referrer[:12]} not registered, share goes to protocol")
            return None
        return referrer

    def _distribute_fee(self, fee: FeeSplit, curve: BondingCurve, source: str, referrer: str | None) -> None:
        self.store.transfer(source, self.fee_vault, fee.protocol_cut)
        self.store.transfer(source, curve.creator, fee.creator_cut)
        if referrer is not None:
            self.referrals.credit(referrer, fee.referral_cut, source=source)

    def buy_token(
        self,
        trader: str,
        mint: str,
        sol_amount: int,
        min_tokens_out: int,
        referrer: str | None = None,
    ) -> reserve_curve.TradeResult:
        with self._instruction("buy_token") as events:
            config = self.get_config()
            address = self.bonding_curve_address(mint)
            curve = self.store.get(address, BondingCurve)
            referrer = self._resolve_referrer(referrer)

            quote, result = reserve_curve.buy(
                curve,
                config,
                sol_amount,
                min_tokens_out,
                has_referrer=referrer is not None,
            )
            self.store.transfer(trader, address, quote.net_sol_in)
            self._distribute_fee(quote.fee, curve, trader, referrer)
            self.store.transfer_tokens(mint, address, trader, quote.tokens_out)

            now = self.store.now()
            events.append(self._trade_event(curve, trader, result, referrer, now))
            if result.graduated:
                events.append(
                    CompleteEvent(
                        mint=mint,
                        bonding_curve=address,
                        real_sol_reserves=curve.real_sol_reserves,
                        timestamp=now,
                    )
                )
            return result

    def sell_token(
        self,
        trader: str,
        mint: str,
        token_amount: int,
        min_sol_out: int,
        referrer: str | None = None,
    ) -> reserve_curve.TradeResult:
        with self._instruction("sell_token") as events:
            config = self.get_config()
            address = self.bonding_curve_address(mint)
            curve = self.store.get(address, BondingCurve)
            referrer = self._resolve_referrer(referrer)

            quote, result = reserve_curve.sell(
                curve,
                config,
                token_amount,
                min_sol_out,
                has_referrer=referrer is not None,
            )
            self.store.transfer_tokens(mint, trader, address, token_amount)
            self.store.transfer(address, trader, quote.net_sol_out)
            self._distribute_fee(quote.fee, curve, address, referrer)

            events.append(self._trade_event(curve, trader, result, referrer, self.store.now()))
            return result

    @staticmethod
    def _trade_event(
        curve: BondingCurve,
        trader: str,
        result: reserve_curve.TradeResult,
        referrer: str | None,
        now: int,
    ) -> TradeEvent:
        return TradeEvent(
            mint=curve.mint,
            trader=trader,
            is_buy=result.is_buy,
            sol_amount=result.sol_amount,
            token_amount=result.token_amount,
            fee=result.fee.total,
            timestamp=now,
            referrer=referrer,
            virtual_sol=curve.virtual_sol,
            virtual_token=curve.virtual_token,
        )

    # Graduation

    def migrate(self, mint: str) -> MigrationHandoff:
        """Hand a completed curve's real reserves to the liquidity venue. One-shot."""
        with self._instruction("migrate") as events:
            address = self.bonding_curve_address(mint)
            curve = self.store.get(address, BondingCurve)
            handoff = migrate(curve, self.store.token_balance(mint, address))

            self.store.transfer(address, self.venue.address, handoff.sol_to_pool + handoff.migration_fee)
            self.store.transfer_tokens(mint, address, self.venue.address, handoff.tokens_to_pool)
            self.venue.receive_migration(handoff)

            events.append(
                MigrateEvent(
                    mint=mint,
                    sol_to_pool=handoff.sol_to_pool,
                    tokens_to_pool=handoff.tokens_to_pool,
                    migration_fee=handoff.migration_fee,
                    timestamp=self.store.now(),
                )
            )
            return handoff

    # Referrals

    def register_referral(self, user: str) -> Referral:
        with self._instruction("register_referral"):
            return self.referrals.register(user)

    def claim_referral_fees(self, user: str) -> int:
        with self._instruction("claim_referral_fees"):
            return self.referrals.claim(user)
