"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
import pytest_asyncio
from solders.keypair import Keypair  # type: ignore[import-untyped]
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.launchpad.constants import LAMPORTS_PER_SOL
from src.launchpad.program import LaunchpadProgram
from src.launchpad.state import BondingCurve, GlobalConfig
from src.launchpad.store import AccountStore
from src.models.base import Base

PROGRAM_ID = "HY3g1uQL2Zki1aFVJvJYZnMjZNveuMJhU22f9BucN3X"
NOW = 1_700_000_000


def new_wallet() -> str:
    return str(Keypair().pubkey())


@pytest.fixture
def config() -> GlobalConfig:
    """Default launch parameters: 1% fee, 30% creator, 10% referral, 85 SOL graduation."""
    authority = new_wallet()
    return GlobalConfig(authority=authority, fee_receiver=authority)


@pytest.fixture
def curve(config: GlobalConfig) -> BondingCurve:
    return BondingCurve.launch(new_wallet(), new_wallet(), config, start_time=NOW)


@dataclass
class LaunchEnv:
    program: LaunchpadProgram
    store: AccountStore
    authority: str
    creator: str
    trader: str
    mint: str

    @property
    def curve_address(self) -> str:
        return self.program.bonding_curve_address(self.mint)


@pytest.fixture
def env() -> LaunchEnv:
    """Initialized program with one launched token and a funded trader."""
    store = AccountStore(clock=lambda: NOW)
    program = LaunchpadProgram(store, PROGRAM_ID)
    authority, creator, trader, mint = new_wallet(), new_wallet(), new_wallet(), new_wallet()
    store.deposit(authority, 10 * LAMPORTS_PER_SOL)
    store.deposit(creator, 10 * LAMPORTS_PER_SOL)
    store.deposit(trader, 1_000 * LAMPORTS_PER_SOL)

    program.initialize(authority)
    program.create_token(creator, mint, "Test Token", "TST", "https://example.com/tst.json")
    program.drain_events()
    return LaunchEnv(
        program=program,
        store=store,
        authority=authority,
        creator=creator,
        trader=trader,
        mint=mint,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory SQLite per test; StaticPool keeps the single connection alive."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()
