"""Drive a bonding curve from launch to graduation and migration.

Launches one token with the configured defaults, buys in fixed-size
clips until the curve completes, migrates it, and prints the fee split
and handoff amounts.

Usage:
    python scripts/simulate_curve.py
    python scripts/simulate_curve.py --buy-sol 2.5 --referral --sell-every 4
    python scripts/simulate_curve.py --journal   # persist events to DATABASE_URL
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402
from solders.keypair import Keypair  # noqa: E402  # type: ignore[import-untyped]

from config.settings import settings  # noqa: E402
from src.launchpad.constants import LAMPORTS_PER_SOL  # noqa: E402
from src.launchpad.curve import graduation_progress_pct, market_cap_sol  # noqa: E402
from src.launchpad.errors import NotEnoughTokensError  # noqa: E402
from src.launchpad.events import LaunchpadEvent  # noqa: E402
from src.launchpad.program import LaunchpadProgram  # noqa: E402
from src.launchpad.state import GlobalConfig  # noqa: E402
from src.launchpad.store import AccountStore  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402


@dataclass
class SimulationReport:
    buys: int
    sells: int
    protocol_fees: int
    creator_fees: int
    referral_fees: int
    sol_to_pool: int
    tokens_to_pool: int
    events: list[LaunchpadEvent]


def _wallet() -> str:
    return str(Keypair().pubkey())


def run_simulation(*, buy_sol: float, use_referral: bool, sell_every: int, max_trades: int) -> SimulationReport:
    store = AccountStore()
    program = LaunchpadProgram(store, settings.program_id)

    authority, creator, referrer, trader, mint = (_wallet() for _ in range(5))
    for wallet in (authority, creator, referrer):
        store.deposit(wallet, 10 * LAMPORTS_PER_SOL)
    store.deposit(trader, 10_000 * LAMPORTS_PER_SOL)

    config = GlobalConfig.from_settings(authority, settings)
    program.initialize(authority, config)
    program.create_token(creator, mint, "Simulated", "SIM", "https://example.com/sim.json")
    if use_referral:
        program.register_referral(referrer)

    creator_start = store.balance(creator)
    vault_start = store.balance(program.fee_vault)
    clip = int(buy_sol * LAMPORTS_PER_SOL)
    buys = sells = 0

    curve = program.get_bonding_curve(mint)
    while curve.is_active and buys + sells < max_trades:
        try:
            result = program.buy_token(trader, mint, clip, 0, referrer if use_referral else None)
        except NotEnoughTokensError:
            # Last clips must land between the threshold and real-token exhaustion
            clip //= 2
            if clip == 0:
                break
            continue
        buys += 1
        curve = program.get_bonding_curve(mint)
        if sell_every and buys % sell_every == 0 and curve.is_active:
            program.sell_token(trader, mint, result.token_amount // 2, 0, referrer if use_referral else None)
            sells += 1
            curve = program.get_bonding_curve(mint)
        logger.info(
            f"[SIM] trade {buys + sells}: progress={graduation_progress_pct(curve, config):.1f}% "
            f"mcap={market_cap_sol(curve, config):.2f} SOL"
        )

    sol_to_pool = tokens_to_pool = 0
    if curve.completed:
        handoff = program.migrate(mint)
        sol_to_pool, tokens_to_pool = handoff.sol_to_pool, handoff.tokens_to_pool

    referral = program.get_referral(referrer)
    return SimulationReport(
        buys=buys,
        sells=sells,
        protocol_fees=store.balance(program.fee_vault) - vault_start,
        creator_fees=store.balance(creator) - creator_start,
        referral_fees=referral.total_earned if referral else 0,
        sol_to_pool=sol_to_pool,
        tokens_to_pool=tokens_to_pool,
        events=program.drain_events(),
    )


async def journal(events: list[LaunchpadEvent]) -> int:
    from src.db.database import async_session_factory, engine, init_db
    from src.db.persistence import save_events

    await init_db()
    async with async_session_factory() as session:
        saved = await save_events(session, events)
        await session.commit()
    await engine.dispose()
    return saved


def print_report(report: SimulationReport) -> None:
    def sol(lamports: int) -> str:
        return f"{lamports / LAMPORTS_PER_SOL:.6f} SOL"

    print("=" * 50)
    print("BONDING CURVE SIMULATION")
    print("=" * 50)
    print(f"  Buys / sells:     {report.buys} / {report.sells}")
    print(f"  Protocol fees:    {sol(report.protocol_fees)}")
    print(f"  Creator fees:     {sol(report.creator_fees)}")
    print(f"  Referral fees:    {sol(report.referral_fees)}")
    print(f"  SOL to pool:      {sol(report.sol_to_pool)}")
    print(f"  Tokens to pool:   {report.tokens_to_pool}")
    print(f"  Events emitted:   {len(report.events)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate a launchpad bonding curve")
    parser.add_argument("--buy-sol", type=float, default=1.0, help="SOL per buy")
    parser.add_argument("--referral", action="store_true", help="route trades through a referrer")
    parser.add_argument("--sell-every", type=int, default=0, help="sell half of every Nth buy")
    parser.add_argument("--max-trades", type=int, default=10_000)
    parser.add_argument("--journal", action="store_true", help="persist events to the database")
    args = parser.parse_args()

    setup_logger(level=settings.log_level, json_logs=settings.json_logs, log_file=settings.log_file)
    report = run_simulation(
        buy_sol=args.buy_sol,
        use_referral=args.referral,
        sell_every=args.sell_every,
        max_trades=args.max_trades,
    )
    print_report(report)

    if args.journal or settings.journal_enabled:
        saved = asyncio.run(journal(report.events))
        print(f"  Journaled rows:   {saved}")


if __name__ == "__main__":
    main()
