"""Program-derived addresses for launchpad accounts."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.launchpad.constants import (
    BONDING_CURVE_SEED,
    FEE_VAULT_SEED,
    GLOBAL_SEED,
    REFERRAL_SEED,
)


def _find(seeds: list[bytes], program_id: str) -> str:
    pda, _bump = Pubkey.find_program_address(seeds, Pubkey.from_string(program_id))
    return str(pda)


def find_global_pda(program_id: str) -> str:
    return _find([GLOBAL_SEED], program_id)


def find_fee_vault_pda(program_id: str) -> str:
    return _find([FEE_VAULT_SEED], program_id)


def find_bonding_curve_pda(program_id: str, mint: str) -> str:
    return _find([BONDING_CURVE_SEED, bytes(Pubkey.from_string(mint))], program_id)


def find_referral_pda(program_id: str, referrer: str) -> str:
    return _find([REFERRAL_SEED, bytes(Pubkey.from_string(referrer))], program_id)
