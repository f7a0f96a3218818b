"""Authority-gated global config management and protocol fee withdrawal."""

from __future__ import annotations

from loguru import logger

from src.launchpad.constants import FEE_VAULT_ACCOUNT_SIZE, GLOBAL_ACCOUNT_SIZE
from src.launchpad.errors import InvalidConfigError, UnauthorizedError
from src.launchpad.pda import find_fee_vault_pda, find_global_pda
from src.launchpad.state import GlobalConfig
from src.launchpad.store import AccountStore, minimum_balance

# Fields an authority may change. Authority rotation is not supported.
UPDATABLE_FIELDS = frozenset(
    {
        "fee_receiver",
        "initial_virtual_sol_reserves",
        "initial_virtual_token_reserves",
        "initial_real_token_reserves",
        "token_total_supply",
        "trade_fee_bps",
        "creator_share_bps",
        "referral_share_bps",
        "graduation_threshold",
        "status",
    }
)


def load_config(store: AccountStore, program_id: str) -> GlobalConfig:
    return store.get(find_global_pda(program_id), GlobalConfig)


def initialize(
    store: AccountStore,
    program_id: str,
    authority: str,
    config: GlobalConfig | None = None,
) -> GlobalConfig:
    """Create the global config and fund the fee vault's rent floor."""
    config = config or GlobalConfig(authority=authority, fee_receiver=authority)
    if config.authority != authority:
        raise InvalidConfigError("config authority must be the initializing signer")

    store.create(find_global_pda(program_id), config, payer=authority, space=GLOBAL_ACCOUNT_SIZE)
    store.transfer(
        authority,
        find_fee_vault_pda(program_id),
        minimum_balance(FEE_VAULT_ACCOUNT_SIZE),
    )
    logger.info(f"[ADMIN] Global config initialized, authority={authority[:12]}")
    return config


def _require_authority(config: GlobalConfig, signer: str) -> None:
    if signer != config.authority:
        raise UnauthorizedError(f"{signer[:12]} is not the config authority")


def update_config(
    store: AccountStore,
    program_id: str,
    signer: str,
    **changes: object,
) -> GlobalConfig:
    """Replace config fields. Unset (None) values are ignored."""
    config = load_config(store, program_id)
    _require_authority(config, signer)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidConfigError(f"not updatable: {', '.join(sorted(unknown))}")

    updates = {k: v for k, v in changes.items() if v is not None}
    new_config = config.updated(**updates)
    store.put(find_global_pda(program_id), new_config)
    logger.info(f"[ADMIN] Config updated: {sorted(updates)}")
    return new_config


def withdraw_fees(store: AccountStore, program_id: str, signer: str) -> int:
    """Move protocol fees above the vault's rent floor to ``fee_receiver``."""
    config = load_config(store, program_id)
    _require_authority(config, signer)

    vault = find_fee_vault_pda(program_id)
    amount = store.withdrawable(vault)
    store.transfer(vault, config.fee_receiver, amount)
    logger.info(f"[ADMIN] Withdrew {amount} lamports to {config.fee_receiver[:12]}")
    return amount
