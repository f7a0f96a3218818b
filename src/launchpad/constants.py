"""Launchpad program constants: seeds, units, curve defaults, rent."""

# PDA seeds
GLOBAL_SEED = b"global"
BONDING_CURVE_SEED = b"bonding-curve"
FEE_VAULT_SEED = b"fee-vault"
REFERRAL_SEED = b"referral"

# Units
LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_DECIMALS = 6
TOKEN_DECIMALS_FACTOR = 10**DEFAULT_DECIMALS

U64_MAX = 2**64 - 1
BPS_DENOMINATOR = 10_000

# Bonding curve defaults (pump.fun-style launch parameters)
DEFAULT_VIRTUAL_SOL = 30 * LAMPORTS_PER_SOL
DEFAULT_VIRTUAL_TOKENS = 1_073_000_000 * TOKEN_DECIMALS_FACTOR
DEFAULT_REAL_TOKENS = 793_100_000 * TOKEN_DECIMALS_FACTOR
DEFAULT_TOKEN_SUPPLY = 1_000_000_000 * TOKEN_DECIMALS_FACTOR

# Fees (basis points)
DEFAULT_TRADE_FEE_BPS = 100  # 1% of the SOL leg
DEFAULT_CREATOR_SHARE_BPS = 3_000  # 30% of the fee
DEFAULT_REFERRAL_SHARE_BPS = 1_000  # 10% of the fee

# Graduation
DEFAULT_GRADUATION_THRESHOLD = 85 * LAMPORTS_PER_SOL
MIGRATION_FEE = LAMPORTS_PER_SOL // 2

# Solana rent: (overhead + data_len) * lamports_per_byte_year * exemption_years
ACCOUNT_STORAGE_OVERHEAD = 128
LAMPORTS_PER_BYTE_YEAR = 3_480
EXEMPTION_THRESHOLD_YEARS = 2

# Account data sizes (8-byte discriminator + fields)
GLOBAL_ACCOUNT_SIZE = 8 + 32 + 32 + 8 + 8 + 8 + 8 + 1 + 2 + 2 + 2 + 8 + 1 + 1
BONDING_CURVE_ACCOUNT_SIZE = 8 + 32 + 32 + 8 * 5 + 8 + 1 + 1 + 1
REFERRAL_ACCOUNT_SIZE = 8 + 32 + 8 + 8 + 8 + 1
FEE_VAULT_ACCOUNT_SIZE = 0
