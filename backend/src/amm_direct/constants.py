from solders.pubkey import Pubkey

LAMPORTS_PER_SOL = 1_000_000_000
SOL_DECIMALS = 9
DEFAULT_TOKEN_DECIMALS = 9

SOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
TOKEN_PROGRAM = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")
SYSTEM_PROGRAM = Pubkey.from_string("11111111111111111111111111111111")

HEAVEN_PROGRAM_ID = Pubkey.from_string("HEAVENoP2qxoeuF8Dj2oT1GHEnu49U5mJYkdeC8BAX2o")
BOOP_FUN_PROGRAM_ID = Pubkey.from_string("boop8hVGQGqehUK2iVEMEnMrL5RbjywRzHKBmBE7ry4")

# PDA seeds
HEAVEN_POOL_SEED = b"liquidity_pool_state"
HEAVEN_PROTOCOL_CONFIG_SEED = b"protocol_config"
BOOP_BONDING_CURVE_SEED = b"bonding_curve"
BOOP_CONFIG_SEED = b"config"
BOOP_VAULT_AUTHORITY_SEED = b"vault_authority"
BOOP_CURVE_VAULT_SEED = b"bonding_curve_vault"
BOOP_CURVE_SOL_VAULT_SEED = b"bonding_curve_sol_vault"
BOOP_TRADING_FEES_VAULT_SEED = b"trading_fees_vault"
EVENT_AUTHORITY_SEED = b"__event_authority"

# Compute budget policy for priority fees
COMPUTE_UNIT_BUDGET = 300_000
MICRO_LAMPORTS_PER_LAMPORT = 1_000_000

# Heaven charges a market-cap based fee that lives in the pool's fee schedule;
# min-out amounts assume the schedule's ceiling.
HEAVEN_MAX_FEE_BPS = 100
BPS_DENOMINATOR = 10_000

U64_MAX = 2**64 - 1
