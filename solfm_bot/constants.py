from solders.pubkey import Pubkey

# ============================================
# PROGRAM IDS
# ============================================
TOKEN_METADATA_PROGRAM = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

# ============================================
# TOKENS
# ============================================
# Wrapped SOL mint, used as the native token everywhere
SOL_TOKEN = "So11111111111111111111111111111111111111112"
SOL_DECIMALS = 9
UNKNOWN_SYMBOL = "Unknown"
SHORT_ADDRESS_LEN = 6

# ============================================
# ON-CHAIN LAYOUTS
# ============================================
# SPL mint: Option<Pubkey> authority (36) + supply (8), then decimals
MINT_DECIMALS_OFFSET = 44
# Metaplex metadata: key (1) + update authority (32) + mint (32), then Borsh strings
METADATA_HEADER_LEN = 65

# ============================================
# TRANSFER API
# ============================================
TRANSFERS_PATH = "/v0/accounts/{account}/transfers"
SUCCESSFUL_STATUS = "Successful"

# ============================================
# TELEGRAM
# ============================================
TELEGRAM_MAX_MESSAGE_LEN = 4096
