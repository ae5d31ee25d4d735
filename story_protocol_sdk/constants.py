"""
Shared constants for the Story Protocol SDK.
"""

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_HASH = "0x0000000000000000000000000000000000000000000000000000000000000000"
ZERO_FUNC = "0x00000000"

# Receipt polling
DEFAULT_CONFIRMATION_TIMEOUT = 120  # seconds
DEFAULT_POLL_INTERVAL = 1.0  # seconds

# Multiplier applied to node gas estimates
GAS_ESTIMATE_BUFFER = 1.1

# Commercial revenue share is stored on-chain with 10^6 precision per percent
REV_SHARE_PRECISION = 10**6
MAX_REV_SHARE_PERCENT = 100

# Seconds a permission signature stays valid past the latest block
DEFAULT_SIGNATURE_DEADLINE = 1000
