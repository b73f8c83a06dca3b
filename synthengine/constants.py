"""Engine-wide fixed-point constants."""

PRECISION = 10**18
FEED_TARGET_DECIMALS = 18

# 50 / 100 of collateral value counts toward solvency (200% collateralization).
LIQUIDATION_THRESHOLD = 50
LIQUIDATION_PRECISION = 100

# 10 / 100 extra collateral for the liquidator.
LIQUIDATION_BONUS = 10

MIN_HEALTH_FACTOR = PRECISION
MAX_HEALTH_FACTOR = 2**256 - 1
