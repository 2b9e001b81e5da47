"""
Constants used across the scoring engine.
"""

from decimal import Decimal

# Points awarded per position, keyed by how many players share that position.
# This is a lookup table, not a split of a fixed pool: a three-way tie for first
# pays 2 each and a two-way tie for second pays 1.5 each.
POINTS_TABLE = {
    1: {1: Decimal("3"), 2: Decimal("2.5"), 3: Decimal("2")},
    2: {1: Decimal("1"), 2: Decimal("1.5"), 3: Decimal("0")},
}
NO_POINTS = Decimal("0")

# Highest position that gets its own bucket in the detailed stats histogram
POSITION_HISTOGRAM_SIZE = 6

# Decimal places used when presenting averages
STATS_DISPLAY_DECIMALS = 2
