"""Centralized constants for the flashdeck scheduler.

Ease values are scaled by 100 (250 = 2.50x). Intervals are whole days.
"""

# ---------- Learning steps ----------
EASY_INTERVAL = 4  # days
GRADUATION_INTERVAL = 1  # days
AGAIN_STEPS = 2
RELEARN_STEPS = 1
STEP_DELAY_MINUTES = 1

# ---------- Review (graduated) cards ----------
MINIMUM_EASE = 130
AGAIN_EASE_PENALTY = 20
HARD_EASE_PENALTY = 15
EASY_EASE_BONUS = 15
HARD_INTERVAL_PERCENT = 120
EASY_BONUS_PERCENT = 130
LAPSE_INTERVAL_PERCENT = 50
MINIMUM_INTERVAL = 1

# ---------- Defaults ----------
DEFAULT_INTERVAL = 1
DEFAULT_EASE = 250
DEFAULT_CARD_NUM = 1
DEFAULT_TEMPLATE = "basic"

# Values given to cards produced by a directory scan before any review
# history is applied.
LISTED_CARD_INTERVAL = 100
LISTED_CARD_EASE = 200
