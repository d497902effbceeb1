"""Centralized constants for cardwise.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduler ----------
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days
PARTIAL_INTERVAL_MULTIPLIER = 0.5
PARTIAL_EASE_PENALTY = 0.15
MIN_QUALITY = 0
MAX_QUALITY = 4
PASSING_QUALITY = 3

# ---------- Stats ----------
MATURE_INTERVAL = 30  # days

# ---------- Import ----------
IMPORT_DELIMITER = ","
FRONT_FIELD = "front"
BACK_FIELD = "back"

# ---------- Persistence ----------
ID_PREFIX = "card_"
