"""Centralized constants for flashstudy.

All magic numbers and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
DEFAULT_EASINESS_FACTOR = 2.5
MIN_EASINESS_FACTOR = 1.3
MIN_QUALITY = 0
MAX_QUALITY = 5
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
LAPSE_INTERVAL_DAYS = 1
PASSING_QUALITY = 3

# ---------- Rating ----------
# Quality used when a card has no checklist to derive a score from.
EMPTY_CHECKLIST_QUALITY = 3
# (minimum completion ratio, quality), checked top-down. Ratio 1.0 maps to 5.
QUALITY_THRESHOLDS = [
    (0.8, 4),
    (0.5, 3),
    (0.2, 2),
]
# Added to next_review so "due" queries compare strictly past the rating instant.
NEXT_REVIEW_PADDING_SECONDS = 1

# ---------- Answer parsing ----------
CHECKLIST_PREFIX = "* "

# ---------- Colors (RGB) ----------
NOT_RATED_RGB = (0x78, 0x90, 0x9C)
ZERO_SCORE_RGB = (0xC2, 0x18, 0x5B)
ORANGE_RGB = (0xFF, 0x98, 0x00)
AMBER_RGB = (0xFF, 0xC1, 0x07)
GREEN_RGB = (0x66, 0xBB, 0x6A)
BLUE_RGB = (0x21, 0x96, 0xF3)
GRADIENT_STOPS = [0.0, 0.25, 0.5, 0.75, 1.0]

# ---------- Preferences keys ----------
CHECKLIST_STATE_PREFIX = "checklist_state_"
STUDY_SETTING_PREFIX = "study_setting_"
SETTING_HIDE_UNMARKED_KEY = f"{STUDY_SETTING_PREFIX}hide_unmarked_text_with_checkboxes"
SETTING_SHOW_CHECKED_KEY = f"{STUDY_SETTING_PREFIX}show_previously_checked_items"

# ---------- Storage ----------
DB_FILENAME = "flashstudy.db"
PREFS_FILENAME = "preferences.json"
