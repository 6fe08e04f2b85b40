"""Rules constants for the Pathfinder rules engine.

Numeric anchors of the rules system shared by the base stat provider,
the calculator and the validation pass.
"""

from __future__ import annotations

# =============================================================================
# Character Level
# =============================================================================

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

MAX_CHARACTER_LEVEL = 20
"""Maximum character level."""

# =============================================================================
# Ability Scores
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Hard minimum for any ability score."""

MAX_ABILITY_SCORE = 30
"""Hard maximum for any ability score."""

DEFAULT_ABILITY_SCORE = 10
"""Score assumed when the snapshot omits an ability."""

VOLUNTARY_FLAW_PENALTY = 2
"""Amount subtracted from an ability per voluntary flaw."""

VOLUNTARY_FLAW_FLOOR = 8
"""Voluntary flaws may not push an ability below this score."""

# =============================================================================
# Defense & Movement
# =============================================================================

BASE_ARMOR_CLASS = 10
"""Armor class before ability, proficiency and item adjustments."""

DEFAULT_SPEED = 25
"""Land speed in feet for most medium ancestries."""

DEFAULT_CLASS_HP = 8
"""Hit points per level for a class missing from the table."""

DEFAULT_ANCESTRY_HP = 8
"""Ancestry hit points for an ancestry missing from the table."""

# =============================================================================
# Bulk
# =============================================================================

ENCUMBERED_BULK_BASE = 5
"""Bulk limit is this value plus the Strength modifier."""

MAX_BULK_BASE = 10
"""Maximum carried bulk is this value plus the Strength modifier."""

LIGHT_BULK = 0.1
"""Bulk value of a light (L) item."""

NEAR_LIMIT_RATIO = 0.8
"""Fraction of the bulk limit above which a load suggestion is made."""

EXCESS_FEAT_FACTOR = 3
"""Selected feats above this multiple of max(1, level // 2) are flagged."""

# =============================================================================
# Feat Slot Categories
# =============================================================================

ANCESTRY_SLOT = "Ancestry"
CLASS_SLOT = "Class"
SKILL_SLOT = "Skill"
GENERAL_SLOT = "General"
ARCHETYPE_SLOT = "Archetype"


__all__ = [
    # Level
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    # Ability Scores
    "MIN_ABILITY_SCORE",
    "MAX_ABILITY_SCORE",
    "DEFAULT_ABILITY_SCORE",
    "VOLUNTARY_FLAW_PENALTY",
    "VOLUNTARY_FLAW_FLOOR",
    # Defense & Movement
    "BASE_ARMOR_CLASS",
    "DEFAULT_SPEED",
    "DEFAULT_CLASS_HP",
    "DEFAULT_ANCESTRY_HP",
    # Bulk
    "ENCUMBERED_BULK_BASE",
    "MAX_BULK_BASE",
    "LIGHT_BULK",
    "NEAR_LIMIT_RATIO",
    "EXCESS_FEAT_FACTOR",
    # Feat slots
    "ANCESTRY_SLOT",
    "CLASS_SLOT",
    "SKILL_SLOT",
    "GENERAL_SLOT",
    "ARCHETYPE_SLOT",
]
