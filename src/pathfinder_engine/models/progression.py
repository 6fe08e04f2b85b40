"""Pathfinder level progression data.

This module contains the static tables the calculator derives from:
- Ability modifier arithmetic
- Proficiency bonus and the maximum rank reachable by level
- Hit points by class and ancestry
- Base speed by ancestry
- Standard feat slot progression

Every function here is a pure lookup keyed by level or name. Nothing is
stored as mutable state.
"""

from __future__ import annotations

from pathfinder_engine.core.constants import (
    ANCESTRY_SLOT,
    CLASS_SLOT,
    DEFAULT_ANCESTRY_HP,
    DEFAULT_CLASS_HP,
    GENERAL_SLOT,
    SKILL_SLOT,
)
from pathfinder_engine.models.enums import ProficiencyRank


# =============================================================================
# Ability Modifiers
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is calculated as: (score - 10) // 2

    Args:
        score: The ability score.

    Returns:
        The ability modifier, rounded toward negative infinity.

    Example:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(9)
        -1
        >>> calculate_modifier(18)
        4
    """
    return (score - 10) // 2


# =============================================================================
# Proficiency
# =============================================================================

# (minimum level, highest rank reachable from that level)
_MAX_RANK_BY_LEVEL: tuple[tuple[int, ProficiencyRank], ...] = (
    (15, ProficiencyRank.LEGENDARY),
    (7, ProficiencyRank.MASTER),
    (3, ProficiencyRank.EXPERT),
    (1, ProficiencyRank.TRAINED),
)


def get_max_proficiency_rank(level: int) -> ProficiencyRank:
    """Get the highest proficiency rank a character can hold at a level."""
    for min_level, rank in _MAX_RANK_BY_LEVEL:
        if level >= min_level:
            return rank
    return ProficiencyRank.UNTRAINED


def get_proficiency_bonus(rank: ProficiencyRank, level: int) -> int:
    """Get the proficiency bonus for a rank at a level.

    Untrained adds nothing; every other rank adds its value plus level.
    """
    if rank == ProficiencyRank.UNTRAINED:
        return 0
    return int(rank) + level


# =============================================================================
# Hit Points by Class
# =============================================================================

CLASS_HIT_POINTS: dict[str, int] = {
    "Alchemist": 8,
    "Barbarian": 12,
    "Bard": 8,
    "Champion": 10,
    "Cleric": 8,
    "Druid": 8,
    "Fighter": 10,
    "Gunslinger": 8,
    "Inventor": 8,
    "Investigator": 8,
    "Kineticist": 8,
    "Magus": 8,
    "Monk": 10,
    "Oracle": 8,
    "Psychic": 6,
    "Ranger": 10,
    "Rogue": 8,
    "Sorcerer": 6,
    "Summoner": 10,
    "Swashbuckler": 10,
    "Thaumaturge": 8,
    "Witch": 6,
    "Wizard": 6,
}


def get_class_hit_points(class_name: str) -> int:
    """Get per-level hit points for a class (case-insensitive)."""
    return _lookup(CLASS_HIT_POINTS, class_name, DEFAULT_CLASS_HP)


# =============================================================================
# Ancestries
# =============================================================================

ANCESTRY_HIT_POINTS: dict[str, int] = {
    "Catfolk": 8,
    "Dwarf": 10,
    "Elf": 6,
    "Gnome": 8,
    "Goblin": 6,
    "Halfling": 6,
    "Human": 8,
    "Kobold": 6,
    "Leshy": 8,
    "Orc": 10,
    "Ratfolk": 6,
    "Tengu": 6,
}

ANCESTRY_SPEEDS: dict[str, int] = {
    "Catfolk": 25,
    "Dwarf": 20,
    "Elf": 30,
    "Gnome": 25,
    "Goblin": 25,
    "Halfling": 25,
    "Human": 25,
    "Kobold": 25,
    "Leshy": 25,
    "Orc": 25,
    "Ratfolk": 25,
    "Tengu": 25,
}


def get_ancestry_hit_points(ancestry: str | None) -> int:
    """Get the flat hit points granted by an ancestry."""
    return _lookup(ANCESTRY_HIT_POINTS, ancestry, DEFAULT_ANCESTRY_HP)


def get_ancestry_speed(ancestry: str | None, default: int) -> int:
    """Get the base land speed of an ancestry, or ``default`` if unknown."""
    return _lookup(ANCESTRY_SPEEDS, ancestry, default)


def _lookup(table: dict[str, int], name: str | None, default: int) -> int:
    if not name:
        return default
    key = name.strip().lower()
    for entry, value in table.items():
        if entry.lower() == key:
            return value
    return default


# =============================================================================
# Feat Slot Progression
# =============================================================================

ANCESTRY_FEAT_LEVELS: tuple[int, ...] = (1, 5, 9, 13, 17)
GENERAL_FEAT_LEVELS: tuple[int, ...] = (3, 7, 11, 15, 19)


def get_standard_feat_slots(level: int) -> list[tuple[str, int]]:
    """Get the standard (slot type, level) pairs earned up to a level.

    Ancestry feats at 1/5/9/13/17, class feats at 1 and every even level,
    skill feats at every even level, general feats at 3/7/11/15/19.

    Args:
        level: Character level.

    Returns:
        Slot pairs ordered by slot type, then level.
    """
    slots: list[tuple[str, int]] = []
    slots.extend((ANCESTRY_SLOT, lvl) for lvl in ANCESTRY_FEAT_LEVELS if lvl <= level)
    slots.extend(
        (CLASS_SLOT, lvl) for lvl in range(1, level + 1) if lvl == 1 or lvl % 2 == 0
    )
    slots.extend((SKILL_SLOT, lvl) for lvl in range(2, level + 1, 2))
    slots.extend((GENERAL_SLOT, lvl) for lvl in GENERAL_FEAT_LEVELS if lvl <= level)
    return slots


__all__ = [
    "calculate_modifier",
    "get_max_proficiency_rank",
    "get_proficiency_bonus",
    "CLASS_HIT_POINTS",
    "get_class_hit_points",
    "ANCESTRY_HIT_POINTS",
    "ANCESTRY_SPEEDS",
    "get_ancestry_hit_points",
    "get_ancestry_speed",
    "ANCESTRY_FEAT_LEVELS",
    "GENERAL_FEAT_LEVELS",
    "get_standard_feat_slots",
]
