"""Automatic Bonus Progression variant rule.

ABP replaces item potency runes with level-keyed bonuses. The pipeline
only posts a notice; the lookups below are pure functions callers use
when building attack, damage and defense numbers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.models.calculated import CalculatedCharacter
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import ValidationSeverity, VariantRuleType


# =============================================================================
# Level Lookups
# =============================================================================

# (minimum level, bonus), highest threshold first
_ATTACK_POTENCY = ((16, 3), (10, 2), (4, 1))
_ARMOR_POTENCY = ((18, 3), (11, 2), (5, 1))
_RESILIENT = ((17, 3), (11, 2), (8, 1))
_STRIKING = ((19, 3), (12, 2), (4, 1))


def _by_level(table: tuple[tuple[int, int], ...], level: int) -> int:
    for min_level, bonus in table:
        if level >= min_level:
            return bonus
    return 0


def get_attack_potency_bonus(level: int) -> int:
    """Item bonus to attack rolls at a level."""
    return _by_level(_ATTACK_POTENCY, level)


def get_armor_potency_bonus(level: int) -> int:
    """Item bonus to AC at a level."""
    return _by_level(_ARMOR_POTENCY, level)


def get_resilient_bonus(level: int) -> int:
    """Item bonus to saving throws at a level."""
    return _by_level(_RESILIENT, level)


def get_striking_dice(level: int) -> int:
    """Extra weapon damage dice at a level (striking, greater, major)."""
    return _by_level(_STRIKING, level)


class AutomaticBonuses(BaseModel):
    """All ABP bonuses for one level."""

    model_config = ConfigDict(frozen=True)

    level: int
    attack_potency: int
    armor_potency: int
    resilient: int
    striking_dice: int


def get_abp_bonuses(level: int) -> AutomaticBonuses:
    """Bundle every ABP lookup for a level."""
    return AutomaticBonuses(
        level=level,
        attack_potency=get_attack_potency_bonus(level),
        armor_potency=get_armor_potency_bonus(level),
        resilient=get_resilient_bonus(level),
        striking_dice=get_striking_dice(level),
    )


# =============================================================================
# Module
# =============================================================================


class AutomaticBonusProgressionModule(RuleModule):
    """Announce ABP; the bonuses themselves are applied by callers."""

    name = "Automatic Bonus Progression"
    priority = 100
    rule_type = VariantRuleType.AUTOMATIC_BONUS_PROGRESSION

    def on_validation(self, character: Character, calculated: CalculatedCharacter) -> None:
        calculated.add_issue(
            ValidationSeverity.INFO,
            "Automatic Bonus Progression",
            "Item bonuses to AC, attack rolls, and damage are replaced by automatic bonuses",
            data=get_abp_bonuses(calculated.level).model_dump(),
        )


__all__ = [
    "get_attack_potency_bonus",
    "get_armor_potency_bonus",
    "get_resilient_bonus",
    "get_striking_dice",
    "AutomaticBonuses",
    "get_abp_bonuses",
    "AutomaticBonusProgressionModule",
]
