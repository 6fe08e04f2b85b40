"""Baseline stats before any custom modifier.

The provider knows nothing about modifiers or rule modules. It reads the
snapshot's starting scores and the progression tables, nothing else.
"""

from __future__ import annotations

from pathfinder_engine.core.config import Settings, get_settings
from pathfinder_engine.core.constants import BASE_ARMOR_CLASS
from pathfinder_engine.engine.dependencies import ABILITY_DEPENDENCIES
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import Ability, ModifierTarget
from pathfinder_engine.models.progression import (
    calculate_modifier,
    get_ancestry_hit_points,
    get_ancestry_speed,
    get_class_hit_points,
)


class BaseStatProvider:
    """Derive the unmodified baseline for a character."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def get_base_stats(self, character: Character) -> dict[ModifierTarget, int]:
        """Compute baseline values keyed by target.

        Abilities come straight from the snapshot (10 when absent). AC is
        10 plus the Dexterity modifier, hit points follow the ancestry and
        class tables, and every stat in the dependency table is seeded
        from its key ability modifier.
        """
        stats: dict[ModifierTarget, int] = {}
        modifiers: dict[Ability, int] = {}
        for ability in Ability:
            score = character.get_ability_score(ability)
            stats[ability.target] = score
            modifiers[ability] = calculate_modifier(score)

        stats[ModifierTarget.ARMOR_CLASS] = BASE_ARMOR_CLASS + modifiers[Ability.DEX]
        stats[ModifierTarget.HIT_POINTS] = self.base_hit_points(
            character, modifiers[Ability.CON]
        )
        stats[ModifierTarget.SPEED] = get_ancestry_speed(
            character.ancestry, self._settings.engine.default_base_speed
        )

        for ability, dependents in ABILITY_DEPENDENCIES.items():
            for target in dependents:
                stats[target] = modifiers[ability]

        return stats

    def base_hit_points(self, character: Character, con_modifier: int) -> int:
        """Ancestry hit points plus (class hit points + Con) per level."""
        per_level = get_class_hit_points(character.class_name) + con_modifier
        return get_ancestry_hit_points(character.ancestry) + per_level * max(character.level, 0)


__all__ = ["BaseStatProvider"]
