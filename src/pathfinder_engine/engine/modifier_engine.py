"""Attribute-oriented modifier calculation.

Control flow for one call: baseline stats, then stacking per target for
every active modifier, then a single dependency propagation pass. Each
call builds a fresh CalculatedCharacterStats and touches no shared state.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pathfinder_engine.core.config import Settings, get_settings
from pathfinder_engine.core.exceptions import InvalidCharacterError
from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.engine.base_stats import BaseStatProvider
from pathfinder_engine.engine.dependencies import propagate
from pathfinder_engine.engine.stacking import resolve
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import ModifierTarget
from pathfinder_engine.models.modifiers import (
    CalculatedCharacterStats,
    Modifier,
    ModifierResult,
    ModifierSource,
)


logger = get_logger(__name__)


def group_by_target(modifiers: Iterable[Modifier]) -> dict[ModifierTarget, list[Modifier]]:
    """Group active modifiers by target, in ModifierTarget declaration order."""
    grouped: dict[ModifierTarget, list[Modifier]] = {}
    for modifier in modifiers:
        if modifier.active:
            grouped.setdefault(modifier.target, []).append(modifier)
    return {target: grouped[target] for target in ModifierTarget if target in grouped}


class ModifierEngine:
    """Apply custom modifiers on top of a character's baseline.

    Example:
        >>> engine = ModifierEngine()
        >>> stats = engine.calculate_character_stats(character, modifiers)
        >>> stats.get_final_value(ModifierTarget.STRENGTH)
        20
    """

    def __init__(
        self,
        settings: Settings | None = None,
        base_stat_provider: BaseStatProvider | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._base_stats = base_stat_provider or BaseStatProvider(self._settings)

    def calculate_character_stats(
        self,
        character: Character,
        modifiers: Sequence[Modifier] = (),
    ) -> CalculatedCharacterStats:
        """Calculate base and final stats for a character.

        Args:
            character: The character snapshot.
            modifiers: Every modifier contributed by items, feats and rules.
                Inactive ones are ignored.

        Returns:
            A fresh CalculatedCharacterStats.

        Raises:
            InvalidCharacterError: If no character is given.
        """
        if character is None:
            raise InvalidCharacterError("Cannot calculate stats without a character")

        base = self._base_stats.get_base_stats(character)
        stats = CalculatedCharacterStats(
            character_id=character.id,
            base_stats=dict(base),
            final_stats=dict(base),
        )

        for target, group in group_by_target(modifiers).items():
            result = resolve(group)
            stats.modifiers[target] = result
            stats.modifier_sources[target] = [ModifierSource.from_modifier(m) for m in group]
            stats.final_stats[target] = stats.final_stats.get(target, 0) + result.total_value
            if result.stacking_warnings:
                stats.validation_warnings[target] = list(result.stacking_warnings)

        propagate(stats.base_stats, stats.final_stats)

        logger.debug(
            "Calculated character stats",
            character_id=str(character.id),
            modifier_count=len(modifiers),
            modified_targets=len(stats.modifiers),
            warning_targets=len(stats.validation_warnings),
        )
        return stats

    def calculate_target(self, modifiers: Iterable[Modifier]) -> ModifierResult:
        """Resolve the stacking for a single target's modifiers."""
        return resolve(modifiers)

    def find_stacking_conflicts(
        self, modifiers: Iterable[Modifier]
    ) -> dict[ModifierTarget, list[str]]:
        """Report stacking conflicts per target without computing stats."""
        conflicts: dict[ModifierTarget, list[str]] = {}
        for target, group in group_by_target(modifiers).items():
            warnings = resolve(group).stacking_warnings
            if warnings:
                conflicts[target] = warnings
        return conflicts


__all__ = ["ModifierEngine", "group_by_target"]
