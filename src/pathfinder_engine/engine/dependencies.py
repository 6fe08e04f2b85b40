"""Ability score dependency propagation.

When an ability score's modifier changes between the baseline and the
final value, every stat keyed off that ability moves by the same delta.
Propagation must run exactly once per calculation, after all modifiers
targeting ability scores have been resolved.
"""

from __future__ import annotations

from types import MappingProxyType

from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.models.enums import Ability, ModifierTarget
from pathfinder_engine.models.progression import calculate_modifier


logger = get_logger(__name__)


ABILITY_DEPENDENCIES: MappingProxyType[Ability, tuple[ModifierTarget, ...]] = MappingProxyType(
    {
        Ability.STR: (ModifierTarget.ATHLETICS,),
        Ability.DEX: (
            ModifierTarget.INITIATIVE,
            ModifierTarget.REFLEX_SAVE,
            ModifierTarget.ACROBATICS,
            ModifierTarget.STEALTH,
            ModifierTarget.THIEVERY,
        ),
        Ability.CON: (ModifierTarget.FORTITUDE_SAVE,),
        Ability.INT: (
            ModifierTarget.ARCANA,
            ModifierTarget.CRAFTING,
            ModifierTarget.OCCULTISM,
            ModifierTarget.SOCIETY,
        ),
        Ability.WIS: (
            ModifierTarget.WILL_SAVE,
            ModifierTarget.MEDICINE,
            ModifierTarget.NATURE,
            ModifierTarget.PERCEPTION,
            ModifierTarget.RELIGION,
            ModifierTarget.SURVIVAL,
        ),
        Ability.CHA: (
            ModifierTarget.DECEPTION,
            ModifierTarget.DIPLOMACY,
            ModifierTarget.INTIMIDATION,
            ModifierTarget.PERFORMANCE,
        ),
    }
)


def get_dependents(ability: Ability) -> tuple[ModifierTarget, ...]:
    """Get the stats keyed off an ability."""
    return ABILITY_DEPENDENCIES.get(ability, ())


def get_key_ability(target: ModifierTarget) -> Ability | None:
    """Get the ability a stat is keyed off, if any."""
    for ability, dependents in ABILITY_DEPENDENCIES.items():
        if target in dependents:
            return ability
    return None


def propagate(
    base_stats: dict[ModifierTarget, int],
    final_stats: dict[ModifierTarget, int],
) -> dict[Ability, int]:
    """Push ability modifier changes into dependent stats.

    ``final_stats`` is updated in place.

    Args:
        base_stats: Values before modifiers, including the six abilities.
        final_stats: Values after stacking, updated in place.

    Returns:
        The non-zero modifier delta applied per ability.
    """
    applied: dict[Ability, int] = {}
    for ability, dependents in ABILITY_DEPENDENCIES.items():
        target = ability.target
        if target not in base_stats:
            continue

        base_modifier = calculate_modifier(base_stats[target])
        final_modifier = calculate_modifier(final_stats.get(target, base_stats[target]))
        delta = final_modifier - base_modifier
        if delta == 0:
            continue

        for dependent in dependents:
            final_stats[dependent] = final_stats.get(dependent, 0) + delta
        applied[ability] = delta
        logger.debug(
            "Propagated ability modifier change",
            ability=ability.value,
            delta=delta,
            dependents=len(dependents),
        )
    return applied


__all__ = [
    "ABILITY_DEPENDENCIES",
    "get_dependents",
    "get_key_ability",
    "propagate",
]
