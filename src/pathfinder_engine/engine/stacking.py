"""Typed bonus and penalty stacking.

Untyped modifiers always stack. For any other type only the largest bonus
and the most severe penalty apply; the rest are suppressed and reported.

Example:
    >>> from pathfinder_engine.models import Modifier, ModifierTarget, ModifierType
    >>> mods = [
    ...     Modifier(target=ModifierTarget.STRENGTH, value=1,
    ...              modifier_type=ModifierType.ITEM, source_name="Gloves"),
    ...     Modifier(target=ModifierTarget.STRENGTH, value=3,
    ...              modifier_type=ModifierType.ITEM, source_name="Belt"),
    ... ]
    >>> resolve(mods).total_value
    3
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.models.enums import ModifierType
from pathfinder_engine.models.modifiers import Modifier, ModifierResult, ModifierSource


logger = get_logger(__name__)


def resolve(modifiers: Iterable[Modifier]) -> ModifierResult:
    """Resolve every modifier for one target into a net value.

    Inactive and zero-valued modifiers are ignored. Each type group is
    stably sorted by ascending priority, so among equal maximum bonuses
    the first one in that order is the one applied.

    Args:
        modifiers: Modifiers that all address the same target.

    Returns:
        The net total, one warning per conflicting bonus or penalty group,
        and the applied and suppressed sources.
    """
    relevant = sorted(
        (m for m in modifiers if m.active and m.value != 0),
        key=lambda m: m.priority,
    )

    groups: dict[ModifierType, list[Modifier]] = {}
    for modifier in relevant:
        groups.setdefault(modifier.modifier_type, []).append(modifier)

    result = ModifierResult()
    for modifier_type, group in groups.items():
        if modifier_type == ModifierType.UNTYPED:
            result.total_value += sum(m.value for m in group)
            result.applied.extend(ModifierSource.from_modifier(m) for m in group)
            continue

        bonuses = [m for m in group if m.value > 0]
        penalties = [m for m in group if m.value < 0]
        _apply_best(result, modifier_type, bonuses, pick=max, kind="bonuses", rule="highest")
        _apply_best(result, modifier_type, penalties, pick=min, kind="penalties", rule="worst")

    return result


def _apply_best(
    result: ModifierResult,
    modifier_type: ModifierType,
    candidates: list[Modifier],
    *,
    pick: Callable[..., Modifier],
    kind: str,
    rule: str,
) -> None:
    if not candidates:
        return

    # max()/min() return the first extreme element, which keeps priority order.
    best = pick(candidates, key=lambda m: m.value)
    result.total_value += best.value
    result.applied.append(ModifierSource.from_modifier(best))

    if len(candidates) == 1:
        return

    dropped = [m for m in candidates if m is not best]
    result.suppressed.extend(ModifierSource.from_modifier(m) for m in dropped)
    names = ", ".join(m.source_name for m in candidates)
    suppressed = ", ".join(_labelled(m) for m in dropped)
    result.stacking_warnings.append(
        f"Multiple {modifier_type.display_name} {kind} from: {names}. "
        f"Only the {rule} applies: {_labelled(best)}; suppressed: {suppressed}."
    )
    logger.debug(
        "Stacking suppressed modifiers",
        modifier_type=modifier_type.value,
        kept=best.source_name,
        suppressed=[m.source_name for m in dropped],
    )


def _labelled(modifier: Modifier) -> str:
    return f"{modifier.source_name} ({modifier.value:+d})"


__all__ = ["resolve"]
