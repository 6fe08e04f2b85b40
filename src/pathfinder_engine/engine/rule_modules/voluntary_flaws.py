"""Voluntary Flaws variant rule.

Each chosen flaw lowers an ability score by 2. Flaws on an ability are meant
to come in pairs, and each pair earns one extra ability boost. Pairing is
checked per ability
and the pending boosts are reported, but the boost itself is chosen by the
player outside the engine and is not applied here.
"""

from __future__ import annotations

from collections import Counter

from pathfinder_engine.core.constants import VOLUNTARY_FLAW_FLOOR, VOLUNTARY_FLAW_PENALTY
from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.models.calculated import CalculatedCharacter, FixAction
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import (
    FixActionKind,
    ValidationSeverity,
    VariantRuleType,
)


CATEGORY = "Voluntary Flaws"


class VoluntaryFlawsModule(RuleModule):
    """Apply voluntary ability flaws early so every later phase sees them."""

    name = "Voluntary Flaws"
    priority = 10
    rule_type = VariantRuleType.VOLUNTARY_FLAWS

    def on_scores(self, character: Character, calculated: CalculatedCharacter) -> None:
        for flaw in character.voluntary_flaws:
            current = calculated.ability_scores.get(
                flaw.ability, character.get_ability_score(flaw.ability)
            )
            calculated.set_ability_score(flaw.ability, current - VOLUNTARY_FLAW_PENALTY)

    def on_validation(self, character: Character, calculated: CalculatedCharacter) -> None:
        flaws = character.voluntary_flaws
        if not flaws:
            return

        counts = Counter(flaw.ability for flaw in flaws)
        for ability, count in counts.items():
            score = calculated.ability_scores.get(ability, character.get_ability_score(ability))
            if score < VOLUNTARY_FLAW_FLOOR:
                calculated.add_issue(
                    ValidationSeverity.ERROR,
                    CATEGORY,
                    f"{ability.full_name} cannot be reduced below {VOLUNTARY_FLAW_FLOOR}",
                    fix_action=FixAction(
                        kind=FixActionKind.REMOVE_VOLUNTARY_FLAW, target=ability.value
                    ),
                    data={"ability": ability.value, "score": score},
                )

            if count % 2:
                calculated.add_issue(
                    ValidationSeverity.WARNING,
                    CATEGORY,
                    f"Unpaired voluntary flaw in {ability.full_name}. Each pair of "
                    "voluntary flaws grants one additional ability boost.",
                    fix_action=FixAction(
                        kind=FixActionKind.ADD_VOLUNTARY_FLAW, target=ability.value
                    ),
                    data={"ability": ability.value, "flaw_count": count},
                )

        total = len(flaws)
        boosts = total // 2
        calculated.add_issue(
            ValidationSeverity.INFO,
            CATEGORY,
            f"Voluntary flaws grant {boosts} additional ability boost(s)",
            data={
                "total_flaws": total,
                "additional_boosts": boosts,
                "flaws": [flaw.ability.value for flaw in flaws],
            },
        )


__all__ = ["VoluntaryFlawsModule"]
