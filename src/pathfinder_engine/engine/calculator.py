"""Full character evaluation.

CharacterCalculator turns a snapshot plus its modifiers into a
CalculatedCharacter. The order inside one calculation is fixed:

    1. ModifierEngine: baseline, stacking, dependency propagation
    2. Seed the aggregate (scores, proficiencies, standard feat slots)
    3. on_scores hooks, then refresh ability modifiers and bulk limits
    4. on_proficiency hooks, then derive proficiency bonuses and combat stats
    5. on_feats hooks
    6. on_slots hooks, then place feat selections into slots
    7. Compute carried bulk, then on_encumbrance hooks
    8. on_validation hooks
    9. Structural validation pass

Each call builds its own aggregate and shares no mutable state with other
calls, so calculate_batch can fan characters out to worker threads.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from uuid import UUID

from pathfinder_engine.core.config import Settings, get_settings
from pathfinder_engine.core.constants import (
    BASE_ARMOR_CLASS,
    ENCUMBERED_BULK_BASE,
    MAX_BULK_BASE,
)
from pathfinder_engine.core.exceptions import InvalidCharacterError
from pathfinder_engine.core.logging import bound_context, get_logger
from pathfinder_engine.engine.base_stats import BaseStatProvider
from pathfinder_engine.engine.dependencies import get_key_ability
from pathfinder_engine.engine.modifier_engine import ModifierEngine
from pathfinder_engine.engine.pipeline import RulePipeline
from pathfinder_engine.engine.rule_modules.registry import (
    RuleModuleRegistry,
    create_default_registry,
)
from pathfinder_engine.engine.validation import ValidationService
from pathfinder_engine.models.calculated import CalculatedCharacter, FeatSlot
from pathfinder_engine.models.catalogue import FeatRepository
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import (
    SKILL_TARGETS,
    Ability,
    HookPhase,
    ModifierTarget,
    ValidationSeverity,
    VariantRuleType,
)
from pathfinder_engine.models.modifiers import CalculatedCharacterStats, Modifier
from pathfinder_engine.models.progression import (
    get_proficiency_bonus,
    get_standard_feat_slots,
)


logger = get_logger(__name__)

_SAVES: tuple[tuple[ModifierTarget, Ability, str], ...] = (
    (ModifierTarget.FORTITUDE_SAVE, Ability.CON, "fortitude_save"),
    (ModifierTarget.REFLEX_SAVE, Ability.DEX, "reflex_save"),
    (ModifierTarget.WILL_SAVE, Ability.WIS, "will_save"),
)

_SKILLS: tuple[ModifierTarget, ...] = tuple(
    target
    for target in ModifierTarget
    if target in SKILL_TARGETS and target != ModifierTarget.PERCEPTION
)


class CharacterCalculator:
    """Evaluate characters against their active variant rules.

    Args:
        settings: Engine settings; defaults to get_settings().
        registry: Rule modules to choose from; defaults to the four
            built-in modules.
        catalogue: Feat repository for catalogue-backed checks.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        registry: RuleModuleRegistry | None = None,
        catalogue: FeatRepository | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or create_default_registry(catalogue)
        self._base_stats = BaseStatProvider(self._settings)
        self._modifier_engine = ModifierEngine(self._settings, self._base_stats)
        self._validation = ValidationService(self._settings, catalogue)

    @property
    def registry(self) -> RuleModuleRegistry:
        return self._registry

    # =========================================================================
    # Public API
    # =========================================================================

    def calculate(
        self,
        character: Character,
        modifiers: Sequence[Modifier] = (),
        *,
        variant_rules: Iterable[VariantRuleType] | None = None,
    ) -> CalculatedCharacter:
        """Run a full evaluation.

        Args:
            character: The character snapshot.
            modifiers: Active modifiers from items, feats and rules.
            variant_rules: Rules to apply instead of the snapshot's own.

        Returns:
            A fresh CalculatedCharacter.

        Raises:
            InvalidCharacterError: If no character is given.
        """
        if character is None:
            raise InvalidCharacterError("Cannot calculate without a character")

        rules = set(character.variant_rules if variant_rules is None else variant_rules)
        with bound_context(character_id=str(character.id), character_name=character.name):
            return self._evaluate(character, modifiers, rules)

    def _evaluate(
        self,
        character: Character,
        modifiers: Sequence[Modifier],
        rules: set[VariantRuleType],
    ) -> CalculatedCharacter:
        modules = self._registry.get_active_modules(rules)
        for conflict in self._registry.validate_module_chain(modules):
            logger.warning("Rule module chain conflict", conflict=conflict)

        pipeline = RulePipeline(modules, self._settings)
        logger.info(
            "Calculating character",
            level=character.level,
            modules=pipeline.module_names,
            modifier_count=len(modifiers),
        )

        stats = self._modifier_engine.calculate_character_stats(character, modifiers)
        calculated = self._seed(character, stats)

        pipeline.run_phase(HookPhase.SCORES, character, calculated)
        self._refresh_scores(calculated)

        pipeline.run_phase(HookPhase.PROFICIENCY, character, calculated)
        self._derive_combat_stats(character, calculated, stats)

        pipeline.run_phase(HookPhase.FEATS, character, calculated)

        pipeline.run_phase(HookPhase.SLOTS, character, calculated)
        self._assign_feats(character, calculated)

        self._compute_encumbrance(character, calculated)
        pipeline.run_phase(HookPhase.ENCUMBRANCE, character, calculated)

        pipeline.run_phase(HookPhase.VALIDATION, character, calculated)
        calculated.validation_issues.extend(
            self._validation.check_calculated(calculated, character)
        )

        logger.info(
            "Character calculated",
            is_valid=calculated.is_valid,
            errors=len(calculated.issues_by_severity(ValidationSeverity.ERROR)),
            warnings=len(calculated.issues_by_severity(ValidationSeverity.WARNING)),
        )
        return calculated

    def calculate_stats(
        self, character: Character, modifiers: Sequence[Modifier] = ()
    ) -> CalculatedCharacterStats:
        """Run only the attribute-oriented modifier calculation."""
        return self._modifier_engine.calculate_character_stats(character, modifiers)

    def calculate_batch(
        self,
        characters: Sequence[Character],
        modifiers_by_character: Mapping[UUID, Sequence[Modifier]] | None = None,
    ) -> list[CalculatedCharacter]:
        """Calculate many characters in parallel.

        Each character gets its own calculation on a worker thread. Results
        come back in input order.

        Args:
            characters: Snapshots to evaluate.
            modifiers_by_character: Modifiers per character id.

        Returns:
            One CalculatedCharacter per input, in the same order.
        """
        if not characters:
            return []
        modifiers_by_character = modifiers_by_character or {}
        max_workers = min(self._settings.engine.batch_max_workers, len(characters))
        logger.info("Calculating batch", count=len(characters), max_workers=max_workers)

        results: dict[int, CalculatedCharacter] = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_index = {
                executor.submit(
                    self.calculate,
                    character,
                    modifiers_by_character.get(character.id, ()),
                ): index
                for index, character in enumerate(characters)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        return [results[index] for index in range(len(characters))]

    # =========================================================================
    # Stages
    # =========================================================================

    def _seed(
        self, character: Character, stats: CalculatedCharacterStats
    ) -> CalculatedCharacter:
        calculated = CalculatedCharacter(
            id=character.id,
            name=character.name,
            level=character.level,
            class_name=character.class_name,
            subclass_name=character.subclass_name,
            background_name=character.background or None,
            ancestry_name=character.ancestry or None,
            proficiencies=dict(character.proficiencies),
            selected_feats=[sel.feat_id for sel in character.feat_selections],
        )
        for ability in Ability:
            calculated.set_ability_score(ability, stats.get_final_value(ability.target))

        for slot_type, level in get_standard_feat_slots(character.level):
            calculated.get_slots(slot_type).append(
                FeatSlot(slot_type=slot_type, level=level, category=slot_type)
            )

        for target, warnings in stats.validation_warnings.items():
            for warning in warnings:
                calculated.add_issue(
                    ValidationSeverity.WARNING,
                    "Modifiers",
                    warning,
                    data={"target": target.value},
                )
        return calculated

    def _refresh_scores(self, calculated: CalculatedCharacter) -> None:
        calculated.refresh_ability_modifiers()
        strength = calculated.get_ability_modifier(Ability.STR)
        calculated.bulk_limit = ENCUMBERED_BULK_BASE + strength
        calculated.max_bulk = MAX_BULK_BASE + strength

    def _derive_combat_stats(
        self,
        character: Character,
        calculated: CalculatedCharacter,
        stats: CalculatedCharacterStats,
    ) -> None:
        level = calculated.level
        for target, rank in calculated.proficiencies.items():
            calculated.proficiency_bonuses.setdefault(target, get_proficiency_bonus(rank, level))

        def proficiency(target: ModifierTarget) -> int:
            return calculated.proficiency_bonuses.get(target, 0)

        def total(target: ModifierTarget, ability: Ability) -> int:
            return (
                calculated.get_ability_modifier(ability)
                + proficiency(target)
                + stats.get_modifier(target)
            )

        for skill in _SKILLS:
            calculated.skills[skill] = total(skill, get_key_ability(skill) or Ability.INT)

        for target, ability, field in _SAVES:
            setattr(calculated, field, total(target, ability))

        calculated.perception = total(ModifierTarget.PERCEPTION, Ability.WIS)
        calculated.initiative = calculated.get_ability_modifier(Ability.DEX) + stats.get_modifier(
            ModifierTarget.INITIATIVE
        )
        calculated.armor_class = BASE_ARMOR_CLASS + total(ModifierTarget.ARMOR_CLASS, Ability.DEX)
        calculated.hit_points = self._base_stats.base_hit_points(
            character, calculated.get_ability_modifier(Ability.CON)
        ) + stats.get_modifier(ModifierTarget.HIT_POINTS)
        calculated.speed = stats.base_stats.get(
            ModifierTarget.SPEED, self._settings.engine.default_base_speed
        ) + stats.get_modifier(ModifierTarget.SPEED)

    def _assign_feats(self, character: Character, calculated: CalculatedCharacter) -> None:
        slot_types = {key.lower(): key for key in calculated.feat_slots}
        for selection in character.feat_selections:
            key = slot_types.get(selection.slot_type.lower())
            slots = calculated.feat_slots.get(key, []) if key else []
            slot = next(
                (s for s in slots if s.level == selection.level and not s.is_filled),
                None,
            )
            if slot is None:
                calculated.add_issue(
                    ValidationSeverity.WARNING,
                    "Feat Slots",
                    f"No open {selection.slot_type} feat slot at level {selection.level} "
                    f"for {selection.feat_id}",
                    data={
                        "feat_id": selection.feat_id,
                        "slot_type": selection.slot_type,
                        "level": selection.level,
                    },
                )
                continue
            slot.selected_feat_id = selection.feat_id

    def _compute_encumbrance(self, character: Character, calculated: CalculatedCharacter) -> None:
        carried = sum(item.total_bulk for item in character.equipment)
        calculated.carried_bulk = round(carried, 2)
        calculated.current_bulk = math.floor(calculated.carried_bulk)
        calculated.is_encumbered = calculated.current_bulk > calculated.bulk_limit


__all__ = ["CharacterCalculator"]
