"""Structural validation of characters.

Runs after the rule pipeline and checks things no single rule module owns:
required fields, level and score ranges, proficiency ceilings, feat slot
fill status, catalogue-backed feat legality, combat stat plausibility and
equipment. Nothing here raises for a rules problem; every finding is a
ValidationIssue and ``is_valid`` means "no Error-severity issue".

Catalogue misses are caught where the lookup happens and reported as
Error issues so the remaining checks still run.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from pathfinder_engine.core.config import Settings, get_settings
from pathfinder_engine.core.constants import (
    BASE_ARMOR_CLASS,
    EXCESS_FEAT_FACTOR,
    MAX_ABILITY_SCORE,
    MAX_CHARACTER_LEVEL,
    MIN_ABILITY_SCORE,
    MIN_CHARACTER_LEVEL,
    NEAR_LIMIT_RATIO,
)
from pathfinder_engine.core.exceptions import CatalogueError
from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.models.calculated import (
    CalculatedCharacter,
    ValidationIssue,
    ValidationReport,
)
from pathfinder_engine.models.catalogue import FeatRepository, Prerequisite
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import (
    Ability,
    ModifierTarget,
    PrerequisiteType,
    ProficiencyRank,
    ValidationSeverity,
)
from pathfinder_engine.models.progression import get_max_proficiency_rank


logger = get_logger(__name__)


class _IssueList(list[ValidationIssue]):
    """List of issues with shorthand appenders."""

    def error(
        self, category: str, message: str, *, recommendation: str | None = None, **data: object
    ) -> None:
        self.append(_issue(ValidationSeverity.ERROR, category, message, recommendation, data))

    def warning(
        self, category: str, message: str, *, recommendation: str | None = None, **data: object
    ) -> None:
        self.append(_issue(ValidationSeverity.WARNING, category, message, recommendation, data))

    def info(
        self, category: str, message: str, *, recommendation: str | None = None, **data: object
    ) -> None:
        self.append(_issue(ValidationSeverity.INFO, category, message, recommendation, data))


def _issue(
    severity: ValidationSeverity,
    category: str,
    message: str,
    recommendation: str | None,
    data: dict[str, object],
) -> ValidationIssue:
    return ValidationIssue(
        severity=severity,
        category=category,
        message=message,
        recommendation=recommendation,
        data=data,
    )


class ValidationService:
    """Structural and catalogue-backed character checks.

    Args:
        settings: Validation thresholds; defaults to get_settings().
        catalogue: Feat repository used for feat and prerequisite checks.
            Without one, selected feats are not checked against reference data.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        catalogue: FeatRepository | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._catalogue = catalogue

    # =========================================================================
    # Public API
    # =========================================================================

    def check_calculated(
        self,
        calculated: CalculatedCharacter,
        character: Character | None = None,
    ) -> list[ValidationIssue]:
        """Run every structural check against a calculated character.

        Args:
            calculated: The aggregate after all rule module phases.
            character: The snapshot it was built from. Enables the
                missing-score and equipment checks.

        Returns:
            New issues only. Issues already on the aggregate are untouched.
        """
        issues = _IssueList()
        self._check_basic_info(
            issues,
            name=calculated.name,
            level=calculated.level,
            ancestry=calculated.ancestry_name,
            background=calculated.background_name,
            class_name=calculated.class_name,
        )
        if character is not None:
            for ability in character.missing_abilities():
                issues.error(
                    "Ability Scores",
                    f"Missing {ability.full_name} score",
                    ability=ability.value,
                )
        self._check_ability_scores(issues, calculated.ability_scores, calculated.level)
        self._check_proficiencies(issues, calculated.proficiencies, calculated.level)
        self._check_feat_slots(issues, calculated)
        self._check_feat_count(issues, calculated)
        self._check_selected_feats(issues, calculated)
        self._check_combat_stats(issues, calculated)
        self._check_encumbrance(issues, calculated)
        if character is not None:
            self._check_equipment(issues, character)
        return list(issues)

    def validate_calculated_character(
        self,
        calculated: CalculatedCharacter,
        character: Character | None = None,
    ) -> ValidationReport:
        """Merge the aggregate's own issues with a fresh structural pass."""
        issues = list(calculated.validation_issues)
        issues.extend(self.check_calculated(calculated, character))
        return ValidationReport(
            issues=issues,
            validated_entity_id=str(calculated.id),
            validated_entity_type="CalculatedCharacter",
        )

    def validate_character(self, character: Character) -> ValidationReport:
        """Check a raw snapshot without calculating it."""
        issues = _IssueList()
        self._check_basic_info(
            issues,
            name=character.name,
            level=character.level,
            ancestry=character.ancestry,
            background=character.background,
            class_name=character.class_name,
        )
        for ability in character.missing_abilities():
            issues.error(
                "Ability Scores", f"Missing {ability.full_name} score", ability=ability.value
            )
        self._check_ability_scores(issues, character.ability_scores, character.level)
        self._check_proficiencies(issues, character.proficiencies, character.level)
        self._check_equipment(issues, character)
        return ValidationReport(
            issues=list(issues),
            validated_entity_id=str(character.id),
            validated_entity_type="Character",
        )

    def validate_ability_score_array(
        self, scores: dict[Ability, int], level: int
    ) -> ValidationReport:
        """Check a standalone set of ability scores."""
        issues = _IssueList()
        for ability in Ability:
            if ability not in scores:
                issues.error(
                    "Ability Scores", f"Missing {ability.full_name} score", ability=ability.value
                )
        self._check_ability_scores(issues, scores, level)
        return ValidationReport(issues=list(issues), validated_entity_type="AbilityScores")

    def validate_prerequisites(
        self,
        prerequisites: Iterable[Prerequisite],
        calculated: CalculatedCharacter,
    ) -> ValidationReport:
        """Check prerequisites against a calculated character."""
        issues = _IssueList()
        self._check_prerequisites(issues, prerequisites, calculated)
        return ValidationReport(
            issues=list(issues),
            validated_entity_id=str(calculated.id),
            validated_entity_type="Prerequisites",
        )

    def validate_feat_selection(
        self,
        feat_id: str,
        calculated: CalculatedCharacter,
    ) -> ValidationReport:
        """Check whether a new feat can be selected."""
        issues = _IssueList()
        self._check_feat(issues, feat_id, calculated, is_new=True)
        return ValidationReport(
            issues=list(issues),
            validated_entity_id=feat_id,
            validated_entity_type="FeatSelection",
        )

    def validate_equipment_load(self, calculated: CalculatedCharacter) -> ValidationReport:
        """Check encumbrance and suggest trimming a load near the limit."""
        issues = _IssueList()
        self._check_encumbrance(issues, calculated)
        if calculated.bulk_limit > 0 and (
            calculated.carried_bulk > calculated.bulk_limit * NEAR_LIMIT_RATIO
        ):
            issues.info(
                "Equipment",
                "Consider reducing carried equipment to avoid encumbrance penalties",
                current_bulk=calculated.current_bulk,
                bulk_limit=calculated.bulk_limit,
            )
        return ValidationReport(
            issues=list(issues),
            validated_entity_id=str(calculated.id),
            validated_entity_type="Equipment",
        )

    # =========================================================================
    # Checks
    # =========================================================================

    def _check_basic_info(
        self,
        issues: _IssueList,
        *,
        name: str | None,
        level: int,
        ancestry: str | None,
        background: str | None,
        class_name: str | None,
    ) -> None:
        for label, value in (
            ("a name", name),
            ("an ancestry", ancestry),
            ("a background", background),
            ("a class", class_name),
        ):
            if not value or not value.strip():
                issues.error("Character", f"Character must have {label}")

        if not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL:
            issues.error(
                "Character",
                f"Character level must be between {MIN_CHARACTER_LEVEL} and "
                f"{MAX_CHARACTER_LEVEL}",
                level=level,
            )

    def _check_ability_scores(
        self, issues: _IssueList, scores: dict[Ability, int], level: int
    ) -> None:
        soft_min = self._settings.validation.soft_min_ability_score
        soft_max = self._settings.validation.soft_max_ability_score
        for ability in Ability:
            if ability not in scores:
                continue
            score = scores[ability]
            name = ability.full_name
            if score < MIN_ABILITY_SCORE:
                issues.error(
                    "Ability Scores",
                    f"{name} score cannot be less than {MIN_ABILITY_SCORE}",
                    ability=ability.value,
                    score=score,
                )
            elif score > MAX_ABILITY_SCORE:
                issues.error(
                    "Ability Scores",
                    f"{name} score cannot exceed {MAX_ABILITY_SCORE}",
                    ability=ability.value,
                    score=score,
                )

            if level == 1 and score < soft_min:
                issues.warning(
                    "Ability Scores",
                    f"{name} score of {score} is unusually low for a 1st level character",
                    recommendation="Consider if this fits your character concept",
                    ability=ability.value,
                    score=score,
                )
            elif level == 1 and score > soft_max:
                issues.warning(
                    "Ability Scores",
                    f"{name} score of {score} is unusually high for a 1st level character",
                    recommendation=(
                        "Verify this is correct for your ancestry and background bonuses"
                    ),
                    ability=ability.value,
                    score=score,
                )

    def _check_proficiencies(
        self,
        issues: _IssueList,
        proficiencies: dict[ModifierTarget, ProficiencyRank],
        level: int,
    ) -> None:
        max_rank = get_max_proficiency_rank(level)
        for target, rank in proficiencies.items():
            if rank > max_rank:
                issues.warning(
                    "Proficiencies",
                    f"{target.display_name} proficiency ({rank.display_name}) may be too "
                    f"high for level {level}",
                    recommendation="Verify proficiency increases are correctly applied",
                    target=target.value,
                    rank=rank.display_name,
                    max_rank=max_rank.display_name,
                )

    def _check_feat_slots(self, issues: _IssueList, calculated: CalculatedCharacter) -> None:
        for slot in calculated.all_slots():
            if slot.level > calculated.level:
                issues.error(
                    "Feat Slots",
                    f"Feat slot for level {slot.level} cannot be used by level "
                    f"{calculated.level} character",
                    slot_type=slot.slot_type,
                    slot_level=slot.level,
                )
            if slot.is_required and not slot.is_filled:
                issues.warning(
                    "Feat Slots",
                    f"Required {slot.slot_type} feat slot at level {slot.level} is not filled",
                    slot_type=slot.slot_type,
                    slot_level=slot.level,
                )

    def _check_feat_count(self, issues: _IssueList, calculated: CalculatedCharacter) -> None:
        count = len(calculated.selected_feats)
        if not count:
            issues.warning(
                "Feats",
                "Character has no feats selected",
                recommendation="Most characters should have at least some feats by level 2",
            )
            return

        # Rough ceiling: a few feats per two levels.
        ceiling = max(1, calculated.level // 2) * EXCESS_FEAT_FACTOR
        if count > ceiling:
            issues.warning(
                "Feats",
                "Character has an unusually high number of feats",
                recommendation="Verify feat selections are correct",
                feat_count=count,
                expected_max=ceiling,
            )

    def _check_selected_feats(self, issues: _IssueList, calculated: CalculatedCharacter) -> None:
        if self._catalogue is None:
            return
        for feat_id in calculated.selected_feats:
            self._check_feat(issues, feat_id, calculated, is_new=False)

    def _check_feat(
        self,
        issues: _IssueList,
        feat_id: str,
        calculated: CalculatedCharacter,
        *,
        is_new: bool,
    ) -> None:
        if self._catalogue is None:
            issues.warning("Feats", f"No feat catalogue configured; {feat_id} was not checked")
            return

        try:
            feat = self._catalogue.get_feat(feat_id)
        except CatalogueError as exc:
            logger.info("Feat not found in catalogue", feat_id=feat_id, error=str(exc))
            issues.error("Feats", f"Feat {feat_id} not found", feat_id=feat_id)
            return

        if feat.level > calculated.level:
            issues.error(
                "Feats",
                f"Cannot select {feat.name}: requires level {feat.level}, character is "
                f"level {calculated.level}",
                feat_id=feat.id,
            )

        if is_new and any(f.lower() == feat.id.lower() for f in calculated.selected_feats):
            issues.warning(
                "Feats",
                f"{feat.name} is already selected",
                recommendation="Consider selecting a different feat",
                feat_id=feat.id,
            )

        unmet = _IssueList()
        self._check_prerequisites(unmet, feat.prerequisites, calculated)
        if unmet:
            issues.extend(unmet)
            issues.error(
                "Feats",
                f"Cannot select {feat.name}: prerequisites not met",
                feat_id=feat.id,
            )

    def _check_prerequisites(
        self,
        issues: _IssueList,
        prerequisites: Iterable[Prerequisite],
        calculated: CalculatedCharacter,
    ) -> None:
        for prerequisite in prerequisites:
            met = self._evaluate_prerequisite(prerequisite, calculated)
            if met is None:
                issues.error(
                    "Prerequisite",
                    f"Invalid prerequisite: {prerequisite.describe()}",
                    type=prerequisite.type.value,
                    target=prerequisite.target,
                )
            elif not met:
                issues.error(
                    "Prerequisite",
                    f"Prerequisite not met: {prerequisite.describe()}",
                    type=prerequisite.type.value,
                    target=prerequisite.target,
                )

    def _evaluate_prerequisite(
        self, prerequisite: Prerequisite, calculated: CalculatedCharacter
    ) -> bool | None:
        """Return whether a prerequisite holds, or None if it is malformed."""
        op = prerequisite.operator
        match prerequisite.type:
            case PrerequisiteType.ABILITY_SCORE:
                ability = Ability.parse(prerequisite.target)
                if ability is None:
                    return None
                score = calculated.ability_scores.get(ability)
                return score is not None and op.compare(score, prerequisite.value)
            case PrerequisiteType.SKILL:
                target = ModifierTarget.parse(prerequisite.target)
                if target is None:
                    return None
                rank = calculated.proficiencies.get(target, ProficiencyRank.UNTRAINED)
                return op.compare(int(rank), prerequisite.value)
            case PrerequisiteType.LEVEL:
                return op.compare(calculated.level, prerequisite.value)
            case PrerequisiteType.FEAT:
                if not prerequisite.target:
                    return None
                wanted = prerequisite.target.lower()
                return any(f.lower() == wanted for f in calculated.selected_feats)
            case _:
                logger.debug("Unknown prerequisite type passes", type=str(prerequisite.type))
                return True

    def _check_combat_stats(self, issues: _IssueList, calculated: CalculatedCharacter) -> None:
        if calculated.hit_points <= 0:
            issues.error(
                "Combat",
                "Character must have positive hit points",
                hit_points=calculated.hit_points,
            )

        ac = calculated.armor_class
        if ac < BASE_ARMOR_CLASS:
            issues.warning(
                "Combat",
                "Armor Class is very low",
                recommendation="Consider improving armor or dexterity",
                armor_class=ac,
            )

        expected = BASE_ARMOR_CLASS + calculated.level + 2
        if ac < expected - self._settings.validation.ac_low_margin:
            issues.info(
                "Combat",
                "Consider improving AC through armor, shields, or abilities",
                armor_class=ac,
                expected=expected,
            )
        elif ac > expected + self._settings.validation.ac_high_margin:
            issues.warning(
                "Combat",
                f"Armor Class {ac} is unusually high for level {calculated.level}",
                armor_class=ac,
                expected=expected,
            )

    def _check_encumbrance(self, issues: _IssueList, calculated: CalculatedCharacter) -> None:
        if not calculated.is_encumbered:
            return
        issues.warning(
            "Equipment",
            "Character is encumbered",
            recommendation=(
                f"Current bulk: {calculated.current_bulk}, Limit: {calculated.bulk_limit}"
            ),
            current_bulk=calculated.current_bulk,
            bulk_limit=calculated.bulk_limit,
        )
        if calculated.current_bulk > calculated.max_bulk:
            issues.error(
                "Equipment",
                "Character is over maximum bulk limit and cannot move",
                current_bulk=calculated.current_bulk,
                max_bulk=calculated.max_bulk,
            )

    def _check_equipment(self, issues: _IssueList, character: Character) -> None:
        if not character.equipment:
            issues.info(
                "Equipment",
                "Character has no equipment",
                recommendation="Consider adding basic adventuring gear",
            )
            return
        counts = Counter(item.item_id for item in character.equipment)
        for item_id, count in counts.items():
            if count > 1:
                issues.warning(
                    "Equipment",
                    f"Duplicate equipment: {item_id}",
                    recommendation="Remove duplicate entries unless multiple items are intended",
                    item_id=item_id,
                    count=count,
                )


__all__ = ["ValidationService"]
