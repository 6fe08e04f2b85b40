"""Calculated character aggregate and validation records.

A CalculatedCharacter is instantiated once per evaluation request, passed
by reference through every pipeline stage and discarded after the caller
reads it. Rule modules mutate it in place. Validation issues accumulate on
it and are never removed mid-pass.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pathfinder_engine.core.exceptions import ValidationError
from pathfinder_engine.models.enums import (
    Ability,
    FixActionKind,
    ModifierTarget,
    ProficiencyRank,
    ValidationSeverity,
)
from pathfinder_engine.models.progression import calculate_modifier


# =============================================================================
# Validation Records
# =============================================================================


class FixAction(BaseModel):
    """Machine-readable remedy attached to a validation issue.

    Attributes:
        kind: What the UI should offer to do.
        target: Feat id or ability the action applies to, if any.

    Example:
        >>> FixAction(kind=FixActionKind.ADD_FEAT, target="wizard-dedication").token
        'AddFeat:wizard-dedication'
    """

    model_config = ConfigDict(frozen=True)

    kind: FixActionKind
    target: str | None = None

    @property
    def token(self) -> str:
        """Render as the legacy 'Kind:target' string."""
        return f"{self.kind.value}:{self.target}" if self.target else self.kind.value

    @classmethod
    def from_token(cls, token: str) -> FixAction:
        """Parse a 'Kind:target' string.

        Raises:
            ValidationError: If the kind is not a known fix action.
        """
        kind_text, _, target = token.partition(":")
        try:
            kind = FixActionKind(kind_text.strip())
        except ValueError as exc:
            raise ValidationError(
                f"Unknown fix action: {kind_text!r}",
                field_name="fix_action",
                invalid_value=token,
            ) from exc
        return cls(kind=kind, target=target.strip() or None)


class ValidationIssue(BaseModel):
    """A severity-tagged finding about a character.

    Attributes:
        severity: Info, Warning or Error. Only Error invalidates a character.
        category: Area the issue belongs to (e.g. 'Ability Scores').
        message: Human-readable description.
        fix_action: Optional remedy a UI can apply.
        recommendation: Optional advice shown next to the message.
        data: Extra key-value context for the UI.
    """

    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity
    category: str
    message: str
    fix_action: FixAction | None = None
    recommendation: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.severity == ValidationSeverity.ERROR


class ValidationReport(BaseModel):
    """Issues produced by one ValidationService call."""

    issues: list[ValidationIssue] = Field(default_factory=list)
    validated_entity_id: str | None = None
    validated_entity_type: str = "Character"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        """True when no issue has Error severity."""
        return not self.errors

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_critical_issues(self) -> bool:
        return bool(self.errors)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_issue_count(self) -> int:
        return len(self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return self._by_severity(ValidationSeverity.ERROR)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return self._by_severity(ValidationSeverity.WARNING)

    @property
    def infos(self) -> list[ValidationIssue]:
        return self._by_severity(ValidationSeverity.INFO)

    def _by_severity(self, severity: ValidationSeverity) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]


# =============================================================================
# Feat Slots
# =============================================================================


class FeatSlot(BaseModel):
    """A feat slot a character has earned.

    Attributes:
        slot_type: Slot family (Ancestry, Class, Skill, General, Archetype).
        level: Level at which the slot is gained.
        category: Finer label, e.g. 'Free Archetype'.
        selected_feat_id: The feat placed in this slot, if any.
        is_required: Whether leaving the slot empty is reported.
    """

    slot_type: str
    level: int
    category: str = ""
    selected_feat_id: str | None = None
    is_required: bool = True

    @property
    def is_filled(self) -> bool:
        return self.selected_feat_id is not None


# =============================================================================
# Calculated Character
# =============================================================================


class CalculatedCharacter(BaseModel):
    """Feat-, proficiency- and combat-oriented result of a full calculation.

    Rule modules read and write this aggregate in place during each hook
    phase. ``is_valid`` is derived from ``validation_issues`` on access.
    """

    id: UUID
    name: str = ""
    level: int = 1
    class_name: str = ""
    subclass_name: str | None = None
    background_name: str | None = None
    ancestry_name: str | None = None

    # Ability scores (after all modifiers)
    ability_scores: dict[Ability, int] = Field(default_factory=dict)
    ability_modifiers: dict[Ability, int] = Field(default_factory=dict)

    # Proficiencies
    proficiencies: dict[ModifierTarget, ProficiencyRank] = Field(default_factory=dict)
    proficiency_bonuses: dict[ModifierTarget, int] = Field(default_factory=dict)
    skills: dict[ModifierTarget, int] = Field(default_factory=dict)

    # Feats
    feat_slots: dict[str, list[FeatSlot]] = Field(default_factory=dict)
    selected_feats: list[str] = Field(default_factory=list)

    # Combat stats
    armor_class: int = 0
    hit_points: int = 0
    initiative: int = 0
    fortitude_save: int = 0
    reflex_save: int = 0
    will_save: int = 0
    perception: int = 0
    speed: int = 0

    # Encumbrance
    bulk_limit: int = 0
    max_bulk: int = 0
    current_bulk: int = 0
    carried_bulk: float = 0.0
    is_encumbered: bool = False

    validation_issues: list[ValidationIssue] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        """True when no issue has Error severity."""
        return not any(issue.is_error for issue in self.validation_issues)

    def set_ability_score(self, ability: Ability, score: int) -> None:
        """Set a score and recompute its modifier."""
        self.ability_scores[ability] = score
        self.ability_modifiers[ability] = calculate_modifier(score)

    def refresh_ability_modifiers(self) -> None:
        """Recompute every modifier from the current scores."""
        for ability, score in self.ability_scores.items():
            self.ability_modifiers[ability] = calculate_modifier(score)

    def get_ability_modifier(self, ability: Ability) -> int:
        return self.ability_modifiers.get(ability, 0)

    def add_issue(
        self,
        severity: ValidationSeverity,
        category: str,
        message: str,
        *,
        fix_action: FixAction | None = None,
        recommendation: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> ValidationIssue:
        """Append a validation issue and return it."""
        issue = ValidationIssue(
            severity=severity,
            category=category,
            message=message,
            fix_action=fix_action,
            recommendation=recommendation,
            data=data or {},
        )
        self.validation_issues.append(issue)
        return issue

    def issues_by_severity(self, severity: ValidationSeverity) -> list[ValidationIssue]:
        return [issue for issue in self.validation_issues if issue.severity == severity]

    def get_slots(self, slot_type: str) -> list[FeatSlot]:
        """Get the slot list for a type, creating it when absent."""
        return self.feat_slots.setdefault(slot_type, [])

    def all_slots(self) -> list[FeatSlot]:
        return [slot for slots in self.feat_slots.values() for slot in slots]

    def to_api_response(self) -> dict[str, Any]:
        """Export as a plain key-value structure for a UI or API layer."""
        return {
            "id": str(self.id),
            "name": self.name,
            "level": self.level,
            "className": self.class_name,
            "abilityScores": {a.full_name: v for a, v in self.ability_scores.items()},
            "abilityModifiers": {a.full_name: v for a, v in self.ability_modifiers.items()},
            "proficiencies": {
                t.display_name: rank.display_name for t, rank in self.proficiencies.items()
            },
            "skills": {t.display_name: v for t, v in self.skills.items()},
            "featSlots": {
                slot_type: [
                    {
                        "level": slot.level,
                        "category": slot.category,
                        "selectedFeatId": slot.selected_feat_id,
                        "isRequired": slot.is_required,
                    }
                    for slot in slots
                ]
                for slot_type, slots in self.feat_slots.items()
            },
            "combat": {
                "armorClass": self.armor_class,
                "hitPoints": self.hit_points,
                "initiative": self.initiative,
                "fortitude": self.fortitude_save,
                "reflex": self.reflex_save,
                "will": self.will_save,
                "perception": self.perception,
                "speed": self.speed,
            },
            "encumbrance": {
                "bulkLimit": self.bulk_limit,
                "maxBulk": self.max_bulk,
                "currentBulk": self.current_bulk,
                "isEncumbered": self.is_encumbered,
            },
            "isValid": self.is_valid,
            "validationIssues": [
                {
                    "severity": issue.severity.display_name,
                    "category": issue.category,
                    "message": issue.message,
                    "fixAction": issue.fix_action.token if issue.fix_action else None,
                    "recommendation": issue.recommendation,
                    "data": dict(issue.data),
                }
                for issue in self.validation_issues
            ],
        }


__all__ = [
    "FixAction",
    "ValidationIssue",
    "ValidationReport",
    "FeatSlot",
    "CalculatedCharacter",
]
