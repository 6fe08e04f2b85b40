"""Tests for CalculatedCharacter, validation records and the character snapshot."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from pathfinder_engine.core.exceptions import ValidationError
from pathfinder_engine.models.calculated import (
    CalculatedCharacter,
    FeatSlot,
    FixAction,
    ValidationIssue,
    ValidationReport,
)
from pathfinder_engine.models.character import Character, EquipmentItem, FeatSelection
from pathfinder_engine.models.enums import Ability, FixActionKind, ValidationSeverity


class TestFixAction:
    """Tests for the tagged fix-action variant."""

    def test_token_with_target(self) -> None:
        action = FixAction(kind=FixActionKind.ADD_FEAT, target="wizard-dedication")
        assert action.token == "AddFeat:wizard-dedication"

    def test_token_without_target(self) -> None:
        assert FixAction(kind=FixActionKind.ADD_VOLUNTARY_FLAW).token == "AddVoluntaryFlaw"

    def test_from_token(self) -> None:
        action = FixAction.from_token("RemoveVoluntaryFlaw:constitution")
        assert action.kind is FixActionKind.REMOVE_VOLUNTARY_FLAW
        assert action.target == "constitution"

    def test_from_token_roundtrip_without_target(self) -> None:
        assert FixAction.from_token("AddVoluntaryFlaw").target is None

    def test_from_unknown_token(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            FixAction.from_token("Teleport:home")
        assert exc_info.value.details["field_name"] == "fix_action"


class TestCalculatedCharacter:
    """Tests for the mutable calculation aggregate."""

    def test_is_valid_tracks_errors(
        self, make_calculated: Callable[..., CalculatedCharacter]
    ) -> None:
        calculated = make_calculated()
        assert calculated.is_valid

        calculated.add_issue(ValidationSeverity.WARNING, "Test", "only a warning")
        assert calculated.is_valid

        calculated.add_issue(ValidationSeverity.ERROR, "Test", "broken")
        assert not calculated.is_valid

    def test_set_ability_score_updates_modifier(
        self, make_calculated: Callable[..., CalculatedCharacter]
    ) -> None:
        calculated = make_calculated()
        calculated.set_ability_score(Ability.CON, 7)
        assert calculated.ability_scores[Ability.CON] == 7
        assert calculated.get_ability_modifier(Ability.CON) == -2

    def test_get_slots_creates_list(
        self, make_calculated: Callable[..., CalculatedCharacter]
    ) -> None:
        calculated = make_calculated()
        slots = calculated.get_slots("Archetype")
        slots.append(FeatSlot(slot_type="Archetype", level=2, is_required=False))

        assert len(calculated.feat_slots["Archetype"]) == 1
        assert calculated.all_slots()[0].level == 2

    def test_api_response(self, make_calculated: Callable[..., CalculatedCharacter]) -> None:
        calculated = make_calculated()
        calculated.add_issue(
            ValidationSeverity.ERROR,
            "Free Archetype",
            "Missing dedication",
            fix_action=FixAction(kind=FixActionKind.ADD_FEAT, target="wizard-dedication"),
        )
        calculated.add_issue(
            ValidationSeverity.WARNING,
            "Feats",
            "Character has no feats selected",
            recommendation="Most characters should have at least some feats by level 2",
        )

        response = calculated.to_api_response()

        assert response["abilityScores"]["Strength"] == 10
        assert response["isValid"] is False
        first, second = response["validationIssues"]
        assert first["severity"] == "Error"
        assert first["fixAction"] == "AddFeat:wizard-dedication"
        assert first["recommendation"] is None
        assert second["recommendation"] == (
            "Most characters should have at least some feats by level 2"
        )

    def test_dump_includes_is_valid(
        self, make_calculated: Callable[..., CalculatedCharacter]
    ) -> None:
        assert make_calculated().model_dump()["is_valid"] is True


class TestValidationReport:
    """Tests for ValidationReport computed properties."""

    def test_partitions_by_severity(self) -> None:
        report = ValidationReport(
            issues=[
                ValidationIssue(severity=ValidationSeverity.INFO, category="A", message="i"),
                ValidationIssue(severity=ValidationSeverity.WARNING, category="A", message="w"),
                ValidationIssue(severity=ValidationSeverity.ERROR, category="A", message="e"),
            ]
        )

        assert not report.is_valid
        assert report.has_critical_issues
        assert report.has_warnings
        assert report.total_issue_count == 3
        assert [i.message for i in report.errors] == ["e"]
        assert [i.message for i in report.warnings] == ["w"]
        assert [i.message for i in report.infos] == ["i"]

    def test_empty_report_is_valid(self) -> None:
        report = ValidationReport()
        assert report.is_valid
        assert not report.has_warnings


class TestCharacterSnapshot:
    """Tests for the Character input model."""

    def test_missing_abilities_default_to_ten(self) -> None:
        character = Character(ability_scores={Ability.STR: 16})

        assert character.get_ability_score(Ability.STR) == 16
        assert character.get_ability_score(Ability.WIS) == 10
        assert character.missing_abilities() == [
            Ability.DEX,
            Ability.CON,
            Ability.INT,
            Ability.WIS,
            Ability.CHA,
        ]

    def test_out_of_range_level_accepted(self) -> None:
        assert Character(level=25).level == 25

    def test_has_feat_case_insensitive(self) -> None:
        character = Character(feat_selections=[FeatSelection(feat_id="Power-Attack")])
        assert character.has_feat("power-attack")

    def test_equipment_total_bulk(self) -> None:
        item = EquipmentItem(item_id="arrows", name="Arrows", bulk=0.1, quantity=10)
        assert item.total_bulk == pytest.approx(1.0)
