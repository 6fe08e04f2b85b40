"""Tests for the built-in variant rule modules and the registry."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from pathfinder_engine.core.exceptions import ConfigurationError
from pathfinder_engine.engine.rule_modules import (
    AutomaticBonusProgressionModule,
    FreeArchetypeModule,
    IgnoreBulkLimitModule,
    RuleModule,
    RuleModuleRegistry,
    VoluntaryFlawsModule,
    create_default_registry,
    get_abp_bonuses,
    get_armor_potency_bonus,
    get_attack_potency_bonus,
    get_resilient_bonus,
    get_striking_dice,
)
from pathfinder_engine.models.calculated import CalculatedCharacter, FeatSlot
from pathfinder_engine.models.catalogue import InMemoryFeatRepository
from pathfinder_engine.models.character import Character, FeatSelection, VoluntaryFlaw
from pathfinder_engine.models.enums import (
    Ability,
    FixActionKind,
    HookPhase,
    ValidationSeverity,
    VariantRuleType,
)


class StubModule(RuleModule):
    """Minimal module with a configurable name and priority."""

    rule_type = VariantRuleType.DUAL_CLASS

    def __init__(self, name: str, priority: int) -> None:
        self.name = name
        self.priority = priority

    def on_validation(self, character: Character, calculated: CalculatedCharacter) -> None:
        pass


# =============================================================================
# Voluntary Flaws
# =============================================================================


class TestVoluntaryFlaws:
    """Tests for VoluntaryFlawsModule."""

    def _run(
        self,
        character: Character,
        calculated: CalculatedCharacter,
    ) -> None:
        module = VoluntaryFlawsModule()
        module.on_scores(character, calculated)
        module.on_validation(character, calculated)

    def test_single_flaw_to_floor_is_legal(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        """Constitution 10 with one flaw ends at 8 and stays valid."""
        character = make_character(voluntary_flaws=[VoluntaryFlaw(ability=Ability.CON)])
        calculated = make_calculated()

        self._run(character, calculated)

        assert calculated.ability_scores[Ability.CON] == 8
        assert calculated.get_ability_modifier(Ability.CON) == -1
        assert calculated.is_valid
        warnings = calculated.issues_by_severity(ValidationSeverity.WARNING)
        assert len(warnings) == 1
        assert warnings[0].message.startswith("Unpaired voluntary flaw in Constitution")
        assert warnings[0].fix_action is not None
        assert warnings[0].fix_action.kind is FixActionKind.ADD_VOLUNTARY_FLAW
        assert warnings[0].fix_action.token == "AddVoluntaryFlaw:constitution"

    def test_flaw_below_floor_is_error(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        """Two flaws on Constitution 10 reach 6, below the floor of 8."""
        character = make_character(
            voluntary_flaws=[
                VoluntaryFlaw(ability=Ability.CON),
                VoluntaryFlaw(ability=Ability.CON),
            ]
        )
        calculated = make_calculated()

        self._run(character, calculated)

        assert calculated.ability_scores[Ability.CON] == 6
        errors = calculated.issues_by_severity(ValidationSeverity.ERROR)
        assert [e.message for e in errors] == ["Constitution cannot be reduced below 8"]
        assert errors[0].fix_action is not None
        assert errors[0].fix_action.token == "RemoveVoluntaryFlaw:constitution"
        assert not calculated.is_valid

    def test_paired_flaws_report_boost(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        character = make_character(
            ability_scores={ability: 12 for ability in Ability},
            voluntary_flaws=[
                VoluntaryFlaw(ability=Ability.STR),
                VoluntaryFlaw(ability=Ability.STR),
            ],
        )
        calculated = make_calculated()
        for ability in Ability:
            calculated.set_ability_score(ability, 12)

        self._run(character, calculated)

        assert calculated.ability_scores[Ability.STR] == 8
        assert calculated.issues_by_severity(ValidationSeverity.WARNING) == []
        info = calculated.issues_by_severity(ValidationSeverity.INFO)[0]
        assert info.message == "Voluntary flaws grant 1 additional ability boost(s)"
        assert info.data["flaws"] == ["strength", "strength"]

    def test_flaws_on_different_abilities_are_each_unpaired(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        """One flaw on Strength and one on Constitution leave both unpaired."""
        character = make_character(
            voluntary_flaws=[
                VoluntaryFlaw(ability=Ability.STR),
                VoluntaryFlaw(ability=Ability.CON),
            ],
        )
        calculated = make_calculated()

        self._run(character, calculated)

        assert calculated.is_valid
        warnings = calculated.issues_by_severity(ValidationSeverity.WARNING)
        assert [w.category for w in warnings] == ["Voluntary Flaws", "Voluntary Flaws"]
        assert [w.fix_action.token for w in warnings if w.fix_action] == [
            "AddVoluntaryFlaw:strength",
            "AddVoluntaryFlaw:constitution",
        ]
        info = calculated.issues_by_severity(ValidationSeverity.INFO)
        assert [i.message for i in info] == [
            "Voluntary flaws grant 1 additional ability boost(s)"
        ]

    def test_no_flaws_no_issues(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated()
        self._run(make_character(), calculated)
        assert calculated.validation_issues == []


# =============================================================================
# Ignore Bulk Limit
# =============================================================================


class TestIgnoreBulkLimit:
    """Tests for IgnoreBulkLimitModule."""

    def test_clears_encumbrance_and_reports(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated(current_bulk=7, bulk_limit=5, is_encumbered=True)
        module = IgnoreBulkLimitModule()

        module.on_encumbrance(make_character(), calculated)
        module.on_validation(make_character(), calculated)

        assert calculated.is_encumbered is False
        assert calculated.current_bulk == 7
        info = calculated.validation_issues[0]
        assert info.severity is ValidationSeverity.INFO
        assert info.data == {
            "current_bulk": 7,
            "theoretical_limit": 5,
            "would_be_encumbered": True,
        }


# =============================================================================
# Automatic Bonus Progression
# =============================================================================


class TestAutomaticBonusProgression:
    """Tests for the ABP lookups and module."""

    @pytest.mark.parametrize(
        ("level", "attack", "armor", "resilient", "striking"),
        [
            (1, 0, 0, 0, 0),
            (4, 1, 0, 0, 1),
            (8, 1, 1, 1, 1),
            (12, 2, 2, 2, 2),
            (20, 3, 3, 3, 3),
        ],
    )
    def test_lookups(
        self, level: int, attack: int, armor: int, resilient: int, striking: int
    ) -> None:
        assert get_attack_potency_bonus(level) == attack
        assert get_armor_potency_bonus(level) == armor
        assert get_resilient_bonus(level) == resilient
        assert get_striking_dice(level) == striking

    def test_module_reports_bonuses(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated(level=10)

        AutomaticBonusProgressionModule().on_validation(make_character(level=10), calculated)

        assert calculated.validation_issues[0].data == get_abp_bonuses(10).model_dump()
        assert calculated.is_valid


# =============================================================================
# Free Archetype
# =============================================================================


def _fill_archetype(calculated: CalculatedCharacter, level: int, feat_id: str) -> None:
    for slot in calculated.feat_slots["Archetype"]:
        if slot.level == level:
            slot.selected_feat_id = feat_id
            return
    raise AssertionError(f"no archetype slot at level {level}")


class TestFreeArchetypeSlots:
    """Tests for FreeArchetypeModule.on_slots."""

    def test_even_level_slots(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        """A level 6 character gets archetype slots at 2, 4 and 6."""
        calculated = make_calculated(level=6)

        FreeArchetypeModule().on_slots(make_character(level=6), calculated)

        slots = calculated.feat_slots["Archetype"]
        assert [slot.level for slot in slots] == [2, 4, 6]
        assert all(slot.category == "Free Archetype" for slot in slots)
        assert not any(slot.is_required for slot in slots)

    def test_idempotent(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated(level=6)
        module = FreeArchetypeModule()

        module.on_slots(make_character(level=6), calculated)
        module.on_slots(make_character(level=6), calculated)

        assert len(calculated.feat_slots["Archetype"]) == 3

    def test_level_one_gets_none(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated(level=1)
        FreeArchetypeModule().on_slots(make_character(), calculated)
        assert calculated.feat_slots["Archetype"] == []

    def test_other_slots_untouched(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated(level=4)
        calculated.get_slots("Class").append(FeatSlot(slot_type="Class", level=2))

        FreeArchetypeModule().on_slots(make_character(level=4), calculated)

        assert [s.level for s in calculated.feat_slots["Class"]] == [2]


class TestFreeArchetypeDedications:
    """Tests for the dedication ordering check."""

    def test_missing_dedication_without_catalogue(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        character = make_character(
            level=4,
            feat_selections=[
                FeatSelection(
                    feat_id="arcane-school-spell",
                    slot_type="Archetype",
                    level=4,
                    archetype="Wizard",
                )
            ],
        )
        calculated = make_calculated(level=4)
        module = FreeArchetypeModule()
        module.on_slots(character, calculated)
        _fill_archetype(calculated, 4, "arcane-school-spell")

        module.on_validation(character, calculated)

        errors = calculated.issues_by_severity(ValidationSeverity.ERROR)
        assert [e.message for e in errors] == [
            "You must take the Wizard Dedication feat before taking other "
            "Wizard archetype feats"
        ]
        assert errors[0].fix_action is not None
        assert errors[0].fix_action.token == "AddFeat:wizard-dedication"

    def test_dedication_first_is_valid(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
        feat_catalogue: InMemoryFeatRepository,
    ) -> None:
        character = make_character(
            level=4,
            feat_selections=[
                FeatSelection(feat_id="wizard-dedication", slot_type="Archetype", level=2),
                FeatSelection(feat_id="arcane-school-spell", slot_type="Archetype", level=4),
            ],
        )
        calculated = make_calculated(level=4)
        module = FreeArchetypeModule(feat_catalogue)
        module.on_slots(character, calculated)
        _fill_archetype(calculated, 2, "wizard-dedication")
        _fill_archetype(calculated, 4, "arcane-school-spell")

        module.on_validation(character, calculated)

        assert calculated.is_valid
        assert len(calculated.issues_by_severity(ValidationSeverity.INFO)) == 1

    def test_dedication_taken_later_is_error(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
        feat_catalogue: InMemoryFeatRepository,
    ) -> None:
        character = make_character(
            level=6,
            feat_selections=[
                FeatSelection(feat_id="arcane-school-spell", slot_type="Archetype", level=4),
                FeatSelection(feat_id="wizard-dedication", slot_type="Archetype", level=6),
            ],
        )
        calculated = make_calculated(level=6)
        module = FreeArchetypeModule(feat_catalogue)
        module.on_slots(character, calculated)
        _fill_archetype(calculated, 4, "arcane-school-spell")
        _fill_archetype(calculated, 6, "wizard-dedication")

        module.on_validation(character, calculated)

        errors = calculated.issues_by_severity(ValidationSeverity.ERROR)
        assert len(errors) == 1
        assert errors[0].data["slot_level"] == 4

    def test_dedication_in_class_slot_counts(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        """A dedication taken through a class feat still unlocks archetype feats."""
        character = make_character(
            level=4,
            feat_selections=[
                FeatSelection(feat_id="fighter-dedication", slot_type="Class", level=2),
                FeatSelection(
                    feat_id="fighter-opportunist",
                    slot_type="Archetype",
                    level=4,
                    archetype="fighter",
                ),
            ],
        )
        calculated = make_calculated(level=4)
        module = FreeArchetypeModule()
        module.on_slots(character, calculated)
        _fill_archetype(calculated, 4, "fighter-opportunist")

        module.on_validation(character, calculated)

        assert calculated.is_valid

    def test_info_without_filled_slots(
        self,
        make_character: Callable[..., Character],
        make_calculated: Callable[..., CalculatedCharacter],
    ) -> None:
        calculated = make_calculated(level=2)
        FreeArchetypeModule().on_validation(make_character(level=2), calculated)

        assert [i.severity for i in calculated.validation_issues] == [ValidationSeverity.INFO]


class TestResolveArchetype:
    """Tests for archetype membership resolution."""

    def test_catalogue_wins(self, feat_catalogue: InMemoryFeatRepository) -> None:
        info = FreeArchetypeModule(feat_catalogue).resolve_archetype("arcane-school-spell")
        assert info is not None
        assert info.archetype == "wizard"
        assert not info.is_dedication

    def test_dedication_suffix(self) -> None:
        info = FreeArchetypeModule().resolve_archetype("Medic Dedication")
        assert info is not None
        assert info.archetype == "Medic"
        assert info.is_dedication

    def test_known_prefix(self) -> None:
        info = FreeArchetypeModule().resolve_archetype("medic-treat-condition", known=("Medic",))
        assert info is not None
        assert info.archetype == "Medic"

    def test_plain_feat(self, feat_catalogue: InMemoryFeatRepository) -> None:
        assert FreeArchetypeModule(feat_catalogue).resolve_archetype("power-attack") is None
        assert FreeArchetypeModule().resolve_archetype("unknown-feat") is None


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    """Tests for RuleModuleRegistry."""

    def test_default_registry_priority_order(self) -> None:
        registry = create_default_registry()

        assert len(registry) == 4
        assert [m.priority for m in registry.modules] == [10, 50, 100, 200]

    def test_duplicate_name_rejected(self) -> None:
        registry = RuleModuleRegistry()
        registry.register(StubModule("Dual", 10))

        with pytest.raises(ConfigurationError):
            registry.register(StubModule("dual", 20))

    def test_get_module_case_insensitive(self) -> None:
        registry = create_default_registry()
        module = registry.get_module("free archetype")

        assert isinstance(module, FreeArchetypeModule)
        assert "VOLUNTARY FLAWS" in registry
        assert registry.get_module("Gestalt") is None

    def test_active_modules_follow_variant_rules(self) -> None:
        registry = create_default_registry()

        active = registry.get_active_modules(
            {VariantRuleType.FREE_ARCHETYPE, VariantRuleType.VOLUNTARY_FLAWS}
        )

        assert [m.name for m in active] == ["Voluntary Flaws", "Free Archetype"]

    def test_active_modules_ignore_registration_order(self) -> None:
        registry = RuleModuleRegistry()
        registry.register_many([StubModule("Late", 300), StubModule("Early", 5)])

        active = registry.get_active_modules({VariantRuleType.DUAL_CLASS})

        assert [m.name for m in active] == ["Early", "Late"]

    def test_validate_module_chain(self) -> None:
        registry = RuleModuleRegistry()
        conflicts = registry.validate_module_chain(
            [StubModule("A", 10), StubModule("B", 10), StubModule("C", 20)]
        )
        assert conflicts == ["Priority conflict at 10: A, B"]

    def test_hook_for_phase(self) -> None:
        module = IgnoreBulkLimitModule()
        assert module.hook_for(HookPhase.ENCUMBRANCE) == module.on_encumbrance
        assert "priority=50" in repr(module)
