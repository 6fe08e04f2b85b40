"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Pathfinder rules engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pathfinder_engine.core.config import Settings
from pathfinder_engine.models.calculated import CalculatedCharacter
from pathfinder_engine.models.catalogue import Feat, InMemoryFeatRepository, Prerequisite
from pathfinder_engine.models.character import Character, EquipmentItem, FeatSelection
from pathfinder_engine.models.enums import (
    Ability,
    ComparisonOperator,
    ModifierTarget,
    ModifierType,
    PrerequisiteType,
    ProficiencyRank,
)
from pathfinder_engine.models.modifiers import Modifier


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from pathfinder_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """Provide default settings independent of the environment."""
    return Settings()


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> dict[Ability, int]:
    """Provide a typical level 1 martial ability array.

    Returns:
        Scores keyed by Ability.
    """
    return {
        Ability.STR: 18,
        Ability.DEX: 14,
        Ability.CON: 14,
        Ability.INT: 10,
        Ability.WIS: 12,
        Ability.CHA: 8,
    }


@pytest.fixture
def sample_character(sample_ability_scores: dict[Ability, int]) -> Character:
    """Create a complete level 1 fighter snapshot.

    Args:
        sample_ability_scores: Character ability scores.

    Returns:
        Character instance.
    """
    return Character(
        name="Valeros",
        level=1,
        class_name="Fighter",
        ancestry="Human",
        background="Farmhand",
        ability_scores=sample_ability_scores,
        proficiencies={
            ModifierTarget.ARMOR_CLASS: ProficiencyRank.TRAINED,
            ModifierTarget.FORTITUDE_SAVE: ProficiencyRank.TRAINED,
            ModifierTarget.REFLEX_SAVE: ProficiencyRank.TRAINED,
            ModifierTarget.WILL_SAVE: ProficiencyRank.TRAINED,
            ModifierTarget.PERCEPTION: ProficiencyRank.TRAINED,
            ModifierTarget.ATHLETICS: ProficiencyRank.TRAINED,
        },
        feat_selections=[
            FeatSelection(feat_id="natural-ambition", slot_type="Ancestry", level=1),
            FeatSelection(feat_id="power-attack", slot_type="Class", level=1),
        ],
        equipment=[
            EquipmentItem(item_id="longsword", name="Longsword", bulk=1, equipped=True),
            EquipmentItem(item_id="chain-mail", name="Chain Mail", bulk=2, equipped=True),
            EquipmentItem(item_id="rations", name="Rations", bulk=0.1, quantity=5),
        ],
    )


@pytest.fixture
def make_character() -> Callable[..., Character]:
    """Build a complete character with overridable fields.

    Returns:
        Factory taking Character keyword overrides.
    """

    def _make(**overrides: object) -> Character:
        data: dict[str, object] = {
            "name": "Test Hero",
            "level": 1,
            "class_name": "Fighter",
            "ancestry": "Human",
            "background": "Farmhand",
            "ability_scores": {ability: 10 for ability in Ability},
            "equipment": [EquipmentItem(item_id="dagger", name="Dagger", bulk=0.1)],
        }
        data.update(overrides)
        return Character(**data)

    return _make


@pytest.fixture
def make_calculated() -> Callable[..., CalculatedCharacter]:
    """Build a CalculatedCharacter with sane defaults for validation tests.

    Returns:
        Factory taking CalculatedCharacter keyword overrides.
    """
    from uuid import uuid4

    def _make(**overrides: object) -> CalculatedCharacter:
        data: dict[str, object] = {
            "id": uuid4(),
            "name": "Test Hero",
            "level": 1,
            "class_name": "Fighter",
            "background_name": "Farmhand",
            "ancestry_name": "Human",
            "armor_class": 15,
            "hit_points": 20,
            "bulk_limit": 5,
            "max_bulk": 10,
            "selected_feats": ["power-attack"],
        }
        data.update(overrides)
        calculated = CalculatedCharacter(**data)
        if not calculated.ability_scores:
            for ability in Ability:
                calculated.set_ability_score(ability, 10)
        return calculated

    return _make


# =============================================================================
# Modifier Fixtures
# =============================================================================


@pytest.fixture
def make_modifier() -> Callable[..., Modifier]:
    """Build modifiers tersely.

    Returns:
        Factory taking (target, value, modifier_type, source_name, **extra).
    """

    def _make(
        target: ModifierTarget,
        value: int,
        modifier_type: ModifierType = ModifierType.UNTYPED,
        source_name: str = "Test Source",
        **extra: object,
    ) -> Modifier:
        return Modifier(
            target=target,
            value=value,
            modifier_type=modifier_type,
            source_name=source_name,
            **extra,
        )

    return _make


# =============================================================================
# Catalogue Fixtures
# =============================================================================


@pytest.fixture
def feat_catalogue() -> InMemoryFeatRepository:
    """Provide a small feat catalogue with archetype and prerequisite data."""
    return InMemoryFeatRepository(
        [
            Feat(id="power-attack", name="Power Attack", level=1, feat_type="Class"),
            Feat(id="natural-ambition", name="Natural Ambition", level=1, feat_type="Ancestry"),
            Feat(
                id="sudden-charge",
                name="Sudden Charge",
                level=1,
                feat_type="Class",
            ),
            Feat(
                id="intimidating-strike",
                name="Intimidating Strike",
                level=2,
                feat_type="Class",
                prerequisites=(
                    Prerequisite(
                        type=PrerequisiteType.ABILITY_SCORE,
                        target="Strength",
                        operator=ComparisonOperator.GE,
                        value=14,
                    ),
                ),
            ),
            Feat(
                id="assurance",
                name="Assurance",
                level=1,
                feat_type="Skill",
                prerequisites=(
                    Prerequisite(
                        type=PrerequisiteType.SKILL,
                        target="Athletics",
                        operator=ComparisonOperator.GE,
                        value=int(ProficiencyRank.TRAINED),
                    ),
                ),
            ),
            Feat(
                id="titan-wrestler",
                name="Titan Wrestler",
                level=1,
                feat_type="Skill",
                prerequisites=(
                    Prerequisite(
                        type=PrerequisiteType.SKILL,
                        target="Athletics",
                        operator=ComparisonOperator.GE,
                        value=int(ProficiencyRank.EXPERT),
                    ),
                ),
            ),
            Feat(
                id="wizard-dedication",
                name="Wizard Dedication",
                level=2,
                feat_type="Archetype",
                archetype_id="wizard",
                is_dedication=True,
            ),
            Feat(
                id="arcane-school-spell",
                name="Arcane School Spell",
                level=4,
                feat_type="Archetype",
                archetype_id="wizard",
                prerequisites=(
                    Prerequisite(type=PrerequisiteType.FEAT, target="wizard-dedication"),
                ),
            ),
            Feat(
                id="legendary-sneak",
                name="Legendary Sneak",
                level=15,
                feat_type="Skill",
            ),
        ]
    )
