"""Pydantic V2 schemas for the Pathfinder rules engine.

Submodules:
    enums: Enumeration types (Ability, ModifierTarget, ModifierType, etc.)
    modifiers: Modifier records and CalculatedCharacterStats
    character: The character snapshot handed to the engine
    calculated: CalculatedCharacter, FeatSlot and validation records
    catalogue: Feat catalogue abstraction
    progression: Level-keyed lookup tables

Example:
    >>> from pathfinder_engine.models import Ability, Character, Modifier, ModifierTarget
    >>> hero = Character(name="Valeros", level=3, ability_scores={Ability.STR: 18})
    >>> belt = Modifier(target=ModifierTarget.STRENGTH, value=2)
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from pathfinder_engine.models.enums import (
    SAVE_TARGETS,
    SKILL_TARGETS,
    Ability,
    ComparisonOperator,
    FixActionKind,
    HookPhase,
    ModifierTarget,
    ModifierType,
    PrerequisiteType,
    ProficiencyRank,
    ValidationSeverity,
    VariantRuleType,
)

# =============================================================================
# Modifiers
# =============================================================================
from pathfinder_engine.models.modifiers import (
    CalculatedCharacterStats,
    Modifier,
    ModifierResult,
    ModifierSource,
)

# =============================================================================
# Character Snapshot
# =============================================================================
from pathfinder_engine.models.character import (
    Character,
    EquipmentItem,
    FeatSelection,
    VoluntaryFlaw,
)

# =============================================================================
# Calculated Character & Validation
# =============================================================================
from pathfinder_engine.models.calculated import (
    CalculatedCharacter,
    FeatSlot,
    FixAction,
    ValidationIssue,
    ValidationReport,
)

# =============================================================================
# Catalogue
# =============================================================================
from pathfinder_engine.models.catalogue import (
    Feat,
    FeatRepository,
    InMemoryFeatRepository,
    Prerequisite,
)

# =============================================================================
# Progression
# =============================================================================
from pathfinder_engine.models.progression import (
    calculate_modifier,
    get_max_proficiency_rank,
    get_proficiency_bonus,
    get_standard_feat_slots,
)


__all__ = [
    # Enums
    "Ability",
    "ModifierTarget",
    "SKILL_TARGETS",
    "SAVE_TARGETS",
    "ModifierType",
    "ProficiencyRank",
    "VariantRuleType",
    "HookPhase",
    "ValidationSeverity",
    "FixActionKind",
    "PrerequisiteType",
    "ComparisonOperator",
    # Modifiers
    "Modifier",
    "ModifierSource",
    "ModifierResult",
    "CalculatedCharacterStats",
    # Character
    "Character",
    "FeatSelection",
    "EquipmentItem",
    "VoluntaryFlaw",
    # Calculated
    "CalculatedCharacter",
    "FeatSlot",
    "FixAction",
    "ValidationIssue",
    "ValidationReport",
    # Catalogue
    "Feat",
    "Prerequisite",
    "FeatRepository",
    "InMemoryFeatRepository",
    # Progression
    "calculate_modifier",
    "get_max_proficiency_rank",
    "get_proficiency_bonus",
    "get_standard_feat_slots",
]
