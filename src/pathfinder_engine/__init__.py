"""Pathfinder character-attribute rules engine.

Turns a character's raw choices (ability scores, class, feats, equipment,
active variant rules) into resolved statistics, applying typed-bonus
stacking, ability dependency propagation, a priority-ordered chain of
variant rule modules and a validation pass.

The engine is a synchronous library: no persistence, no transport, no
shared mutable state between calculations.

Example:
    >>> from pathfinder_engine import (
    ...     Ability, Character, CharacterCalculator, Modifier, ModifierTarget,
    ...     ModifierType, VariantRuleType,
    ... )
    >>> hero = Character(
    ...     name="Amiri", level=6, class_name="Barbarian", ancestry="Human",
    ...     background="Hunter", ability_scores={Ability.STR: 18, Ability.CON: 14},
    ...     variant_rules={VariantRuleType.FREE_ARCHETYPE},
    ... )
    >>> belt = Modifier(target=ModifierTarget.STRENGTH, value=2,
    ...                 modifier_type=ModifierType.ITEM, source_name="Belt")
    >>> calculated = CharacterCalculator().calculate(hero, [belt])
    >>> len(calculated.feat_slots["Archetype"])
    3

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas, enums and progression tables.
    engine: Stacking, propagation, rule modules, validation and calculation.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core
from pathfinder_engine.core.config import Settings, get_settings
from pathfinder_engine.core.exceptions import PathfinderEngineError
from pathfinder_engine.core.logging import configure_logging, get_logger

# Models
from pathfinder_engine.models import (
    Ability,
    CalculatedCharacter,
    CalculatedCharacterStats,
    Character,
    EquipmentItem,
    Feat,
    FeatRepository,
    FeatSelection,
    FixAction,
    InMemoryFeatRepository,
    Modifier,
    ModifierTarget,
    ModifierType,
    Prerequisite,
    ProficiencyRank,
    ValidationIssue,
    ValidationSeverity,
    VariantRuleType,
    VoluntaryFlaw,
)

# Engine
from pathfinder_engine.engine import (
    CharacterCalculator,
    ModifierEngine,
    RuleModule,
    RuleModuleRegistry,
    ValidationService,
    create_default_registry,
    resolve,
)


__all__ = [
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "PathfinderEngineError",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "ModifierTarget",
    "ModifierType",
    "ProficiencyRank",
    "VariantRuleType",
    "ValidationSeverity",
    "Modifier",
    "CalculatedCharacterStats",
    "Character",
    "FeatSelection",
    "EquipmentItem",
    "VoluntaryFlaw",
    "CalculatedCharacter",
    "ValidationIssue",
    "FixAction",
    "Feat",
    "Prerequisite",
    "FeatRepository",
    "InMemoryFeatRepository",
    # Engine
    "resolve",
    "ModifierEngine",
    "RuleModule",
    "RuleModuleRegistry",
    "create_default_registry",
    "ValidationService",
    "CharacterCalculator",
]
