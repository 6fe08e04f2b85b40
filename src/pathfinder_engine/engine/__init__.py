"""Rules engine for Pathfinder character evaluation.

Submodules:
    stacking: Typed bonus/penalty stacking resolver
    base_stats: Baseline stats before custom modifiers
    dependencies: Ability score dependency propagation
    modifier_engine: Attribute-oriented modifier calculation
    rule_modules: Variant rule modules and their registry
    pipeline: Phase-major rule module execution
    validation: Structural and catalogue-backed validation
    calculator: Full character evaluation

Example:
    >>> from pathfinder_engine.engine import CharacterCalculator
    >>> calculator = CharacterCalculator()
    >>> calculated = calculator.calculate(character, modifiers)
    >>> calculated.is_valid
    True
"""

from __future__ import annotations

# =============================================================================
# Modifier Calculation
# =============================================================================
from pathfinder_engine.engine.base_stats import BaseStatProvider
from pathfinder_engine.engine.dependencies import (
    ABILITY_DEPENDENCIES,
    get_dependents,
    get_key_ability,
    propagate,
)
from pathfinder_engine.engine.modifier_engine import ModifierEngine, group_by_target
from pathfinder_engine.engine.stacking import resolve

# =============================================================================
# Rule Modules
# =============================================================================
from pathfinder_engine.engine.pipeline import RULE_MODULE_CATEGORY, RulePipeline
from pathfinder_engine.engine.rule_modules import (
    AutomaticBonusProgressionModule,
    AutomaticBonuses,
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

# =============================================================================
# Validation & Calculation
# =============================================================================
from pathfinder_engine.engine.calculator import CharacterCalculator
from pathfinder_engine.engine.validation import ValidationService


__all__ = [
    # Modifier calculation
    "resolve",
    "BaseStatProvider",
    "ABILITY_DEPENDENCIES",
    "get_dependents",
    "get_key_ability",
    "propagate",
    "ModifierEngine",
    "group_by_target",
    # Rule modules
    "RuleModule",
    "VoluntaryFlawsModule",
    "IgnoreBulkLimitModule",
    "AutomaticBonusProgressionModule",
    "FreeArchetypeModule",
    "AutomaticBonuses",
    "get_abp_bonuses",
    "get_attack_potency_bonus",
    "get_armor_potency_bonus",
    "get_resilient_bonus",
    "get_striking_dice",
    "RuleModuleRegistry",
    "create_default_registry",
    "RulePipeline",
    "RULE_MODULE_CATEGORY",
    # Validation & calculation
    "ValidationService",
    "CharacterCalculator",
]
