"""Variant rule modules.

Submodules:
    base: RuleModule abstract base class
    voluntary_flaws: Voluntary Flaws (priority 10)
    ignore_bulk_limit: Ignore Bulk Limit (priority 50)
    automatic_bonus_progression: ABP notice and level lookups (priority 100)
    free_archetype: Free Archetype slots and dedication checks (priority 200)
    registry: RuleModuleRegistry and the default module set
"""

from __future__ import annotations

from pathfinder_engine.engine.rule_modules.automatic_bonus_progression import (
    AutomaticBonusProgressionModule,
    AutomaticBonuses,
    get_abp_bonuses,
    get_armor_potency_bonus,
    get_attack_potency_bonus,
    get_resilient_bonus,
    get_striking_dice,
)
from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.engine.rule_modules.free_archetype import (
    ArchetypeInfo,
    FreeArchetypeModule,
)
from pathfinder_engine.engine.rule_modules.ignore_bulk_limit import IgnoreBulkLimitModule
from pathfinder_engine.engine.rule_modules.registry import (
    RuleModuleRegistry,
    create_default_registry,
    sort_by_priority,
)
from pathfinder_engine.engine.rule_modules.voluntary_flaws import VoluntaryFlawsModule


__all__ = [
    "RuleModule",
    "VoluntaryFlawsModule",
    "IgnoreBulkLimitModule",
    "AutomaticBonusProgressionModule",
    "FreeArchetypeModule",
    "ArchetypeInfo",
    "AutomaticBonuses",
    "get_abp_bonuses",
    "get_attack_potency_bonus",
    "get_armor_potency_bonus",
    "get_resilient_bonus",
    "get_striking_dice",
    "RuleModuleRegistry",
    "create_default_registry",
    "sort_by_priority",
]
