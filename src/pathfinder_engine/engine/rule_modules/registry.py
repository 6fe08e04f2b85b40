"""Registry of available rule modules.

The registry maps module names to instances and selects the modules a
character has switched on. Execution order is always an explicit sort by
priority, never registration order.
"""

from __future__ import annotations

from collections.abc import Iterable

from pathfinder_engine.core.exceptions import ConfigurationError
from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.engine.rule_modules.automatic_bonus_progression import (
    AutomaticBonusProgressionModule,
)
from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.engine.rule_modules.free_archetype import FreeArchetypeModule
from pathfinder_engine.engine.rule_modules.ignore_bulk_limit import IgnoreBulkLimitModule
from pathfinder_engine.engine.rule_modules.voluntary_flaws import VoluntaryFlawsModule
from pathfinder_engine.models.catalogue import FeatRepository
from pathfinder_engine.models.enums import VariantRuleType


logger = get_logger(__name__)


def sort_by_priority(modules: Iterable[RuleModule]) -> list[RuleModule]:
    """Order modules by ascending priority; ties keep their input order."""
    return sorted(modules, key=lambda module: module.priority)


class RuleModuleRegistry:
    """Holds rule modules by name (case-insensitive)."""

    def __init__(self) -> None:
        self._modules: dict[str, RuleModule] = {}

    def register(self, module: RuleModule) -> None:
        """Register a module.

        Raises:
            ConfigurationError: If a module with the same name exists.
        """
        key = module.name.lower()
        if key in self._modules:
            raise ConfigurationError(
                f"Rule module already registered: {module.name}",
                config_key="rule_modules",
            )
        self._modules[key] = module
        logger.debug("Registered rule module", module=module.name, priority=module.priority)

    def register_many(self, modules: Iterable[RuleModule]) -> None:
        for module in modules:
            self.register(module)

    def get_module(self, name: str) -> RuleModule | None:
        """Look up a module by name, ignoring case."""
        return self._modules.get(name.strip().lower())

    @property
    def modules(self) -> list[RuleModule]:
        """Every registered module in priority order."""
        return sort_by_priority(self._modules.values())

    def get_active_modules(self, variant_rules: Iterable[VariantRuleType]) -> list[RuleModule]:
        """Get the modules for a set of active variant rules, by priority."""
        active = set(variant_rules)
        return sort_by_priority(m for m in self._modules.values() if m.rule_type in active)

    def validate_module_chain(self, modules: Iterable[RuleModule]) -> list[str]:
        """Report modules that share a priority.

        Two modules at the same priority run in input order, which makes
        the result depend on how they were listed.

        Returns:
            One message per colliding priority, empty when the chain is clean.
        """
        by_priority: dict[int, list[str]] = {}
        for module in sort_by_priority(modules):
            by_priority.setdefault(module.priority, []).append(module.name)
        return [
            f"Priority conflict at {priority}: {', '.join(names)}"
            for priority, names in by_priority.items()
            if len(names) > 1
        ]

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._modules


def create_default_registry(catalogue: FeatRepository | None = None) -> RuleModuleRegistry:
    """Build a registry holding the four built-in variant rule modules."""
    registry = RuleModuleRegistry()
    registry.register_many(
        [
            VoluntaryFlawsModule(),
            IgnoreBulkLimitModule(),
            AutomaticBonusProgressionModule(),
            FreeArchetypeModule(catalogue),
        ]
    )
    return registry


__all__ = [
    "RuleModuleRegistry",
    "create_default_registry",
    "sort_by_priority",
]
