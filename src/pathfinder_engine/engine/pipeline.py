"""Rule module pipeline.

Modules are sorted by ascending priority once, when the pipeline is built.
Hooks then run phase-major: every module's ``on_scores`` finishes before
any module's ``on_proficiency`` starts, so an earlier module's changes are
visible to every later hook.

A hook that raises does not stop the calculation. The failure is logged
with its traceback, recorded as an Error issue, and the remaining modules
still run.
"""

from __future__ import annotations

import time
from collections.abc import Iterable

from pathfinder_engine.core.config import Settings, get_settings
from pathfinder_engine.core.exceptions import InvalidCharacterError, RuleModuleError
from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.engine.rule_modules.registry import sort_by_priority
from pathfinder_engine.models.calculated import CalculatedCharacter
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import HookPhase, ValidationSeverity


logger = get_logger(__name__)

RULE_MODULE_CATEGORY = "Rule Module"


class RulePipeline:
    """Run rule module hooks in (phase, priority) order."""

    def __init__(
        self,
        modules: Iterable[RuleModule],
        settings: Settings | None = None,
    ) -> None:
        self._modules = sort_by_priority(modules)
        self._settings = settings or get_settings()

    @property
    def modules(self) -> list[RuleModule]:
        """Modules in execution order."""
        return list(self._modules)

    @property
    def module_names(self) -> list[str]:
        return [module.name for module in self._modules]

    def run(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Run every phase back to back."""
        for phase in HookPhase:
            self.run_phase(phase, character, calculated)

    def run_phase(
        self,
        phase: HookPhase,
        character: Character,
        calculated: CalculatedCharacter,
    ) -> None:
        """Run one hook phase for every module, lowest priority first.

        Raises:
            InvalidCharacterError: If the character or aggregate is missing.
        """
        if character is None or calculated is None:
            raise InvalidCharacterError(
                "Rule pipeline requires a character and a calculated aggregate",
                details={"phase": phase.value},
            )

        threshold_ms = self._settings.engine.slow_module_threshold_ms
        for module in self._modules:
            started = time.perf_counter()
            try:
                module.hook_for(phase)(character, calculated)
            except Exception as exc:
                error = RuleModuleError(
                    f"Rule module '{module.name}' failed: {exc}",
                    module_name=module.name,
                    phase=phase.value,
                    character_id=str(calculated.id),
                )
                logger.exception("Rule module failed", **error.details)
                calculated.add_issue(
                    ValidationSeverity.ERROR,
                    RULE_MODULE_CATEGORY,
                    error.message,
                    data={"module": module.name, "phase": phase.value},
                )
            elapsed_ms = (time.perf_counter() - started) * 1000
            if elapsed_ms > threshold_ms:
                logger.warning(
                    "Slow rule module",
                    module=module.name,
                    phase=phase.value,
                    elapsed_ms=round(elapsed_ms, 2),
                    threshold_ms=threshold_ms,
                )


__all__ = ["RULE_MODULE_CATEGORY", "RulePipeline"]
