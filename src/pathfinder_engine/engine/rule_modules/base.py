"""Base class for variant rule modules.

A rule module is a unit of optional rules logic. The pipeline calls each
hook with the character snapshot and the CalculatedCharacter; hooks mutate
the aggregate in place and return nothing. Normal rule outcomes are
recorded as validation issues, never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from pathfinder_engine.models.calculated import CalculatedCharacter
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import HookPhase, VariantRuleType


class RuleModule(ABC):
    """A pluggable variant rule.

    Subclasses declare ``name``, ``priority`` and ``rule_type`` and override
    only the hooks they care about. Lower priority runs first.
    """

    name: str
    priority: int
    rule_type: VariantRuleType

    def on_scores(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Adjust ability scores."""

    def on_proficiency(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Adjust proficiency ranks."""

    def on_feats(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Adjust the selected or available feats."""

    def on_slots(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Add feat slots. Slots added by other modules must be kept."""

    def on_encumbrance(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Adjust bulk and encumbrance."""

    @abstractmethod
    def on_validation(self, character: Character, calculated: CalculatedCharacter) -> None:
        """Record validation issues for this rule."""

    def hook_for(
        self, phase: HookPhase
    ) -> Callable[[Character, CalculatedCharacter], None]:
        """Get the bound hook method for a phase."""
        return getattr(self, f"on_{phase.value}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, priority={self.priority})"


__all__ = ["RuleModule"]
