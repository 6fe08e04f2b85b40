"""Ignore Bulk Limit variant rule."""

from __future__ import annotations

from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.models.calculated import CalculatedCharacter
from pathfinder_engine.models.character import Character
from pathfinder_engine.models.enums import ValidationSeverity, VariantRuleType


class IgnoreBulkLimitModule(RuleModule):
    """Never encumbered. Bulk totals stay on the aggregate for display."""

    name = "Ignore Bulk Limit"
    priority = 50
    rule_type = VariantRuleType.IGNORE_BULK_LIMIT

    def on_encumbrance(self, character: Character, calculated: CalculatedCharacter) -> None:
        calculated.is_encumbered = False

    def on_validation(self, character: Character, calculated: CalculatedCharacter) -> None:
        calculated.add_issue(
            ValidationSeverity.INFO,
            "Ignore Bulk Limit",
            "Bulk limits and encumbrance penalties are ignored. "
            "Item bulk is still tracked for reference.",
            data={
                "current_bulk": calculated.current_bulk,
                "theoretical_limit": calculated.bulk_limit,
                "would_be_encumbered": calculated.current_bulk > calculated.bulk_limit,
            },
        )


__all__ = ["IgnoreBulkLimitModule"]
