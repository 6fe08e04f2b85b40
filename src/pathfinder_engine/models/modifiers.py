"""Modifier records and the attribute-oriented calculation result.

A Modifier is a single signed adjustment to one ModifierTarget, tagged with
a stacking ModifierType and the source that owns it (an equipped item, a
feat, a variant rule). The engine only reads modifiers; it never mutates
or destroys them.

CalculatedCharacterStats is created fresh by every ModifierEngine call.
It is never persisted by the engine itself.

Example:
    >>> belt = Modifier(
    ...     target=ModifierTarget.STRENGTH,
    ...     value=2,
    ...     modifier_type=ModifierType.ITEM,
    ...     source_name="Belt of Giant Strength",
    ... )
    >>> belt.is_bonus
    True
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from pathfinder_engine.models.enums import ModifierTarget, ModifierType


# =============================================================================
# Modifier Records
# =============================================================================


class Modifier(BaseModel):
    """A single adjustment contributed by a source.

    Attributes:
        target: The attribute being adjusted.
        value: Signed amount. Zero is inert.
        modifier_type: Stacking category.
        condition: Optional situational text (e.g. 'vs. fear').
        priority: Ordering key inside a stacking group; lower sorts first.
        active: Inactive modifiers are ignored by the engine.
        source_id: Identifier of the owning source.
        source_name: Display name of the owning source.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    target: ModifierTarget = Field(description="Attribute being adjusted")
    value: int = Field(description="Signed adjustment")
    modifier_type: ModifierType = Field(default=ModifierType.UNTYPED)
    condition: str | None = Field(default=None, description="Situational qualifier")
    priority: int = Field(default=0, description="Lower values sort first")
    active: bool = Field(default=True)
    source_id: UUID = Field(default_factory=uuid4)
    source_name: str = Field(default="Unknown", description="Owning source name")

    @property
    def is_bonus(self) -> bool:
        """Check whether this modifier is a bonus."""
        return self.value > 0

    @property
    def is_penalty(self) -> bool:
        """Check whether this modifier is a penalty."""
        return self.value < 0


class ModifierSource(BaseModel):
    """Snapshot of a modifier's provenance, kept for breakdowns."""

    model_config = ConfigDict(frozen=True)

    source_id: UUID
    source_name: str
    value: int
    modifier_type: ModifierType
    condition: str | None = None

    @classmethod
    def from_modifier(cls, modifier: Modifier) -> ModifierSource:
        """Build a source record from a modifier."""
        return cls(
            source_id=modifier.source_id,
            source_name=modifier.source_name,
            value=modifier.value,
            modifier_type=modifier.modifier_type,
            condition=modifier.condition,
        )

    def describe(self) -> str:
        """Format as a breakdown line, e.g. 'Belt: +2 [Item] (vs. fear)'."""
        sign = "+" if self.value >= 0 else ""
        type_info = (
            "" if self.modifier_type == ModifierType.UNTYPED
            else f" [{self.modifier_type.display_name}]"
        )
        condition = f" ({self.condition})" if self.condition else ""
        return f"{self.source_name}: {sign}{self.value}{type_info}{condition}"


class ModifierResult(BaseModel):
    """Net effect of every modifier on one target.

    Attributes:
        total_value: Sum of the contributions that survived stacking.
        stacking_warnings: One message per suppressed bonus or penalty group.
        applied: Sources whose value counts toward the total.
        suppressed: Sources dropped by stacking rules.
    """

    total_value: int = 0
    stacking_warnings: list[str] = Field(default_factory=list)
    applied: list[ModifierSource] = Field(default_factory=list)
    suppressed: list[ModifierSource] = Field(default_factory=list)


# =============================================================================
# Calculated Stats
# =============================================================================


class CalculatedCharacterStats(BaseModel):
    """Attribute-oriented result of a modifier calculation.

    For every target in ``base_stats``, ``final_stats[target]`` equals the
    base value plus ``modifiers[target].total_value`` plus any delta the
    dependency propagator pushed from a changed ability modifier.

    Attributes:
        character_id: Identifier of the calculated character.
        base_stats: Values before any custom modifier.
        final_stats: Values after stacking and dependency propagation.
        modifiers: Stacking result per modified target.
        modifier_sources: Every active source per modified target.
        validation_warnings: Stacking conflict messages per target.
        calculated_at: When this result was produced (UTC).
    """

    character_id: UUID | None = None
    base_stats: dict[ModifierTarget, int] = Field(default_factory=dict)
    final_stats: dict[ModifierTarget, int] = Field(default_factory=dict)
    modifiers: dict[ModifierTarget, ModifierResult] = Field(default_factory=dict)
    modifier_sources: dict[ModifierTarget, list[ModifierSource]] = Field(default_factory=dict)
    validation_warnings: dict[ModifierTarget, list[str]] = Field(default_factory=dict)
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def get_modifier(self, target: ModifierTarget) -> int:
        """Get the net modifier total for a target (0 when unmodified)."""
        result = self.modifiers.get(target)
        return result.total_value if result else 0

    def get_final_value(self, target: ModifierTarget) -> int:
        """Get the final value, falling back to the base value, then 0."""
        return self.final_stats.get(target, self.base_stats.get(target, 0))

    def get_modifier_sources(self, target: ModifierTarget) -> list[ModifierSource]:
        """Get every source contributing to a target."""
        return list(self.modifier_sources.get(target, []))

    def has_warnings(self, target: ModifierTarget) -> bool:
        """Check whether a target has stacking warnings."""
        return bool(self.validation_warnings.get(target))

    def get_warnings(self, target: ModifierTarget) -> list[str]:
        """Get the stacking warnings for a target."""
        return list(self.validation_warnings.get(target, []))

    def get_modifier_breakdown(self, target: ModifierTarget) -> str:
        """Format every source of a target, one per line.

        Returns:
            Lines such as 'Belt: +2 [Item]', or 'No modifiers'.
        """
        sources = self.get_modifier_sources(target)
        if not sources:
            return "No modifiers"
        return "\n".join(source.describe() for source in sources)

    def to_api_response(self) -> dict[str, Any]:
        """Export as a plain key-value structure for a UI or API layer.

        Enum keys become display strings here and nowhere else.
        """
        return {
            "characterId": str(self.character_id) if self.character_id else None,
            "calculatedAt": self.calculated_at.isoformat(),
            "baseStats": {t.display_name: v for t, v in self.base_stats.items()},
            "finalStats": {t.display_name: v for t, v in self.final_stats.items()},
            "modifiers": {
                t.display_name: {
                    "value": result.total_value,
                    "warnings": list(result.stacking_warnings),
                }
                for t, result in self.modifiers.items()
            },
            "warnings": {
                t.display_name: list(warnings)
                for t, warnings in self.validation_warnings.items()
                if warnings
            },
        }


__all__ = [
    "Modifier",
    "ModifierSource",
    "ModifierResult",
    "CalculatedCharacterStats",
]
