"""Character snapshot consumed by the rules engine.

The snapshot is the caller's read-only view of a character's raw choices.
Out-of-range values (level 0, a Strength of 40, a missing ability) are
accepted here on purpose so the validation pass can report them instead
of the model rejecting the whole character.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from pathfinder_engine.core.constants import DEFAULT_ABILITY_SCORE, LIGHT_BULK
from pathfinder_engine.models.enums import (
    Ability,
    ModifierTarget,
    ProficiencyRank,
    VariantRuleType,
)


class FeatSelection(BaseModel):
    """A feat the player picked for a slot.

    Attributes:
        feat_id: Catalogue id of the feat.
        slot_type: Slot category the feat was picked for (e.g. 'Class').
        level: Level at which the feat was taken.
        archetype: Archetype hint when the catalogue is unavailable.
        is_dedication: Whether this pick is an archetype dedication.
    """

    model_config = ConfigDict(frozen=True)

    feat_id: str = Field(min_length=1)
    slot_type: str = Field(default="Class")
    level: int = Field(default=1)
    archetype: str | None = None
    is_dedication: bool = False


class EquipmentItem(BaseModel):
    """A carried item. Bulk is per unit; light items are 0.1."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(min_length=1)
    name: str
    bulk: float = Field(default=LIGHT_BULK, ge=0)
    quantity: int = Field(default=1, ge=0)
    equipped: bool = False

    @property
    def total_bulk(self) -> float:
        """Bulk of the whole stack."""
        return self.bulk * self.quantity


class VoluntaryFlaw(BaseModel):
    """An ability the player chose to lower under the Voluntary Flaws rule."""

    model_config = ConfigDict(frozen=True)

    ability: Ability
    source: str = Field(default="Voluntary Flaw")


class Character(BaseModel):
    """Raw character choices handed to the engine.

    Attributes:
        id: Unique identifier.
        name: Character name.
        level: Character level; values outside 1-20 are reported, not rejected.
        class_name: Class name (e.g. 'Fighter').
        subclass_name: Optional subclass.
        ancestry: Ancestry name (e.g. 'Dwarf').
        heritage: Optional heritage.
        background: Background name.
        ability_scores: Starting scores with ancestry, background, class and
            free boosts already summed in.
        proficiencies: Rank per skill, save, perception or armor class.
        feat_selections: Feats picked by the player.
        equipment: Carried items.
        voluntary_flaws: Flaws chosen under the Voluntary Flaws rule.
        variant_rules: Variant rules switched on for this character.
    """

    model_config = ConfigDict(extra="forbid")

    id: UUID = Field(default_factory=uuid4)
    name: str = ""
    level: int = 1
    class_name: str = ""
    subclass_name: str | None = None
    ancestry: str = ""
    heritage: str | None = None
    background: str = ""
    ability_scores: dict[Ability, int] = Field(default_factory=dict)
    proficiencies: dict[ModifierTarget, ProficiencyRank] = Field(default_factory=dict)
    feat_selections: list[FeatSelection] = Field(default_factory=list)
    equipment: list[EquipmentItem] = Field(default_factory=list)
    voluntary_flaws: list[VoluntaryFlaw] = Field(default_factory=list)
    variant_rules: set[VariantRuleType] = Field(default_factory=set)

    def get_ability_score(self, ability: Ability) -> int:
        """Get a starting score, defaulting to 10 when absent."""
        return self.ability_scores.get(ability, DEFAULT_ABILITY_SCORE)

    def missing_abilities(self) -> list[Ability]:
        """List abilities the snapshot does not provide, in canonical order."""
        return [ability for ability in Ability if ability not in self.ability_scores]

    def get_proficiency(self, target: ModifierTarget) -> ProficiencyRank:
        """Get the rank for a target, untrained when absent."""
        return self.proficiencies.get(target, ProficiencyRank.UNTRAINED)

    def has_variant_rule(self, rule: VariantRuleType) -> bool:
        """Check whether a variant rule is active."""
        return rule in self.variant_rules

    def has_feat(self, feat_id: str) -> bool:
        """Check whether a feat id has been selected (case-insensitive)."""
        key = feat_id.lower()
        return any(sel.feat_id.lower() == key for sel in self.feat_selections)


__all__ = [
    "FeatSelection",
    "EquipmentItem",
    "VoluntaryFlaw",
    "Character",
]
