"""Enumeration types for the Pathfinder rules engine.

These enums are immutable keys used throughout the engine: ability scores,
every modifiable attribute, bonus/penalty stacking categories, proficiency
ranks, variant rules, and validation severities. Conversion to display
strings happens only in the ``to_api_response`` exporters.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Ability(StrEnum):
    """The six ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability (e.g. 'Strength')."""
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation (e.g. 'STR')."""
        return self.name

    @property
    def target(self) -> ModifierTarget:
        """Get the modifier target addressing this ability score."""
        return ModifierTarget(self.value)

    @classmethod
    def parse(cls, name: str) -> Ability | None:
        """Resolve an ability from a full name, value or abbreviation.

        Args:
            name: Text such as 'Strength', 'strength' or 'STR'.

        Returns:
            The matching Ability, or None when nothing matches.
        """
        key = name.strip().lower()
        for ability in cls:
            if key in (ability.value, ability.name.lower()):
                return ability
        return None


class ModifierTarget(StrEnum):
    """Every attribute a modifier can adjust.

    Values are stable snake_case identifiers; ``display_name`` is the
    human-readable form used by API exports.
    """

    # Ability scores
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"

    # Derived stats
    ARMOR_CLASS = "armor_class"
    HIT_POINTS = "hit_points"
    INITIATIVE = "initiative"
    SPEED = "speed"

    # Saving throws
    FORTITUDE_SAVE = "fortitude_save"
    REFLEX_SAVE = "reflex_save"
    WILL_SAVE = "will_save"

    # Skills
    ACROBATICS = "acrobatics"
    ARCANA = "arcana"
    ATHLETICS = "athletics"
    CRAFTING = "crafting"
    DECEPTION = "deception"
    DIPLOMACY = "diplomacy"
    INTIMIDATION = "intimidation"
    LORE = "lore"
    MEDICINE = "medicine"
    NATURE = "nature"
    OCCULTISM = "occultism"
    PERCEPTION = "perception"
    PERFORMANCE = "performance"
    RELIGION = "religion"
    SOCIETY = "society"
    STEALTH = "stealth"
    SURVIVAL = "survival"
    THIEVERY = "thievery"

    # Attack stats
    ATTACK_BONUS = "attack_bonus"
    DAMAGE_BONUS = "damage_bonus"
    SPELL_ATTACK_BONUS = "spell_attack_bonus"
    SPELL_DC = "spell_dc"

    # Resistances
    ALL_DAMAGE_RESISTANCE = "all_damage_resistance"
    PHYSICAL_RESISTANCE = "physical_resistance"
    FIRE_RESISTANCE = "fire_resistance"
    COLD_RESISTANCE = "cold_resistance"
    ELECTRICITY_RESISTANCE = "electricity_resistance"
    ACID_RESISTANCE = "acid_resistance"
    SONIC_RESISTANCE = "sonic_resistance"

    # Other
    CARRYING_CAPACITY = "carrying_capacity"
    LAND_SPEED = "land_speed"
    SWIM_SPEED = "swim_speed"
    CLIMB_SPEED = "climb_speed"
    FLY_SPEED = "fly_speed"

    @property
    def display_name(self) -> str:
        """Get the human-readable name (e.g. 'Fortitude Save')."""
        return self.value.replace("_", " ").title().replace(" Dc", " DC")

    @property
    def ability(self) -> Ability | None:
        """Get the Ability this target addresses, if it is an ability score."""
        try:
            return Ability(self.value)
        except ValueError:
            return None

    @property
    def is_ability_score(self) -> bool:
        """Check whether this target is one of the six ability scores."""
        return self.ability is not None

    @property
    def is_skill(self) -> bool:
        """Check whether this target is a skill (Perception included)."""
        return self in SKILL_TARGETS

    @property
    def is_save(self) -> bool:
        """Check whether this target is a saving throw."""
        return self in SAVE_TARGETS

    @classmethod
    def parse(cls, name: str) -> ModifierTarget | None:
        """Resolve a target from its value, display name or PascalCase name.

        Args:
            name: Text such as 'athletics', 'Fortitude Save' or 'FortitudeSave'.

        Returns:
            The matching ModifierTarget, or None when nothing matches.
        """
        key = "".join(ch for ch in name.lower() if ch.isalnum())
        for target in cls:
            if key == target.value.replace("_", ""):
                return target
        return None


SKILL_TARGETS: frozenset[ModifierTarget] = frozenset(
    {
        ModifierTarget.ACROBATICS,
        ModifierTarget.ARCANA,
        ModifierTarget.ATHLETICS,
        ModifierTarget.CRAFTING,
        ModifierTarget.DECEPTION,
        ModifierTarget.DIPLOMACY,
        ModifierTarget.INTIMIDATION,
        ModifierTarget.LORE,
        ModifierTarget.MEDICINE,
        ModifierTarget.NATURE,
        ModifierTarget.OCCULTISM,
        ModifierTarget.PERCEPTION,
        ModifierTarget.PERFORMANCE,
        ModifierTarget.RELIGION,
        ModifierTarget.SOCIETY,
        ModifierTarget.STEALTH,
        ModifierTarget.SURVIVAL,
        ModifierTarget.THIEVERY,
    }
)

SAVE_TARGETS: frozenset[ModifierTarget] = frozenset(
    {
        ModifierTarget.FORTITUDE_SAVE,
        ModifierTarget.REFLEX_SAVE,
        ModifierTarget.WILL_SAVE,
    }
)


class ModifierType(StrEnum):
    """Bonus and penalty categories governing stacking.

    UNTYPED modifiers always stack. For every other type only the largest
    bonus and the largest penalty apply.
    """

    UNTYPED = "untyped"
    ITEM = "item"
    ENHANCEMENT = "enhancement"
    STATUS = "status"
    CIRCUMSTANCE = "circumstance"
    COMPETENCE = "competence"
    DEFLECTION = "deflection"
    DODGE = "dodge"
    INSIGHT = "insight"
    LUCK = "luck"
    MORALE = "morale"
    NATURAL = "natural"
    PROFANE = "profane"
    RACIAL = "racial"
    RESISTANCE = "resistance"
    SACRED = "sacred"
    SIZE = "size"
    ALCHEMICAL = "alchemical"

    @property
    def display_name(self) -> str:
        """Get the capitalized type name (e.g. 'Item')."""
        return self.value.capitalize()


class ProficiencyRank(IntEnum):
    """Proficiency ranks; the value is the bonus added on top of level."""

    UNTRAINED = 0
    TRAINED = 2
    EXPERT = 4
    MASTER = 6
    LEGENDARY = 8

    @property
    def display_name(self) -> str:
        """Get the capitalized rank name (e.g. 'Expert')."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, name: str) -> ProficiencyRank | None:
        """Resolve a rank from its name (case-insensitive)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return None


class VariantRuleType(StrEnum):
    """Optional variant rules a campaign can switch on."""

    ANCESTRY_PARAGON = "ancestry_paragon"
    AUTOMATIC_BONUS_PROGRESSION = "automatic_bonus_progression"
    DUAL_CLASS = "dual_class"
    FREE_ARCHETYPE = "free_archetype"
    GRADUAL_ABILITY_BOOSTS = "gradual_ability_boosts"
    PROFICIENCY_WITHOUT_LEVEL = "proficiency_without_level"
    VOLUNTARY_FLAWS = "voluntary_flaws"
    IGNORE_BULK_LIMIT = "ignore_bulk_limit"


class HookPhase(StrEnum):
    """Rule-module hook phases, in execution order."""

    SCORES = "scores"
    PROFICIENCY = "proficiency"
    FEATS = "feats"
    SLOTS = "slots"
    ENCUMBRANCE = "encumbrance"
    VALIDATION = "validation"


class ValidationSeverity(IntEnum):
    """Severity of a validation issue. Only ERROR makes a character invalid."""

    INFO = 0
    WARNING = 1
    ERROR = 2

    @property
    def display_name(self) -> str:
        """Get the capitalized severity name."""
        return self.name.capitalize()


class FixActionKind(StrEnum):
    """Machine-readable remedies a UI can offer for a validation issue."""

    ADD_FEAT = "AddFeat"
    REMOVE_FEAT = "RemoveFeat"
    ADD_VOLUNTARY_FLAW = "AddVoluntaryFlaw"
    REMOVE_VOLUNTARY_FLAW = "RemoveVoluntaryFlaw"


class PrerequisiteType(StrEnum):
    """Prerequisite kinds the engine can evaluate."""

    ABILITY_SCORE = "AbilityScore"
    SKILL = "Skill"
    LEVEL = "Level"
    FEAT = "Feat"


class ComparisonOperator(StrEnum):
    """Comparison operators used by prerequisites."""

    GE = ">="
    GT = ">"
    EQ = "="
    LE = "<="
    LT = "<"

    def compare(self, actual: int, required: int) -> bool:
        """Evaluate ``actual <op> required``."""
        match self:
            case ComparisonOperator.GE:
                return actual >= required
            case ComparisonOperator.GT:
                return actual > required
            case ComparisonOperator.EQ:
                return actual == required
            case ComparisonOperator.LE:
                return actual <= required
            case ComparisonOperator.LT:
                return actual < required


__all__ = [
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
]
