"""Free Archetype variant rule.

Characters gain an extra archetype feat slot at every even level. Feats in
those slots still obey the dedication rule: an archetype's dedication must
be selected before any other feat from that archetype.

Archetype membership of a selected feat is resolved from the catalogue
when one is configured, then from the selection's own archetype hint, and
finally from the naming convention that dedication ids end in
'dedication' (e.g. 'wizard-dedication').
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from pathfinder_engine.core.constants import ARCHETYPE_SLOT
from pathfinder_engine.core.exceptions import FeatNotFoundError
from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.engine.rule_modules.base import RuleModule
from pathfinder_engine.models.calculated import CalculatedCharacter, FeatSlot, FixAction
from pathfinder_engine.models.catalogue import FeatRepository
from pathfinder_engine.models.character import Character, FeatSelection
from pathfinder_engine.models.enums import (
    FixActionKind,
    ValidationSeverity,
    VariantRuleType,
)


logger = get_logger(__name__)

CATEGORY = "Free Archetype"
_DEDICATION_SUFFIX = re.compile(r"[\s_-]*dedication$", re.IGNORECASE)


def _normalize(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


class ArchetypeInfo(BaseModel):
    """Archetype membership of one selected feat."""

    model_config = ConfigDict(frozen=True)

    feat_id: str
    archetype: str
    is_dedication: bool


class FreeArchetypeModule(RuleModule):
    """Add even-level archetype slots and enforce dedication ordering."""

    name = "Free Archetype"
    priority = 200
    rule_type = VariantRuleType.FREE_ARCHETYPE

    def __init__(self, catalogue: FeatRepository | None = None) -> None:
        self._catalogue = catalogue

    def on_slots(self, character: Character, calculated: CalculatedCharacter) -> None:
        slots = calculated.get_slots(ARCHETYPE_SLOT)
        present = {slot.level for slot in slots}
        for level in range(2, calculated.level + 1, 2):
            if level in present:
                continue
            slots.append(
                FeatSlot(
                    slot_type=ARCHETYPE_SLOT,
                    level=level,
                    category=CATEGORY,
                    is_required=False,
                )
            )

    def on_validation(self, character: Character, calculated: CalculatedCharacter) -> None:
        filled = [
            slot for slot in calculated.feat_slots.get(ARCHETYPE_SLOT, []) if slot.is_filled
        ]
        if filled:
            self._validate_dedications(character, calculated, filled)

        calculated.add_issue(
            ValidationSeverity.INFO,
            CATEGORY,
            "You gain archetype feats at even levels that don't count against your "
            "normal class feat progression",
        )

    # -------------------------------------------------------------------------
    # Dedication checks
    # -------------------------------------------------------------------------

    def _validate_dedications(
        self,
        character: Character,
        calculated: CalculatedCharacter,
        filled: list[FeatSlot],
    ) -> None:
        selections = {sel.feat_id.lower(): sel for sel in character.feat_selections}

        # Earliest level each archetype's dedication was taken, across all slots.
        dedication_levels: dict[str, int] = {}
        display_names: dict[str, str] = {}
        for sel in character.feat_selections:
            info = self.resolve_archetype(sel.feat_id, sel, known=())
            if info and info.is_dedication:
                key = _normalize(info.archetype)
                dedication_levels[key] = min(dedication_levels.get(key, sel.level), sel.level)
                display_names.setdefault(key, info.archetype)
        for slot in filled:
            info = self.resolve_archetype(
                slot.selected_feat_id, selections.get(slot.selected_feat_id.lower()), known=()
            )
            if info and info.is_dedication:
                key = _normalize(info.archetype)
                dedication_levels[key] = min(dedication_levels.get(key, slot.level), slot.level)
                display_names.setdefault(key, info.archetype)

        known = tuple(display_names.values())
        for slot in filled:
            info = self.resolve_archetype(
                slot.selected_feat_id,
                selections.get(slot.selected_feat_id.lower()),
                known=known,
            )
            if info is None or info.is_dedication:
                continue

            key = _normalize(info.archetype)
            taken_at = dedication_levels.get(key)
            if taken_at is not None and taken_at <= slot.level:
                continue

            archetype = display_names.get(key, info.archetype)
            calculated.add_issue(
                ValidationSeverity.ERROR,
                CATEGORY,
                f"You must take the {archetype} Dedication feat before taking other "
                f"{archetype} archetype feats",
                fix_action=FixAction(
                    kind=FixActionKind.ADD_FEAT, target=self._dedication_id(archetype)
                ),
                data={"feat_id": info.feat_id, "archetype": archetype, "slot_level": slot.level},
            )

    def resolve_archetype(
        self,
        feat_id: str,
        selection: FeatSelection | None = None,
        known: tuple[str, ...] = (),
    ) -> ArchetypeInfo | None:
        """Work out which archetype a feat belongs to, if any.

        Args:
            feat_id: The selected feat id.
            selection: The player's selection record, for its archetype hint.
            known: Archetype names already identified, used to match
                non-dedication feats by id prefix.

        Returns:
            The archetype membership, or None when the feat is not an
            archetype feat as far as the engine can tell.
        """
        if self._catalogue is not None:
            try:
                feat = self._catalogue.get_feat(feat_id)
            except FeatNotFoundError:
                logger.debug("Archetype lookup fell back to hints", feat_id=feat_id)
            else:
                if feat.archetype_id:
                    return ArchetypeInfo(
                        feat_id=feat_id,
                        archetype=feat.archetype_id,
                        is_dedication=feat.is_dedication,
                    )

        if selection is not None and selection.archetype:
            return ArchetypeInfo(
                feat_id=feat_id,
                archetype=selection.archetype,
                is_dedication=selection.is_dedication
                or bool(_DEDICATION_SUFFIX.search(feat_id)),
            )

        if _DEDICATION_SUFFIX.search(feat_id):
            archetype = _DEDICATION_SUFFIX.sub("", feat_id).strip()
            if archetype:
                return ArchetypeInfo(feat_id=feat_id, archetype=archetype, is_dedication=True)

        normalized = _normalize(feat_id)
        for archetype in known:
            if normalized.startswith(_normalize(archetype)):
                return ArchetypeInfo(feat_id=feat_id, archetype=archetype, is_dedication=False)
        return None

    def _dedication_id(self, archetype: str) -> str:
        if self._catalogue is not None:
            dedication = self._catalogue.find_dedication(archetype)
            if dedication is not None:
                return dedication.id
        slug = re.sub(r"[^a-z0-9]+", "-", archetype.lower()).strip("-")
        return f"{slug}-dedication"


__all__ = ["ArchetypeInfo", "FreeArchetypeModule"]
