"""Read-only feat catalogue abstraction.

The engine does not own reference data. It resolves feats and their
prerequisites through a FeatRepository supplied by the embedding
application. The repository is synchronous; an async data layer should
wrap it at its own boundary.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from pathfinder_engine.core.exceptions import FeatNotFoundError
from pathfinder_engine.core.logging import get_logger
from pathfinder_engine.models.enums import ComparisonOperator, PrerequisiteType


logger = get_logger(__name__)


class Prerequisite(BaseModel):
    """A single requirement a character must meet to take a feat.

    Attributes:
        type: Prerequisite kind.
        target: Ability, skill or feat id being tested. Unused for Level.
        operator: Comparison applied as ``actual <op> value``.
        value: Required score, proficiency rank value or level. For Feat
            prerequisites it is ignored.
    """

    model_config = ConfigDict(frozen=True)

    type: PrerequisiteType
    target: str = ""
    operator: ComparisonOperator = ComparisonOperator.GE
    value: int = 0

    def describe(self) -> str:
        if self.type == PrerequisiteType.FEAT:
            return f"Feat {self.target}"
        if self.type == PrerequisiteType.LEVEL:
            return f"Level {self.operator.value} {self.value}"
        return f"{self.target} {self.operator.value} {self.value}"


class Feat(BaseModel):
    """A catalogue feat."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    level: int = Field(default=1, ge=0)
    feat_type: str = "General"
    traits: tuple[str, ...] = ()
    prerequisites: tuple[Prerequisite, ...] = ()
    archetype_id: str | None = None
    is_dedication: bool = False


class FeatRepository(ABC):
    """Read-only access to the feat catalogue."""

    @abstractmethod
    def get_feat(self, feat_id: str) -> Feat:
        """Resolve a feat by id.

        Raises:
            FeatNotFoundError: If the id is unknown.
        """

    @abstractmethod
    def list_feats(self) -> list[Feat]:
        """List every feat in the catalogue."""

    def find_dedication(self, archetype_id: str) -> Feat | None:
        """Find the dedication feat of an archetype, if catalogued."""
        key = archetype_id.lower()
        for feat in self.list_feats():
            if feat.is_dedication and (feat.archetype_id or "").lower() == key:
                return feat
        return None


class InMemoryFeatRepository(FeatRepository):
    """Dictionary-backed feat repository keyed by lower-cased feat id."""

    def __init__(self, feats: Iterable[Feat] = ()) -> None:
        self._feats: dict[str, Feat] = {}
        for feat in feats:
            self.add(feat)

    def add(self, feat: Feat) -> None:
        self._feats[feat.id.lower()] = feat

    def get_feat(self, feat_id: str) -> Feat:
        feat = self._feats.get(feat_id.lower())
        if feat is None:
            logger.debug("Feat lookup missed", feat_id=feat_id)
            raise FeatNotFoundError(f"Feat not found: {feat_id}", feat_id=feat_id)
        return feat

    def list_feats(self) -> list[Feat]:
        return list(self._feats.values())

    def __len__(self) -> int:
        return len(self._feats)

    def __contains__(self, feat_id: object) -> bool:
        return isinstance(feat_id, str) and feat_id.lower() in self._feats


__all__ = [
    "Prerequisite",
    "Feat",
    "FeatRepository",
    "InMemoryFeatRepository",
]
