"""Tests for typed bonus and penalty stacking."""

from __future__ import annotations

from collections.abc import Callable

from pathfinder_engine.engine.stacking import resolve
from pathfinder_engine.models.enums import ModifierTarget, ModifierType
from pathfinder_engine.models.modifiers import Modifier


STR = ModifierTarget.STRENGTH


class TestUntypedStacking:
    """Untyped modifiers always add up."""

    def test_untyped_sum(self, make_modifier: Callable[..., Modifier]) -> None:
        """Bonuses and penalties without a type are simply summed."""
        result = resolve(
            [
                make_modifier(STR, 2, source_name="Training"),
                make_modifier(STR, 1, source_name="Blessing"),
                make_modifier(STR, -1, source_name="Fatigue"),
            ]
        )

        assert result.total_value == 2
        assert result.stacking_warnings == []
        assert len(result.applied) == 3

    def test_untyped_with_typed(self, make_modifier: Callable[..., Modifier]) -> None:
        result = resolve(
            [
                make_modifier(STR, 1),
                make_modifier(STR, 2, ModifierType.STATUS),
            ]
        )
        assert result.total_value == 3


class TestTypedStacking:
    """Typed modifiers keep only the largest bonus and worst penalty."""

    def test_different_types_stack(self, make_modifier: Callable[..., Modifier]) -> None:
        """Enhancement +2 and Item +1 are different types and both apply."""
        result = resolve(
            [
                make_modifier(STR, 2, ModifierType.ENHANCEMENT, "Bull's Strength"),
                make_modifier(STR, 1, ModifierType.ITEM, "Gloves"),
            ]
        )

        assert result.total_value == 3
        assert result.stacking_warnings == []

    def test_same_type_keeps_highest(self, make_modifier: Callable[..., Modifier]) -> None:
        """Item +1 and Item +3: only the +3 applies and both sources are named."""
        result = resolve(
            [
                make_modifier(STR, 1, ModifierType.ITEM, "Gloves"),
                make_modifier(STR, 3, ModifierType.ITEM, "Belt"),
            ]
        )

        assert result.total_value == 3
        assert len(result.stacking_warnings) == 1
        warning = result.stacking_warnings[0]
        assert warning == (
            "Multiple Item bonuses from: Gloves, Belt. "
            "Only the highest applies: Belt (+3); suppressed: Gloves (+1)."
        )
        assert [s.source_name for s in result.suppressed] == ["Gloves"]

    def test_warning_lists_every_suppressed_source(
        self, make_modifier: Callable[..., Modifier]
    ) -> None:
        result = resolve(
            [
                make_modifier(STR, 2, ModifierType.CIRCUMSTANCE, "Aid"),
                make_modifier(STR, 1, ModifierType.CIRCUMSTANCE, "Flanking"),
                make_modifier(STR, 4, ModifierType.CIRCUMSTANCE, "Cover"),
            ]
        )

        assert result.total_value == 4
        assert result.stacking_warnings[0].endswith(
            "Only the highest applies: Cover (+4); suppressed: Aid (+2), Flanking (+1)."
        )

    def test_same_type_penalties_keep_worst(
        self, make_modifier: Callable[..., Modifier]
    ) -> None:
        result = resolve(
            [
                make_modifier(STR, -1, ModifierType.STATUS, "Enfeebled 1"),
                make_modifier(STR, -2, ModifierType.STATUS, "Enfeebled 2"),
            ]
        )

        assert result.total_value == -2
        assert result.stacking_warnings == [
            "Multiple Status penalties from: Enfeebled 1, Enfeebled 2. "
            "Only the worst applies: Enfeebled 2 (-2); suppressed: Enfeebled 1 (-1)."
        ]

    def test_bonus_and_penalty_of_same_type(
        self, make_modifier: Callable[..., Modifier]
    ) -> None:
        """A bonus and a penalty of one type are evaluated independently."""
        result = resolve(
            [
                make_modifier(STR, 2, ModifierType.STATUS, "Heroism"),
                make_modifier(STR, -1, ModifierType.STATUS, "Frightened"),
            ]
        )

        assert result.total_value == 1
        assert result.stacking_warnings == []

    def test_one_warning_per_group(self, make_modifier: Callable[..., Modifier]) -> None:
        result = resolve(
            [
                make_modifier(STR, 1, ModifierType.ITEM, "A"),
                make_modifier(STR, 2, ModifierType.ITEM, "B"),
                make_modifier(STR, 3, ModifierType.ITEM, "C"),
            ]
        )

        assert result.total_value == 3
        assert len(result.stacking_warnings) == 1
        assert len(result.suppressed) == 2

    def test_idempotent(self, make_modifier: Callable[..., Modifier]) -> None:
        """Resolving the same list twice gives identical totals and warnings."""
        modifiers = [
            make_modifier(STR, 1, ModifierType.ITEM, "Gloves"),
            make_modifier(STR, 3, ModifierType.ITEM, "Belt"),
        ]

        first = resolve(modifiers)
        second = resolve(modifiers)

        assert first.total_value == second.total_value
        assert first.stacking_warnings == second.stacking_warnings


class TestFiltering:
    """Inactive and zero-valued modifiers are ignored."""

    def test_inactive_ignored(self, make_modifier: Callable[..., Modifier]) -> None:
        result = resolve(
            [
                make_modifier(STR, 4, ModifierType.ITEM, "Broken Belt", active=False),
                make_modifier(STR, 1, ModifierType.ITEM, "Gloves"),
            ]
        )

        assert result.total_value == 1
        assert result.stacking_warnings == []

    def test_zero_ignored(self, make_modifier: Callable[..., Modifier]) -> None:
        result = resolve([make_modifier(STR, 0, ModifierType.ITEM, "Blank")])
        assert result.total_value == 0
        assert result.applied == []

    def test_empty(self) -> None:
        assert resolve([]).total_value == 0


class TestTieBreak:
    """Equal bonuses resolve by ascending priority."""

    def test_lower_priority_applied(self, make_modifier: Callable[..., Modifier]) -> None:
        result = resolve(
            [
                make_modifier(STR, 2, ModifierType.ITEM, "Late", priority=5),
                make_modifier(STR, 2, ModifierType.ITEM, "Early", priority=1),
            ]
        )

        assert result.total_value == 2
        assert [s.source_name for s in result.applied] == ["Early"]
        assert [s.source_name for s in result.suppressed] == ["Late"]
