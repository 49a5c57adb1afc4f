from __future__ import annotations

import pytest

from shipment_optimizer.catalog import standard_catalog
from shipment_optimizer.errors import ItemValidationError, PackingError
from shipment_optimizer.geometry import boxes_overlap, placement_bounds
from shipment_optimizer.metrics import placed_item_counts
from shipment_optimizer.models import BoxType, Item, OptimizeOptions, Placement
from shipment_optimizer.packing.multi_box import (
    CUSTOM_BOX_ID,
    consume_units,
    custom_box_for,
    expand_units,
    select_boxes,
)

EPS = 1e-9


def assert_within_box(box, placements):
    for p in placements:
        x1, y1, z1, x2, y2, z2 = placement_bounds(p)
        assert x1 >= 0 and y1 >= 0 and z1 >= 0
        assert x2 <= box.width + EPS
        assert y2 <= box.length + EPS
        assert z2 <= box.height + EPS


def assert_no_overlaps(placements):
    bounds = [placement_bounds(p) for p in placements]
    for i in range(len(bounds)):
        for j in range(i + 1, len(bounds)):
            assert not boxes_overlap(bounds[i], bounds[j])


def assert_valid_plan(plan, items):
    """Conservation, geometry, weight and volume bounds."""
    assert placed_item_counts(plan) == {it.id: it.quantity for it in items}
    for bp in plan.packings:
        assert_within_box(bp.box, bp.pack.placements)
        assert_no_overlaps(bp.pack.placements)
        assert bp.pack.total_weight <= bp.box.max_weight + EPS
        assert bp.pack.used_volume <= bp.box.volume + EPS
        assert 0.0 <= bp.pack.void_ratio <= 1.0


def tote_and_lego() -> list[Item]:
    return [
        Item(id="tote", name="Canvas Tote Bag", length=15, width=12, height=6, weight=0.8, quantity=3),
        Item(id="lego", name="LEGO Architecture Set", length=18, width=14, height=3, weight=2.5),
    ]


def test_tote_and_lego_beats_individual_shipping() -> None:
    """3 totes and a LEGO set need fewer than 4 boxes and less than $36."""
    items = tote_and_lego()

    plan = select_boxes(items, standard_catalog())

    assert plan.summary.total_boxes < 4
    assert plan.summary.total_cost < 36.0
    assert_valid_plan(plan, items)


def test_tote_and_lego_consolidates_into_two_boxes() -> None:
    plan = select_boxes(tote_and_lego(), standard_catalog())

    assert [bp.box.id for bp in plan.packings] == ["xlarge", "large"]
    assert plan.summary.total_cost == pytest.approx(23.0)


def test_selection_is_deterministic() -> None:
    items = tote_and_lego() + [
        Item(id="mug", length=5, width=4, height=4, weight=0.9, quantity=4),
        Item(id="book", length=9, width=6, height=1.5, weight=1.1, quantity=2),
    ]

    first = select_boxes(items, standard_catalog())
    second = select_boxes(items, standard_catalog())

    assert first.model_dump() == second.model_dump()
    assert_valid_plan(first, items)


def test_many_small_items_conserved() -> None:
    items = [
        Item(id="A", length=4, width=3, height=2, weight=0.4, quantity=25),
        Item(id="B", length=7, width=5, height=3, weight=1.2, quantity=6),
        Item(id="C", length=11, width=9, height=2, weight=2.0, quantity=3),
    ]

    plan = select_boxes(items, standard_catalog())

    assert plan.summary.total_boxes >= 1
    assert_valid_plan(plan, items)


def test_weight_overflow_falls_back_per_unit() -> None:
    """
    15 lb units: every catalog trial overflows until only two units are
    left, which then fit the 40 lb box together.
    """
    items = [Item(id="anvil", length=4, width=4, height=4, weight=15.0, quantity=5)]

    plan = select_boxes(items, standard_catalog())

    assert [bp.box.id for bp in plan.packings] == [CUSTOM_BOX_ID] * 3 + ["xlarge"]
    assert_valid_plan(plan, items)


def test_oversized_item_uses_custom_box() -> None:
    """Larger than every catalog box in every orientation."""
    items = [Item(id="kayak", length=30, width=30, height=30, weight=10.0)]

    plan = select_boxes(items, standard_catalog())

    assert plan.summary.total_boxes == 1
    bp = plan.packings[0]
    assert bp.box.id == CUSTOM_BOX_ID
    assert (bp.box.length, bp.box.width, bp.box.height) == (32, 32, 32)
    assert bp.box.cost == 2.0
    assert bp.box.max_weight == 20.0
    assert_valid_plan(plan, items)


def test_custom_box_settings_are_configurable() -> None:
    unit = Item(id="x", length=10, width=8, height=6, weight=1.0)
    options = OptimizeOptions(custom_box_margin=1.0, custom_box_base_cost=5.0, custom_box_min_weight=3.0)

    box = custom_box_for(unit, options)

    assert (box.length, box.width, box.height) == (11, 9, 7)
    assert box.cost == 5.0
    assert box.max_weight == 3.0


def test_empty_items_give_empty_plan() -> None:
    plan = select_boxes([], standard_catalog())

    assert plan.packings == []
    assert plan.summary.total_boxes == 0


def test_ship_together_always_raises_when_split_needed() -> None:
    small = BoxType(id="small", cost=4.5, length=10, width=7, height=4, max_weight=3)
    items = [Item(id="brick", length=10, width=7, height=4, weight=1.0, quantity=2)]

    with pytest.raises(PackingError):
        select_boxes(items, [small], OptimizeOptions(ship_together="always"))

    plan = select_boxes(items, [small], OptimizeOptions(ship_together="if_possible"))
    assert plan.summary.total_boxes == 2


def test_ship_together_always_single_box() -> None:
    items = [Item(id="mug", length=5, width=4, height=4, weight=0.9, quantity=2)]

    plan = select_boxes(items, standard_catalog(), OptimizeOptions(ship_together="always"))

    assert plan.summary.total_boxes == 1
    assert_valid_plan(plan, items)


def test_round_budget_exhaustion_raises() -> None:
    small = BoxType(id="small", cost=4.5, length=10, width=7, height=4, max_weight=3)
    items = [Item(id="brick", length=10, width=7, height=4, weight=1.0, quantity=3)]

    with pytest.raises(PackingError):
        select_boxes(items, [small], OptimizeOptions(max_rounds=2, ship_together="if_possible"))


def test_expand_units_orders_by_total_volume() -> None:
    items = [
        Item(id="big-single", length=5, width=5, height=5, weight=1.0),
        Item(id="many-small", length=2, width=2, height=2, weight=0.1, quantity=20),
    ]

    units = expand_units(items)

    # 8 * 20 = 160 > 125
    assert units[0].id == "many-small"
    assert units[-1].id == "big-single"
    assert len(units) == 21
    assert all(u.quantity == 1 for u in units)


def test_consume_units_matches_by_id_and_count() -> None:
    remaining = [Item(id=i, length=1, width=1, height=1, weight=1.0) for i in ["a", "b", "a", "c", "a"]]
    placements = [
        Placement(item_id="a", instance=0, x=0, y=0, z=0, length=1, width=1, height=1),
        Placement(item_id="a", instance=1, x=1, y=0, z=0, length=1, width=1, height=1),
        Placement(item_id="c", instance=2, x=2, y=0, z=0, length=1, width=1, height=1),
    ]

    kept = consume_units(remaining, placements)

    assert [u.id for u in kept] == ["b", "a"]


def test_duplicate_item_ids_rejected() -> None:
    """Units are matched back by id, so two shapes under one id cannot be told apart."""
    items = [
        Item(id="A", length=30, width=30, height=30, weight=5.0),
        Item(id="A", length=10, width=7, height=4, weight=1.0),
    ]

    with pytest.raises(ItemValidationError) as exc:
        select_boxes(items, standard_catalog(), OptimizeOptions(envelopes=False))

    assert "A" in str(exc.value)
