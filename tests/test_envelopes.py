from __future__ import annotations

from shipment_optimizer.models import Item
from shipment_optimizer.packing.envelopes import EnvelopeRules, group_for_envelopes, is_envelope_eligible


def card(item_id: str = "card", quantity: int = 1, **kw) -> Item:
    return Item(id=item_id, length=9, width=6, height=0.3, weight=0.2, quantity=quantity, **kw)


def test_three_cards_become_one_envelope() -> None:
    """3 flat cards merge into a single synthetic envelope item."""
    grouping = group_for_envelopes([card(quantity=3)])

    assert len(grouping.items) == 1
    env = grouping.items[0]
    assert env.id == "envelope-1"
    assert env.quantity == 1
    assert env.contents == {"card": 3}
    assert (env.length, env.width, env.height) == (9, 6, 0.5)
    assert abs(env.weight - 0.6) < 1e-9


def test_separate_lines_share_an_envelope() -> None:
    grouping = group_for_envelopes([card("a"), card("b"), card("c")])

    assert len(grouping.clusters) == 1
    assert grouping.items[0].contents == {"a": 1, "b": 1, "c": 1}
    assert grouping.items[0].name == "Multiple Small Items (Envelope)"


def test_weight_limit_opens_a_new_envelope() -> None:
    heavy = Item(id="patch", length=10, width=8, height=0.5, weight=0.9, quantity=3)

    grouping = group_for_envelopes([heavy])

    assert [c.contents["patch"] for c in grouping.clusters] == [2, 1]
    assert [it.id for it in grouping.items] == ["envelope-1", "envelope-2"]


def test_envelope_ids_skip_taken_product_ids() -> None:
    """An input already named envelope-1 pushes the cluster to envelope-2."""
    box = Item(id="envelope-1", length=30, width=30, height=30, weight=5.0)

    grouping = group_for_envelopes([box, card(quantity=3)])

    assert [it.id for it in grouping.items] == ["envelope-2", "envelope-1"]
    assert grouping.items[0].contents == {"card": 3}
    assert grouping.items[1].contents == {}


def test_thickness_tolerance_splits_clusters() -> None:
    thin = Item(id="thin", length=9, width=6, height=0.2, weight=0.1)
    thick = Item(id="thick", length=9, width=6, height=1.0, weight=0.1)

    grouping = group_for_envelopes([thin, thick])

    # thin opens a 0.5 cluster; 1.0 is more than 0.25 away
    assert len(grouping.clusters) == 2


def test_small_items_are_padded_to_envelope_minimum() -> None:
    tiny = Item(id="sticker", length=3, width=2, height=0.1, weight=0.05)

    env = group_for_envelopes([tiny]).items[0]

    assert (env.length, env.width, env.height) == (9, 6, 0.5)


def test_ineligible_items_pass_through_after_envelopes() -> None:
    mug = Item(id="mug", length=5, width=4, height=4, weight=0.8)
    glass = card("glass-card", material="Glass")
    fragile = card("fragile-card", fragile=True)

    grouping = group_for_envelopes([mug, card(), glass, fragile])

    assert [it.id for it in grouping.items] == ["envelope-1", "mug", "glass-card", "fragile-card"]


def test_eligibility_limits() -> None:
    rules = EnvelopeRules()

    assert is_envelope_eligible(card(), rules)
    assert not is_envelope_eligible(Item(id="x", length=16, width=6, height=0.3, weight=0.2), rules)
    assert not is_envelope_eligible(Item(id="x", length=14, width=13, height=0.3, weight=0.2), rules)
    assert not is_envelope_eligible(Item(id="x", length=9, width=6, height=1.5, weight=0.2), rules)
    assert not is_envelope_eligible(Item(id="x", length=9, width=6, height=0.3, weight=2.5), rules)


def test_no_eligible_items_is_a_noop() -> None:
    box = Item(id="box", length=5, width=5, height=5, weight=1.0, quantity=2)

    grouping = group_for_envelopes([box])

    assert grouping.clusters == []
    assert grouping.items == [box]
