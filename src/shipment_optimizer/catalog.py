# src/shipment_optimizer/catalog.py
from __future__ import annotations

from shipment_optimizer.models import BoxType

# Inner dims (inches), payload (lb), cost (USD). Envelopes through extra-large.
BOX_PRESETS_IN: dict[str, dict[str, float | str]] = {
    "small-envelope": {"name": "Small Envelope",  "length": 9,  "width": 6,  "height": 0.5,  "max_weight": 0.5, "cost": 1.50},
    "envelope":       {"name": "Padded Envelope", "length": 12, "width": 9,  "height": 0.75, "max_weight": 1,   "cost": 2.25},
    "large-envelope": {"name": "Large Envelope",  "length": 15, "width": 12, "height": 1,    "max_weight": 2,   "cost": 3.00},
    "small":          {"name": "Small Box",       "length": 10, "width": 7,  "height": 4,    "max_weight": 3,   "cost": 4.50},
    "medium":         {"name": "Medium Box",      "length": 14, "width": 10, "height": 6,    "max_weight": 10,  "cost": 6.50},
    "large":          {"name": "Large Box",       "length": 18, "width": 14, "height": 8,    "max_weight": 20,  "cost": 9.00},
    "xlarge":         {"name": "Extra Large Box", "length": 24, "width": 18, "height": 12,   "max_weight": 40,  "cost": 14.00},
}


def standard_catalog() -> list[BoxType]:
    """The standard 7-box catalog, cheapest first."""
    return [BoxType(id=box_id, **spec) for box_id, spec in BOX_PRESETS_IN.items()]


def get_box_type(preset: str) -> BoxType:
    key = preset.strip().lower()
    if key not in BOX_PRESETS_IN:
        raise ValueError(f"Unknown box preset '{preset}'. Valid: {sorted(BOX_PRESETS_IN.keys())}")
    return BoxType(id=key, **BOX_PRESETS_IN[key])
