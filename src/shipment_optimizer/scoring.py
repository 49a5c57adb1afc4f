"""Weighted scoring of box trials. Lower score is better."""

from __future__ import annotations

from dataclasses import dataclass

from shipment_optimizer.models import ScoreWeights

EPS = 1e-9


@dataclass(frozen=True)
class TrialFeatures:
    cost: float
    void_ratio: float
    dim_weight: float
    box_count: int = 1


def min_max_normalize(values: list[float]) -> list[float]:
    """
    Scale values into [0, 1] across one round.

    When all values are equal (or there is only one) every entry maps to 0.
    """
    if not values:
        return []
    lo = min(values)
    hi = max(values)
    span = max(EPS, hi - lo)
    return [(v - lo) / span for v in values]


def score(cost: float, void_ratio: float, dim_weight: float, box_count: float, weights: ScoreWeights) -> float:
    return (
        weights.cost * cost
        + weights.void * void_ratio
        + weights.dim * dim_weight
        + weights.count * box_count
    )


def score_trials(features: list[TrialFeatures], weights: ScoreWeights) -> list[float]:
    """
    Score every trial of a round.

    cost and dim_weight are min-max normalized across the round; void_ratio
    is already in [0, 1] and box_count is used as is.
    """
    costs = min_max_normalize([f.cost for f in features])
    dims = min_max_normalize([f.dim_weight for f in features])
    return [
        score(c, f.void_ratio, d, f.box_count, weights)
        for f, c, d in zip(features, costs, dims)
    ]
