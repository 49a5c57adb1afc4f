from __future__ import annotations

import pytest

from shipment_optimizer.models import ScoreWeights
from shipment_optimizer.scoring import TrialFeatures, min_max_normalize, score_trials


def test_normalize_spreads_values_to_unit_range() -> None:
    assert min_max_normalize([1.0, 2.0, 3.0]) == [0.0, 0.5, 1.0]


def test_normalize_single_trial_is_zero() -> None:
    """A lone trial must not divide by zero."""
    assert min_max_normalize([4.5]) == [0.0]


def test_normalize_equal_values_are_zero() -> None:
    assert min_max_normalize([6.5, 6.5, 6.5]) == [0.0, 0.0, 0.0]


def test_normalize_empty() -> None:
    assert min_max_normalize([]) == []


def test_score_trials_prefers_cheap_snug_box() -> None:
    weights = ScoreWeights()
    features = [
        TrialFeatures(cost=4.5, void_ratio=0.2, dim_weight=2.0),
        TrialFeatures(cost=14.0, void_ratio=0.9, dim_weight=37.3),
    ]

    cheap, expensive = score_trials(features, weights)

    assert cheap == pytest.approx(0.25 * 0.2 + 0.05)
    assert expensive == pytest.approx(0.6 + 0.25 * 0.9 + 0.1 + 0.05)
    assert cheap < expensive


def test_single_trial_scores_void_and_count_only() -> None:
    weights = ScoreWeights()

    (only,) = score_trials([TrialFeatures(cost=9.0, void_ratio=0.5, dim_weight=11.6)], weights)

    assert only == pytest.approx(0.25 * 0.5 + 0.05 * 1)


def test_custom_weights() -> None:
    weights = ScoreWeights(cost=0.0, void=1.0, dim=0.0, count=0.0)
    features = [
        TrialFeatures(cost=1.0, void_ratio=0.7, dim_weight=1.0),
        TrialFeatures(cost=99.0, void_ratio=0.1, dim_weight=99.0),
    ]

    scores = score_trials(features, weights)

    assert scores == pytest.approx([0.7, 0.1])
