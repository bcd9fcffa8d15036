"""Ranking arithmetic."""

import pytest

from eodsa_api.app.services.ranking import compute_rankings, group_by_performance, score_value


def test_score_value_is_mean_of_criteria():
    assert score_value((8, 7, 9, 8)) == pytest.approx(8.0)
    assert score_value((7.5, 8.5, 6, 9)) == pytest.approx(7.75)


def test_average_and_total_across_judges():
    ranked = compute_rankings({"prf_a": [(8, 8, 8, 8), (6, 6, 6, 6)]})
    assert len(ranked) == 1
    only = ranked[0]
    assert only.rank == 1
    assert only.judge_count == 2
    assert only.total_score == pytest.approx(14.0)
    assert only.average_score == pytest.approx(7.0)


def test_orders_by_average_descending():
    ranked = compute_rankings(
        {
            "prf_low": [(5, 5, 5, 5)],
            "prf_high": [(9, 9, 9, 9)],
            # More judges raise the total but not the average.
            "prf_mid": [(7, 7, 7, 7), (7, 7, 7, 7), (7, 7, 7, 7)],
        }
    )
    assert [r.performance_id for r in ranked] == ["prf_high", "prf_mid", "prf_low"]
    assert [r.rank for r in ranked] == [1, 2, 3]


def test_ties_broken_by_performance_id():
    ranked = compute_rankings({"prf_b": [(8, 8, 8, 8)], "prf_a": [(8, 8, 8, 8)], "prf_c": [(9, 7, 8, 8)]})
    assert [r.performance_id for r in ranked] == ["prf_a", "prf_b", "prf_c"]
    assert [r.rank for r in ranked] == [1, 2, 3]


def test_unscored_performances_are_not_ranked():
    assert compute_rankings({"prf_a": []}) == []
    assert compute_rankings({}) == []


def test_group_by_performance():
    grouped = group_by_performance([("a", (1, 1, 1, 1)), ("b", (2, 2, 2, 2)), ("a", (3, 3, 3, 3))])
    assert grouped == {"a": [(1, 1, 1, 1), (3, 3, 3, 3)], "b": [(2, 2, 2, 2)]}
