from __future__ import annotations

import pytest

from gardenforge.balance.strength import stage_strength, strength_from_parts
from tests.helpers.content import make_mission, make_unit, roster_of


def _roster():
    return roster_of(
        make_unit("a", hp=1000, atk=50, speed=30),   # power 86
        make_unit("b", hp=200, atk=10, speed=10),    # power 25.2
    )


def test_stage_strength_components() -> None:
    m = make_mission("s1", "normal", [("a", 10, 1000), ("b", 10, 1000)], castle_hp=3500)
    s = stage_strength(m, _roster())

    assert s.enemy_count == 20
    assert s.enemy_power == pytest.approx(86 * 10 + 25.2 * 10)
    assert s.wave_density == pytest.approx(1.0)
    assert s.castle_score == pytest.approx(0.35)
    assert s.count_score == pytest.approx(40.0)
    assert s.power_score == pytest.approx(1112 * 0.05)
    assert s.density_score == pytest.approx(50.0)
    assert s.strength == pytest.approx(0.35 + 40 + 55.6 + 50)
    assert s.missing == []


def test_interval_stats() -> None:
    m = make_mission("s1", "normal", [("a", 2, 1200), ("b", 2, 800)])
    s = stage_strength(m, _roster())
    assert s.wave_count == 2
    assert s.min_interval_ms == 800
    assert s.max_interval_ms == 1200
    assert s.avg_interval_ms == pytest.approx(1000.0)


def test_unknown_combatant_counts_but_has_no_power() -> None:
    m = make_mission("s1", "normal", [("ghost", 5, 1000), ("ghost", 1, 1000)])
    s = stage_strength(m, _roster())
    assert s.enemy_count == 6
    assert s.enemy_power == 0.0
    assert s.missing == ["ghost"]


def test_no_waves_gives_zero_density() -> None:
    m = make_mission("empty", "normal", [], castle_hp=10000)
    s = stage_strength(m, _roster())
    assert s.wave_density == 0.0
    assert s.strength == pytest.approx(1.0)


def test_zero_interval_does_not_divide_by_zero() -> None:
    m = make_mission("burst", "normal", [("a", 4, 0)])
    s = stage_strength(m, _roster())
    assert s.wave_density == 0.0
    assert s.enemy_count == 4


def test_strength_is_monotone_in_each_input() -> None:
    base = strength_from_parts(1000, 10, 100, 1.0)
    assert strength_from_parts(1001, 10, 100, 1.0) > base
    assert strength_from_parts(1000, 11, 100, 1.0) > base
    assert strength_from_parts(1000, 10, 101, 1.0) > base
    assert strength_from_parts(1000, 10, 100, 1.1) > base


def test_strength_matches_the_formula() -> None:
    m = make_mission("s1", "hard", [("a", 3, 700), ("b", 6, 1100)], castle_hp=8000)
    s = stage_strength(m, _roster())
    assert s.strength == pytest.approx(strength_from_parts(8000, s.enemy_count, s.enemy_power, s.wave_density))
    assert s.strength == pytest.approx(s.castle_score + s.count_score + s.power_score + s.density_score)
