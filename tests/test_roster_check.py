from __future__ import annotations

import pytest

from gardenforge.balance.roster_check import (
    check_roster, detect_role, find_anomalies, role_anomalies, tier_averages, tier_stats,
)
from tests.helpers.content import make_unit, roster_of


def test_unit_inside_bands_is_clean() -> None:
    u = make_unit("rose", "R", hp=800, atk=80, cd=1000, cost=150)
    assert find_anomalies([u], "R") == []


def test_out_of_band_stats_are_reported() -> None:
    u = make_unit("weed", "SR", hp=100, atk=900, cd=1000, cost=400, spawn_cd=2000)
    [a] = find_anomalies([u], "SR")
    assert a.combatant_id == "weed"
    text = " | ".join(a.issues)
    assert "hp too low" in text
    assert "atk too high" in text
    assert "dps too high" in text
    assert "spawn cd too low" in text
    assert "cost" not in text


def test_unknown_rarity_has_no_band() -> None:
    assert find_anomalies([make_unit("x", "LEGEND", hp=1)], "LEGEND") == []


def test_tier_stats() -> None:
    units = [make_unit("a", "N", hp=100, cost=20), make_unit("b", "N", hp=300, cost=60, spawn_cd=1500)]
    st = tier_stats("N", units)
    assert st.count == 2
    assert (st.hp.min, st.hp.max, st.hp.avg) == (100, 300, 200)
    assert st.cost.avg == pytest.approx(40)
    assert st.spawn_cd.min == 1500


def test_check_roster_walks_every_tier() -> None:
    roster = roster_of(
        make_unit("ok", "N", hp=300, atk=30, cost=50),
        make_unit("cheap_ur", "UR", hp=12000, atk=2000, cd=2000, cost=10),
    )
    stats, anomalies = check_roster(roster)
    assert list(stats) == ["N", "UR"]
    assert [a.combatant_id for a in anomalies] == ["cheap_ur"]


def test_stored_role_is_checked_against_tier_averages() -> None:
    slow_tank = make_unit("wall", "N", hp=100, speed=60)
    slow_tank.role = "tank"
    short_ranger = make_unit("bow", "N", hp=300, rng=100)
    short_ranger.role = "ranger"
    grounded = make_unit("kite", "N", hp=200)
    grounded.role = "flying"

    found = {m.combatant_id: m for m in role_anomalies(roster_of(slow_tank, short_ranger, grounded))}
    assert sorted(found) == ["bow", "kite", "wall"]
    assert found["wall"].issues == ["tank with low hp: 100 (expected 260+)", "tank too fast: 60 (expected ~50)"]
    assert "ranger range too short" in found["bow"].issues[0]
    assert found["kite"].issues == ["flying role but is_flying is false"]


def test_unlabelled_units_use_detected_role() -> None:
    roster = roster_of(
        make_unit("big", "N", hp=1000, atk=5, speed=30),
        make_unit("small", "N", hp=100, atk=50, rng=200),
        make_unit("bird", "N", flying=True),
    )
    avg = tier_averages(roster.all())
    assert avg.hp == 400
    assert detect_role(roster.get("big"), avg) == "tank"
    assert detect_role(roster.get("small"), avg) == "ranger"
    assert detect_role(roster.get("bird"), avg) == "flying"
    assert role_anomalies(roster) == []
