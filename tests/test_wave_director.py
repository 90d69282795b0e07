from __future__ import annotations

import pytest

from gardenforge.core.config import PACKAGE_DATA
from gardenforge.core.difficulty import DIFFICULTY_PROFILES, DifficultyProfile
from gardenforge.core.errors import DuplicateMissionError, EmptyRosterError, UnknownDifficultyError
from gardenforge.core.storage import RosterStore
from gardenforge.systems.wave_director import WaveDirector, create_mission
from tests.helpers.content import basic_roster, catalog_of, make_mission, make_unit, roster_of


def test_plan_for_normal_profile() -> None:
    plan = WaveDirector(basic_roster()).plan(DIFFICULTY_PROFILES["normal"])
    assert plan.wave_count == 5
    assert plan.enemies_per_wave == 10
    assert [c.id for c in plan.pool] == ["weak", "mid", "fast", "brute"]


def test_generate_normal_mission() -> None:
    m = WaveDirector(basic_roster()).generate(DIFFICULTY_PROFILES["normal"], "stage_x")

    assert [w.count for w in m.waves] == [8, 9, 10, 10, 11]
    assert [w.interval_ms for w in m.waves] == [1200, 1100, 1000, 900, 800]
    assert [w.spawn_time_ms for w in m.waves] == [2000, 13600, 25500, 37500, 48500]
    assert [w.combatant_id for w in m.waves] == ["weak", "weak", "mid", "mid", "fast"]

    assert m.length == 2000
    assert m.base_castle_hp == 700
    assert m.enemy_castle_hp == 3500
    assert m.reward.currency == 1750
    assert m.name_key == "stage_x_name"
    assert m.description_key == "stage_x_desc"
    assert m.difficulty == "normal"
    assert m.zone == "world1"


def test_wave_count_is_clamped() -> None:
    roster = basic_roster()
    small = DifficultyProfile("tiny", 10, 100, 7, ("N",))
    big = DifficultyProfile("huge", 10, 100, 1000, ("N",))
    assert WaveDirector(roster).plan(small).wave_count == 5
    assert WaveDirector(roster).plan(big).wave_count == 10


def test_single_eligible_unit_fills_every_wave() -> None:
    roster = roster_of(make_unit("only", "UR", hp=9000, atk=900, speed=30), make_unit("n1", "N"))
    m = WaveDirector(roster).generate(DifficultyProfile("x", 1, 1000, 200, ("UR",)), "s")
    assert {w.combatant_id for w in m.waves} == {"only"}


def test_strongest_fifth_is_never_drawn() -> None:
    units = [make_unit(f"u{i}", "N", hp=100 * (i + 1)) for i in range(10)]
    m = WaveDirector(roster_of(*units)).generate(DifficultyProfile("x", 1, 1000, 200, ("N",)), "s")
    used = {w.combatant_id for w in m.waves}
    assert "u8" not in used and "u9" not in used


def test_generator_does_not_mutate_roster() -> None:
    roster = basic_roster()
    before = [c.to_dict() for c in roster.all()]
    WaveDirector(roster).generate(DIFFICULTY_PROFILES["normal"], "s")
    assert [c.to_dict() for c in roster.all()] == before


def test_empty_pool_raises() -> None:
    roster = roster_of(make_unit("n1", "N"))
    with pytest.raises(EmptyRosterError):
        WaveDirector(roster).plan(DIFFICULTY_PROFILES["purgatory"])


def test_create_mission_appends_and_reports_target() -> None:
    catalog = catalog_of()
    res = create_mission(catalog, basic_roster(), "normal", "stage_9")
    assert catalog.ids() == ["stage_9"]
    assert res.target_strength == 600
    assert res.target_pct == pytest.approx(res.strength.strength / 600 * 100)


def test_create_mission_dry_run_leaves_catalog_alone() -> None:
    catalog = catalog_of()
    res = create_mission(catalog, basic_roster(), "normal", "stage_9", dry_run=True)
    assert res.mission.id == "stage_9"
    assert len(catalog) == 0


def test_create_mission_unknown_difficulty() -> None:
    catalog = catalog_of(make_mission("a", "easy"))
    with pytest.raises(UnknownDifficultyError):
        create_mission(catalog, basic_roster(), "impossible", "b")
    assert catalog.ids() == ["a"]


def test_create_mission_duplicate_id() -> None:
    catalog = catalog_of(make_mission("a", "easy"))
    with pytest.raises(DuplicateMissionError):
        create_mission(catalog, basic_roster(), "normal", "a")
    assert len(catalog) == 1


def test_create_mission_empty_pool_leaves_catalog_alone() -> None:
    catalog = catalog_of()
    with pytest.raises(EmptyRosterError):
        create_mission(catalog, roster_of(make_unit("n1", "N")), "inferno_boss", "z")
    assert len(catalog) == 0


def test_create_mission_uses_given_profile_table() -> None:
    table = {"normal": DifficultyProfile("normal", 600, 3500, 120, ("N", "R"))}
    res = create_mission(catalog_of(), basic_roster(), "normal", "s", profiles=table)
    assert len(res.mission.waves) == 6


def test_every_profile_stays_in_bounds() -> None:
    roster = RosterStore.load(PACKAGE_DATA / "enemies.json")
    director = WaveDirector(roster)
    for label, profile in DIFFICULTY_PROFILES.items():
        plan = director.plan(profile)
        m = director.generate(profile, f"check_{label}")
        assert 5 <= len(m.waves) <= 10, label
        for w in m.waves:
            assert plan.enemies_per_wave * 0.8 - 0.5 <= w.count <= plan.enemies_per_wave * 1.2 + 0.5, label
            assert roster.get(w.combatant_id).rarity in profile.allowed_rarities
        intervals = [w.interval_ms for w in m.waves]
        assert intervals == sorted(intervals, reverse=True) and len(set(intervals)) == len(intervals)
