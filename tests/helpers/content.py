from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from gardenforge.core.storage import MissionCatalog, RosterStore
from gardenforge.models import Combatant, Mission, Reward, WaveEntry


def make_unit(
    cid: str,
    rarity: str = "N",
    hp: float = 100,
    atk: float = 10,
    cd: float = 1000,
    rng: float = 50,
    speed: float = 40,
    flying: bool = False,
    cost: int = 0,
    spawn_cd: Optional[int] = None,
) -> Combatant:
    return Combatant(
        id=cid,
        name=cid.replace("_", " ").title(),
        rarity=rarity,
        max_hp=hp,
        attack_damage=atk,
        attack_cooldown_ms=cd,
        attack_range=rng,
        speed=speed,
        is_flying=flying,
        cost=cost,
        spawn_cooldown_ms=spawn_cd,
    )


def make_mission(
    mid: str,
    difficulty: str,
    waves: Sequence[Tuple[str, int, int]] = (),
    castle_hp: int = 1000,
    zone: Optional[str] = None,
) -> Mission:
    """waves: (combatant_id, count, interval_ms) triples."""
    entries: List[WaveEntry] = []
    t = 2000
    for cid, count, interval in waves:
        entries.append(WaveEntry(spawn_time_ms=t, combatant_id=cid, count=count, interval_ms=interval))
        t += count * interval + 2000
    return Mission(
        id=mid,
        name_key=f"{mid}_name",
        description_key=f"{mid}_desc",
        length=1000,
        base_castle_hp=castle_hp // 5,
        enemy_castle_hp=castle_hp,
        waves=entries,
        reward=Reward(currency=castle_hp // 2),
        difficulty=difficulty,
        zone=zone,
    )


def roster_of(*units: Combatant) -> RosterStore:
    return RosterStore(list(units))


def catalog_of(*missions: Mission) -> MissionCatalog:
    return MissionCatalog(list(missions))


def basic_roster() -> RosterStore:
    """Small N/R enemy roster; power ascending: weak < mid < fast < brute."""
    return roster_of(
        make_unit("weak", "N", hp=100, atk=10, speed=10),      # 0.1 + 5 + 20 = 25.1
        make_unit("brute", "R", hp=2000, atk=100, speed=20),   # 2 + 50 + 40 = 92
        make_unit("mid", "N", hp=200, atk=20, speed=20),       # 0.2 + 10 + 40 = 50.2
        make_unit("fast", "R", hp=300, atk=30, speed=30),      # 0.3 + 15 + 60 = 75.3
        make_unit("elite", "SR", hp=5000, atk=500, speed=50),
    )
