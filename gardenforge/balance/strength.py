from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from ..core.storage import RosterStore
from ..models import Mission
from .power import power

CASTLE_W = 0.0001
COUNT_W = 2.0
POWER_W = 0.05
DENSITY_W = 50.0


@dataclass
class StageStrength:
    stage_id: str
    difficulty: str
    zone: str
    enemy_castle_hp: int
    enemy_count: int
    enemy_power: float
    wave_count: int
    wave_density: float          # enemies per second of spawn window
    avg_interval_ms: float
    min_interval_ms: int
    max_interval_ms: int
    castle_score: float
    count_score: float
    power_score: float
    density_score: float
    missing: List[str] = field(default_factory=list)

    @property
    def strength(self) -> float:
        return strength_from_parts(self.enemy_castle_hp, self.enemy_count, self.enemy_power, self.wave_density)


def strength_from_parts(enemy_castle_hp: float, enemy_count: float, enemy_power: float, wave_density: float) -> float:
    return (
        enemy_castle_hp * CASTLE_W
        + enemy_count * COUNT_W
        + enemy_power * POWER_W
        + wave_density * DENSITY_W
    )


def stage_strength(mission: Mission, roster: RosterStore) -> StageStrength:
    """Score a whole mission. Unknown combatants add count but no power."""
    count = 0
    e_power = 0.0
    spawn_ms = 0.0
    missing: List[str] = []
    intervals: List[int] = []

    for w in mission.waves:
        n = int(w.count)
        count += n
        spawn_ms += n * float(w.interval_ms)
        intervals.append(int(w.interval_ms))
        unit = roster.get(w.combatant_id)
        if unit is None:
            if w.combatant_id not in missing:
                missing.append(w.combatant_id)
            continue
        e_power += power(unit) * n

    density = count / (spawn_ms / 1000.0) if spawn_ms > 0 else 0.0

    return StageStrength(
        stage_id=mission.id,
        difficulty=mission.difficulty,
        zone=mission.zone or "world1",
        enemy_castle_hp=int(mission.enemy_castle_hp),
        enemy_count=count,
        enemy_power=e_power,
        wave_count=len(mission.waves),
        wave_density=density,
        avg_interval_ms=(spawn_ms / count) if count else 0.0,
        min_interval_ms=min(intervals) if intervals else 0,
        max_interval_ms=max(intervals) if intervals else 0,
        castle_score=float(mission.enemy_castle_hp) * CASTLE_W,
        count_score=count * COUNT_W,
        power_score=e_power * POWER_W,
        density_score=density * DENSITY_W,
        missing=missing,
    )
