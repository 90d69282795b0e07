from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional
import math

from ..balance.power import power, round_half_up
from ..balance.strength import StageStrength, stage_strength
from ..core.difficulty import DifficultyProfile, get_profile
from ..core.errors import DuplicateMissionError, EmptyRosterError
from ..core.log import log
from ..core.storage import MissionCatalog, RosterStore
from ..models import Background, Combatant, Mission, Reward, WaveEntry

FIRST_WAVE_MS = 2000
WAVE_GAP_MS = 2000
MIN_WAVES = 5
MAX_WAVES = 10


@dataclass
class WavePlan:
    profile: DifficultyProfile
    pool: List[Combatant]      # eligible roster, weakest first
    wave_count: int
    enemies_per_wave: int


@dataclass
class GeneratedStage:
    mission: Mission
    strength: StageStrength
    target_strength: float

    @property
    def target_pct(self) -> float:
        if self.target_strength <= 0:
            return 0.0
        return self.strength.strength / self.target_strength * 100.0


class WaveDirector:
    def __init__(self, roster: RosterStore):
        self.roster = roster

    def plan(self, profile: DifficultyProfile) -> WavePlan:
        allowed = set(profile.allowed_rarities)
        pool = [c for c in self.roster.all() if c.rarity in allowed]
        if not pool:
            raise EmptyRosterError(
                f"no combatant with rarity in {list(profile.allowed_rarities)} for '{profile.label}'"
            )
        # sorted() is stable: equal power keeps roster order
        pool = sorted(pool, key=power)
        n = int(profile.target_enemy_count)
        wave_count = min(MAX_WAVES, max(MIN_WAVES, n // 20))
        per_wave = math.ceil(n / wave_count)
        return WavePlan(profile=profile, pool=pool, wave_count=wave_count, enemies_per_wave=per_wave)

    def waves(self, plan: WavePlan) -> List[WaveEntry]:
        out: List[WaveEntry] = []
        size = len(plan.pool)
        t = FIRST_WAVE_MS
        for i in range(plan.wave_count):
            progress = i / plan.wave_count
            # later waves draw stronger units; the top 20% stays reserved
            idx = min(int(math.floor(progress * size * 0.8)), size - 1)
            enemy = plan.pool[idx]
            count = round_half_up(plan.enemies_per_wave * (0.8 + progress * 0.4))
            interval = round_half_up(1200 - progress * 500)
            out.append(WaveEntry(spawn_time_ms=t, combatant_id=enemy.id, count=count, interval_ms=interval))
            t += count * interval + WAVE_GAP_MS
        return out

    def generate(self, profile: DifficultyProfile, mission_id: str) -> Mission:
        plan = self.plan(profile)
        waves = self.waves(plan)
        n = int(profile.target_enemy_count)
        hp = int(profile.target_castle_hp)
        log("GEN", f"{mission_id}: {profile.label} waves={plan.wave_count} per_wave={plan.enemies_per_wave} pool={len(plan.pool)}", level=2)
        return Mission(
            id=mission_id,
            name_key=f"{mission_id}_name",
            description_key=f"{mission_id}_desc",
            length=1000 + n * 20,
            base_castle_hp=round_half_up(hp * 0.2),
            enemy_castle_hp=hp,
            waves=waves,
            reward=Reward(currency=round_half_up(hp * 0.5)),
            background=Background(),
            difficulty=profile.label,
            zone=profile.zone,
        )


def create_mission(
    catalog: MissionCatalog,
    roster: RosterStore,
    difficulty: str,
    mission_id: str,
    profiles: Optional[Dict[str, DifficultyProfile]] = None,
    dry_run: bool = False,
) -> GeneratedStage:
    """Generate a mission for `difficulty` and append it to the catalog.

    Checks run before anything is built, so a failure never leaves a partial
    mission behind. With dry_run the catalog is left untouched.
    """
    profile = get_profile(difficulty, profiles)
    if mission_id in catalog:
        raise DuplicateMissionError(f"stage id '{mission_id}' already exists")

    mission = WaveDirector(roster).generate(profile, mission_id)
    result = GeneratedStage(mission=mission, strength=stage_strength(mission, roster), target_strength=profile.target_strength)

    if not dry_run:
        catalog.append(mission)
    log("GEN", f"{mission_id}: strength {result.strength.strength:.0f} / target {profile.target_strength:.0f} ({result.target_pct:.0f}%){' [dry-run]' if dry_run else ''}")
    return result
