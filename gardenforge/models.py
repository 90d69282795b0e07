from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional

# Rarity tiers, weakest -> strongest
RARITIES = ["N", "R", "SR", "SSR", "UR"]

ROLES = ["tank", "attacker", "ranger", "speedster", "flying", "balanced"]

# Default spawn cooldown when a combatant doesn't override it
COOLDOWN_BY_RARITY_MS: Dict[str, int] = {
    "N": 2000,
    "R": 4000,
    "SR": 8000,
    "SSR": 12000,
    "UR": 15000,
}


def rarity_rank(rarity: str) -> int:
    """Position in the tier order; unknown tiers sort last."""
    try:
        return RARITIES.index(rarity)
    except ValueError:
        return len(RARITIES)


@dataclass
class Skill:
    trigger: str                      # "on_attack" | "interval" | "hp_below" | ...
    chance: float = 0.0
    interval_ms: int = 0
    hp_threshold: float = 0.0
    cooldown_ms: int = 0


@dataclass
class Combatant:
    id: str
    name: str
    rarity: str
    max_hp: float
    attack_damage: float
    attack_cooldown_ms: float
    attack_range: float
    speed: float
    is_flying: bool = False
    role: Optional[str] = None
    skill: Optional[Skill] = None
    cost: int = 0
    spawn_cooldown_ms: Optional[int] = None
    is_boss: bool = False

    def spawn_cooldown(self) -> int:
        if self.spawn_cooldown_ms is not None:
            return int(self.spawn_cooldown_ms)
        return COOLDOWN_BY_RARITY_MS.get(self.rarity, 2000)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Combatant":
        sk = d.get("skill")
        return cls(
            id=str(d["id"]),
            name=str(d.get("name", d["id"])),
            rarity=str(d.get("rarity", "N")),
            max_hp=float(d.get("max_hp", 0)),
            attack_damage=float(d.get("attack_damage", 0)),
            attack_cooldown_ms=float(d.get("attack_cooldown_ms", 1000)),
            attack_range=float(d.get("attack_range", 0)),
            speed=float(d.get("speed", 0)),
            is_flying=bool(d.get("is_flying", False)),
            role=d.get("role"),
            skill=Skill(**sk) if isinstance(sk, dict) else None,
            cost=int(d.get("cost", 0)),
            spawn_cooldown_ms=d.get("spawn_cooldown_ms"),
            is_boss=bool(d.get("is_boss", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # keep stored content compact
        for k in ("role", "skill", "spawn_cooldown_ms"):
            if d.get(k) is None:
                d.pop(k)
        if not d["is_boss"]:
            d.pop("is_boss")
        return d


@dataclass
class WaveEntry:
    spawn_time_ms: int
    combatant_id: str
    count: int
    interval_ms: int = 1000


@dataclass
class Drop:
    combatant_id: str
    rate: float  # 0..100


@dataclass
class Reward:
    currency: int
    drops: List[Drop] = field(default_factory=list)


@dataclass
class Background:
    sky_color: str = "0x87ceeb"
    ground_color: str = "0x7cb342"
    cloud_color: Optional[str] = "0xffffff"
    image: Optional[str] = None


@dataclass
class Mission:
    id: str
    name_key: str
    description_key: str
    length: int
    base_castle_hp: int
    enemy_castle_hp: int
    waves: List[WaveEntry] = field(default_factory=list)
    reward: Reward = field(default_factory=lambda: Reward(currency=0))
    background: Background = field(default_factory=Background)
    difficulty: str = "normal"
    zone: Optional[str] = None

    @property
    def enemy_count(self) -> int:
        return sum(int(w.count) for w in self.waves)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Mission":
        rw = d.get("reward") or {}
        bg = d.get("background") or {}
        mid = str(d["id"])
        return cls(
            id=mid,
            name_key=str(d.get("name_key", f"{mid}_name")),
            description_key=str(d.get("description_key", f"{mid}_desc")),
            length=int(d.get("length", 0)),
            base_castle_hp=int(d.get("base_castle_hp", 0)),
            enemy_castle_hp=int(d.get("enemy_castle_hp", 0)),
            waves=[
                WaveEntry(
                    spawn_time_ms=int(w.get("spawn_time_ms", 0)),
                    combatant_id=str(w["combatant_id"]),
                    count=int(w.get("count", 0)),
                    interval_ms=int(w.get("interval_ms", 1000)),
                )
                for w in (d.get("waves") or [])
            ],
            reward=Reward(
                currency=int(rw.get("currency", 0)),
                drops=[Drop(str(x["combatant_id"]), float(x.get("rate", 0))) for x in (rw.get("drops") or [])],
            ),
            background=Background(**bg),
            difficulty=str(d.get("difficulty", "normal")),
            zone=d.get("zone"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        if d["zone"] is None:
            d.pop("zone")
        return d
