from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any
import json, os

from .difficulty import DifficultyProfile, DIFFICULTY_PROFILES, scaled
from .errors import ContentLoadError
from .log import log

PACKAGE_DATA = Path(__file__).resolve().parent.parent / "data"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class GateConfig:
    # cost thresholds (inclusive lower bounds)
    bypass_max_cost: int = 100
    mul_min_cost: int = 200
    hard_min_cost: int = 1000

    choice_count: int = 4
    spread_mul: int = 15
    spread_add: int = 5

    # how long the result stays on screen before closing (ms)
    correct_hold_ms: int = 400
    wrong_hold_ms: int = 800


@dataclass(frozen=True)
class Settings:
    data_dir: Path = PACKAGE_DATA
    report_dir: Path = field(default_factory=lambda: Path(os.getcwd()) / "saves" / "reports")
    profile_file: Path = field(default_factory=lambda: Path(os.getcwd()) / "saves" / "difficulty_profile.json")
    telemetry: bool = False
    adaptive: bool = True
    pause_world_during_quiz: bool = False
    gate: GateConfig = field(default_factory=GateConfig)

    @property
    def enemies_file(self) -> Path:
        return self.data_dir / "enemies.json"

    @property
    def allies_file(self) -> Path:
        return self.data_dir / "allies.json"

    @property
    def stages_file(self) -> Path:
        return self.data_dir / "stages.json"


def load_settings() -> Settings:
    base = Settings()
    data_dir = os.environ.get("GARDENFORGE_DATA_DIR")
    report_dir = os.environ.get("GARDENFORGE_REPORT_DIR")
    profile_file = os.environ.get("GARDENFORGE_PROFILE_FILE")
    return Settings(
        data_dir=Path(data_dir) if data_dir else base.data_dir,
        report_dir=Path(report_dir) if report_dir else base.report_dir,
        profile_file=Path(profile_file) if profile_file else base.profile_file,
        telemetry=_env_flag("GARDENFORGE_TELEMETRY", False),
        adaptive=_env_flag("GARDENFORGE_ADAPTIVE", True),
        pause_world_during_quiz=_env_flag("GARDENFORGE_PAUSE_ON_QUIZ", False),
    )


def load_profile(path: Path) -> Dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ContentLoadError(f"{path}: invalid JSON ({e})") from e


def apply_profile(profiles: Dict[str, DifficultyProfile], profile: Dict[str, Any]) -> Dict[str, DifficultyProfile]:
    """Return a new profile table with overrides applied.

    Profile format:
    {
      "global": {"strength_mul": 1.0, "castle_hp_mul": 1.10, "enemy_count_mul": 1.0},
      "difficulty": {"hard": {"target_enemy_count": 90, "allowed_rarities": ["R", "SR"]}}
    }
    """
    g = (profile.get("global") or {})
    s_mul = float(g.get("strength_mul", 1.0))
    c_mul = float(g.get("castle_hp_mul", 1.0))
    n_mul = float(g.get("enemy_count_mul", 1.0))

    out: Dict[str, DifficultyProfile] = {}
    for label, prof in profiles.items():
        out[label] = scaled(prof, s_mul, c_mul, n_mul)

    for label, over in (profile.get("difficulty") or {}).items():
        cur = out.get(label)
        if cur is None:
            log("CFG", f"profile override for unknown difficulty '{label}' ignored")
            continue
        out[label] = DifficultyProfile(
            label=label,
            target_strength=float(over.get("target_strength", cur.target_strength)),
            target_castle_hp=int(over.get("target_castle_hp", cur.target_castle_hp)),
            target_enemy_count=int(over.get("target_enemy_count", cur.target_enemy_count)),
            allowed_rarities=tuple(over.get("allowed_rarities", cur.allowed_rarities)),
            zone=str(over.get("zone", cur.zone)),
        )
    return out


def active_profiles(settings: Settings) -> Dict[str, DifficultyProfile]:
    """Difficulty table with the optional override file applied."""
    profile = load_profile(settings.profile_file)
    if not profile:
        return dict(DIFFICULTY_PROFILES)
    log("CFG", f"difficulty overrides loaded from {settings.profile_file}")
    return apply_profile(DIFFICULTY_PROFILES, profile)
