from __future__ import annotations
import math

from ..models import Combatant

# unit power weights: speed >> damage >> hp (per point)
HP_W = 0.001
DMG_W = 0.5
SPEED_W = 2.0


def round_half_up(x: float) -> int:
    """Content tools round .5 away from zero for positive values (not banker's)."""
    return int(math.floor(x + 0.5))


def power(u: Combatant) -> float:
    """Scalar combat value of one combatant."""
    return float(u.max_hp) * HP_W + float(u.attack_damage) * DMG_W + float(u.speed) * SPEED_W


def dps(u: Combatant) -> float:
    cd_s = max(1.0, float(u.attack_cooldown_ms)) / 1000.0
    return float(u.attack_damage) / cd_s
