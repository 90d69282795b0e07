from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Any, List
import csv, json

from ..core.difficulty import RECOMMENDED_RATIOS
from .validator import BalanceReport, ERROR

REPORT_JSON = "balance_report.json"
REPORT_CSV = "balance_report.csv"


def report_dict(report: BalanceReport) -> Dict[str, Any]:
    stages = []
    for s in report.stages:
        row = asdict(s)
        row["strength"] = s.strength
        stages.append(row)
    return {
        "stages": stages,
        "difficulty_stats": {d: asdict(st) for d, st in report.stats.items()},
        "transitions": [asdict(t) for t in report.transitions],
        "issues": [asdict(i) for i in report.issues],
    }


def render_text(report: BalanceReport) -> str:
    out: List[str] = []
    bar = "-" * 72

    out.append(bar)
    out.append("STAGE STRENGTH REPORT")
    out.append("  power    = hp*0.001 + atk*0.5 + speed*2")
    out.append("  strength = castleHp*0.0001 + enemies*2 + enemyPower*0.05 + density*50")
    out.append(bar)

    out.append(f"{'difficulty':<13} | {'n':>2} | {'avg':>7} | {'min':>7} | {'max':>7} | {'enemies':>7} | {'power':>7}")
    for d, st in report.stats.items():
        out.append(
            f"{d:<13} | {st.count:>2} | {st.avg_strength:>7.0f} | {st.min_strength:>7.0f} | "
            f"{st.max_strength:>7.0f} | {st.avg_enemy_count:>7.0f} | {st.avg_enemy_power:>7.0f}"
        )

    if report.transitions:
        out.append(bar)
        out.append(f"{'step':<27} | {'str':>6} | {'hp':>6} | {'count':>6} | {'power':>6} | target")
        for t in report.transitions:
            lo_hi = RECOMMENDED_RATIOS.get((t.prev, t.curr))
            tgt = f"{lo_hi[0]:.1f}x-{lo_hi[1]:.1f}x" if lo_hi else "-"
            out.append(
                f"{t.prev + ' -> ' + t.curr:<27} | {t.strength_ratio:>5.2f}x | {t.castle_hp_ratio:>5.2f}x | "
                f"{t.enemy_count_ratio:>5.2f}x | {t.enemy_power_ratio:>5.2f}x | {tgt}"
            )

    out.append(bar)
    out.append(f"{'stage':<16} | {'difficulty':<12} | {'castle':>9} | {'enemies':>7} | {'power':>8} | {'dens/s':>6} | {'strength':>8} | prev")
    prev = None
    for s in report.stages:
        ratio = f"{s.strength / prev:.2f}x" if prev else "-"
        out.append(
            f"{s.stage_id:<16} | {s.difficulty:<12} | {s.enemy_castle_hp:>9} | {s.enemy_count:>7} | "
            f"{s.enemy_power:>8.0f} | {s.wave_density:>6.2f} | {s.strength:>8.0f} | {ratio}"
        )
        prev = s.strength

    out.append(bar)
    if not report.issues:
        out.append("  [OK] no balance issues")
    for i in report.issues:
        icon = "[ERR] " if i.severity == ERROR else "[WARN]"
        out.append(f"  {icon} {i.message}")
    return "\n".join(out)


def write_report(report: BalanceReport, out_dir: Path) -> List[Path]:
    """Write the machine-readable forms (JSON + per-stage CSV). Overwrites."""
    out_dir.mkdir(parents=True, exist_ok=True)
    jpath = out_dir / REPORT_JSON
    cpath = out_dir / REPORT_CSV

    with open(jpath, "w", encoding="utf-8") as f:
        json.dump(report_dict(report), f, indent=2, ensure_ascii=False)

    fieldnames = [
        "stage_id", "difficulty", "zone", "enemy_castle_hp", "enemy_count", "enemy_power",
        "wave_count", "wave_density", "castle_score", "count_score", "power_score", "density_score",
        "strength", "missing",
    ]
    with open(cpath, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for s in report.stages:
            w.writerow({
                "stage_id": s.stage_id,
                "difficulty": s.difficulty,
                "zone": s.zone,
                "enemy_castle_hp": s.enemy_castle_hp,
                "enemy_count": s.enemy_count,
                "enemy_power": f"{s.enemy_power:.2f}",
                "wave_count": s.wave_count,
                "wave_density": f"{s.wave_density:.3f}",
                "castle_score": f"{s.castle_score:.2f}",
                "count_score": f"{s.count_score:.2f}",
                "power_score": f"{s.power_score:.2f}",
                "density_score": f"{s.density_score:.2f}",
                "strength": f"{s.strength:.2f}",
                "missing": ";".join(s.missing),
            })
    return [jpath, cpath]
