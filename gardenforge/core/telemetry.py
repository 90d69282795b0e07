from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import csv, datetime, json, os, time

from .log import log

def _now_id() -> str:
    return datetime.datetime.now().strftime("%Y%m%d_%H%M%S")

@dataclass
class SessionRow:
    combatant_id: str
    cost: int
    kind: str = ""           # ADD / MUL / DIV, or BYPASS
    question: str = ""
    answer: int = 0
    picked: Optional[int] = None
    correct: bool = False
    started_at: float = 0.0
    answered_at: float = 0.0

    @property
    def reaction_ms(self) -> float:
        if not self.answered_at:
            return 0.0
        return (self.answered_at - self.started_at) * 1000.0

class GateTelemetry:
    """Spawn-gate session telemetry.
    Writes:
      - <dir>/gate_<id>_events.jsonl
      - <dir>/gate_<id>_sessions.csv (on close)
    """
    def __init__(self, enabled: bool = True, run_id: Optional[str] = None, out_dir: Optional[Path] = None):
        self.enabled = enabled
        self.run_id = run_id or _now_id()
        self.dir = Path(out_dir) if out_dir else Path(os.getcwd()) / "saves" / "telemetry"
        self.rows: List[SessionRow] = []
        self._cur: Optional[SessionRow] = None

        self._events_path = self.dir / f"gate_{self.run_id}_events.jsonl"
        self._sessions_path = self.dir / f"gate_{self.run_id}_sessions.csv"

        self._events_fp = None
        if self.enabled:
            self.dir.mkdir(parents=True, exist_ok=True)
            self._events_fp = open(self._events_path, "a", encoding="utf-8")

    def close(self):
        if self._events_fp:
            self._events_fp.flush()
            self._events_fp.close()
            self._events_fp = None
        if self.enabled:
            self.flush_sessions()

    def _event(self, kind: str, data: Dict[str, Any]):
        if not self.enabled or not self._events_fp:
            return
        row = {"t": time.time(), "kind": kind, **data}
        self._events_fp.write(json.dumps(row, ensure_ascii=False) + "\n")

    def bypass(self, combatant_id: str, cost: int):
        if not self.enabled:
            return
        self.rows.append(SessionRow(combatant_id, int(cost), kind="BYPASS", correct=True, started_at=time.time()))
        self._event("bypass", {"unit": combatant_id, "cost": int(cost)})

    def session_start(self, combatant_id: str, cost: int, kind: str, question: str, answer: int):
        if not self.enabled:
            return
        self._cur = SessionRow(combatant_id, int(cost), kind=kind, question=question, answer=int(answer), started_at=time.time())
        self._event("quiz_start", {"unit": combatant_id, "cost": int(cost), "op": kind, "q": question})

    def session_answer(self, picked: int, correct: bool):
        if not self.enabled or not self._cur:
            return
        self._cur.picked = int(picked)
        self._cur.correct = bool(correct)
        self._cur.answered_at = time.time()
        self._event("quiz_answer", {"unit": self._cur.combatant_id, "picked": int(picked), "correct": bool(correct),
                                    "ms": round(self._cur.reaction_ms)})

    def session_end(self, outcome: str):
        if not self.enabled or not self._cur:
            return
        self.rows.append(self._cur)
        self._event("quiz_end", {"unit": self._cur.combatant_id, "outcome": outcome})
        self._cur = None

    def flush_sessions(self):
        if not self.enabled:
            return
        fieldnames = ["combatant_id", "cost", "kind", "question", "answer", "picked", "correct", "reaction_ms"]
        try:
            with open(self._sessions_path, "w", newline="", encoding="utf-8") as f:
                w = csv.DictWriter(f, fieldnames=fieldnames)
                w.writeheader()
                for r in self.rows:
                    w.writerow({
                        "combatant_id": r.combatant_id,
                        "cost": r.cost,
                        "kind": r.kind,
                        "question": r.question,
                        "answer": r.answer,
                        "picked": "" if r.picked is None else r.picked,
                        "correct": int(r.correct),
                        "reaction_ms": f"{r.reaction_ms:.0f}",
                    })
        except OSError as e:
            log("GATE", f"telemetry not written: {e}")
