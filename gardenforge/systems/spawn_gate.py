from __future__ import annotations

"""Adaptive spawn gate.

A spend request above the bypass cost opens a short arithmetic challenge; the
spend only goes through when it is answered correctly. The gate is a two-state
machine (IDLE / ACTIVE) living on the host scene's update loop. Its only
asynchrony is the delayed close after an answer, scheduled on the host's
Scheduler so the host can cancel it on teardown.

Blocked requests are silent: `request` returns an outcome constant and never
raises.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import random

from ..core.config import GateConfig
from ..core.log import log
from ..core.telemetry import GateTelemetry
from ..core.time import DelayedCall, Scheduler
from .quiz_factory import Challenge, make_challenge

IDLE = "IDLE"
ACTIVE = "ACTIVE"

# request() outcomes
BLOCKED = "BLOCKED"
BYPASSED = "BYPASSED"
STARTED = "STARTED"

# session results while the answer is on screen
CORRECT = "CORRECT"
WRONG = "WRONG"


def _no_deny(combatant_id: str, cost: int):
    return None


@dataclass
class GateCallbacks:
    can_start: Callable[[], bool]
    can_afford: Callable[[int], bool]
    is_on_cooldown: Callable[[str], bool]
    on_success: Callable[[str, int], None]
    on_deny: Callable[[str, int], None] = _no_deny


@dataclass
class GateSession:
    combatant_id: str
    cost: int
    challenge: Challenge
    result: Optional[str] = None
    picked: Optional[int] = None


class SpawnGate:
    def __init__(
        self,
        scheduler: Scheduler,
        callbacks: GateCallbacks,
        rng: Optional[random.Random] = None,
        cfg: GateConfig = GateConfig(),
        adaptive: bool = True,
        telemetry: Optional[GateTelemetry] = None,
    ):
        self.scheduler = scheduler
        self.cb = callbacks
        self.rng = rng or random.Random()
        self.cfg = cfg
        self.adaptive = adaptive
        self.telemetry = telemetry
        self.session: Optional[GateSession] = None
        self._close_call: Optional[DelayedCall] = None

    @property
    def state(self) -> str:
        return ACTIVE if self.session is not None else IDLE

    def is_active(self) -> bool:
        return self.session is not None

    def toggle_adaptive(self) -> bool:
        self.adaptive = not self.adaptive
        return self.adaptive

    def request(self, combatant_id: str, cost: int) -> str:
        if self.session is not None or not self.cb.can_start():
            return BLOCKED
        if self.cb.is_on_cooldown(combatant_id):
            return BLOCKED
        if not self.cb.can_afford(cost):
            return BLOCKED

        if not self.adaptive or cost <= self.cfg.bypass_max_cost:
            if self.telemetry:
                self.telemetry.bypass(combatant_id, cost)
            self.cb.on_success(combatant_id, cost)
            return BYPASSED

        ch = make_challenge(cost, self.rng, self.cfg)
        self.session = GateSession(combatant_id=combatant_id, cost=int(cost), challenge=ch)
        if self.telemetry:
            self.telemetry.session_start(combatant_id, cost, ch.kind, ch.text, ch.answer)
        log("GATE", f"{combatant_id} cost={cost}: {ch.text} choices={ch.choices}", level=2)
        return STARTED

    def answer(self, value: int) -> Optional[bool]:
        """Resolve the open challenge. Returns None when nothing is awaiting an answer."""
        s = self.session
        if s is None or s.result is not None:
            return None
        ok = int(value) == s.challenge.answer
        s.result = CORRECT if ok else WRONG
        s.picked = int(value)
        if self.telemetry:
            self.telemetry.session_answer(value, ok)
        hold = self.cfg.correct_hold_ms if ok else self.cfg.wrong_hold_ms
        self._close_call = self.scheduler.delayed_call(hold, self._finish)
        return ok

    def _finish(self):
        s = self.session
        self._close_call = None
        if s is None:
            return
        if s.result == CORRECT:
            self.cb.on_success(s.combatant_id, s.cost)
        else:
            self.cb.on_deny(s.combatant_id, s.cost)
        if self.telemetry:
            self.telemetry.session_end("spawned" if s.result == CORRECT else "denied")
        self.session = None

    def destroy(self):
        """Drop any open session now; a pending close will not fire."""
        if self._close_call is not None:
            self._close_call.cancel()
            self._close_call = None
        if self.session is not None and self.telemetry:
            self.telemetry.session_end("cancelled")
        self.session = None
