from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from .time import Scheduler

QUIT = "QUIT"

@dataclass
class SceneResult:
    next_scene: Optional[str] = None
    payload: Any = None

class Scene:
    """Base scene. Owns a Scheduler so delayed UI callbacks die with the scene."""
    name = "SCENE"
    def __init__(self, game):
        self.game = game
        self.timers = Scheduler()
        self._result = SceneResult()

    def enter(self, payload=None): ...
    def handle_event(self, event): ...
    def draw(self, screen): ...

    def update(self, dt: float):
        self.timers.tick(dt)

    def exit(self):
        # no timer may outlive its scene
        self.timers.cancel_all()

    def request(self, next_scene: str, payload=None):
        self._result = SceneResult(next_scene, payload)

    def consume_result(self) -> SceneResult:
        r = self._result
        self._result = SceneResult()
        return r
