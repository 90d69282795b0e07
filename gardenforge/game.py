from __future__ import annotations
import random
from typing import List, Optional
import pygame

from .settings import DEFAULT_W, DEFAULT_H, FPS, DECK_SIZE
from .assets import make_fonts
from .models import Combatant
from .core.config import Settings, load_settings
from .core.log import log
from .core.storage import RosterStore
from .core.telemetry import GateTelemetry
from .core.scene import QUIT
from .core.time import GameClock
from .scenes.battle import BattleScene


def default_deck(allies: RosterStore, size: int = DECK_SIZE) -> List[Combatant]:
    """Cheapest allies first; roster order breaks ties."""
    return sorted(allies.all(), key=lambda c: c.cost)[:size]


class Game:
    def __init__(self, settings: Optional[Settings] = None, deck: Optional[List[Combatant]] = None,
                 stage_label: str = "BATTLE", seed: Optional[int] = None):
        pygame.init()
        pygame.display.set_caption("Gardenforge")

        self.settings = settings or load_settings()
        self.w, self.h = DEFAULT_W, DEFAULT_H
        self.screen = pygame.display.set_mode((self.w, self.h))

        self.clock_pygame = pygame.time.Clock()
        self.clock = GameClock()
        self.fonts = make_fonts(self.h)
        self.rng = random.Random(seed)

        if deck is None:
            deck = default_deck(RosterStore.load(self.settings.allies_file))
        self.telemetry = GateTelemetry(enabled=self.settings.telemetry)

        self.running = True
        self.scenes = {"BATTLE": BattleScene(self)}
        self.scene = self.scenes["BATTLE"]
        self.scene.enter({"deck": deck, "stage_label": stage_label})
        log("GAME", f"deck: {', '.join(c.id for c in deck)}", level=2)

    def loop(self):
        try:
            while self.running:
                dt = self.clock_pygame.tick(FPS) / 1000.0

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_TAB:
                        self.clock.cycle_speed()
                    else:
                        self.scene.handle_event(event)

                self.scene.update(dt)

                res = self.scene.consume_result()
                if res.next_scene == QUIT:
                    self.running = False
                elif res.next_scene:
                    self.scene.exit()
                    self.scene = self.scenes[res.next_scene]
                    self.scene.enter(res.payload)

                self.scene.draw(self.screen)
                pygame.display.flip()
        finally:
            self.scene.exit()
            self.telemetry.close()
            pygame.quit()


def run(**kwargs):
    Game(**kwargs).loop()
