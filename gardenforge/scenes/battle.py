from __future__ import annotations
import pygame
from typing import Dict, List

from ..core.scene import QUIT, Scene
from ..models import Combatant
from ..settings import (
    TOP_BAR_FRAC, DECK_BAR_FRAC, DECK_SIZE, COST_START, COST_MAX, COST_REGEN,
    QUIZ_BTN, QUIZ_GAP, C_BG, C_GROUND, C_UI_BG, C_CARD, C_CARD_HI, C_CHOICE, C_PANEL, C_TEXT, RARITY_COL,
)
from ..systems.spawn_gate import SpawnGate, GateCallbacks
from ..ui.widgets import Button
from ..ui.hud import draw_top_bar, draw_quiz_panel, quiz_panel_rect

class BattleScene(Scene):
    """Host for the spawn gate: cost gauge, deck buttons, spawn cooldowns.

    Combat itself is simulated elsewhere; a passed spawn is only recorded in
    `spawned` for the runtime to pick up.
    """
    name = "BATTLE"

    def enter(self, payload=None):
        payload = payload or {}
        self.deck: List[Combatant] = list(payload.get("deck", []))[:DECK_SIZE]
        self.stage_label = payload.get("stage_label", "BATTLE")
        self.state = "PLAYING"

        self.cost = float(COST_START)
        self.cost_max = float(COST_MAX)
        self.cooldowns: Dict[str, float] = {}   # ms remaining
        self.spawned: List[str] = []
        self.denied: List[str] = []

        settings = self.game.settings
        self.pause_world = settings.pause_world_during_quiz
        self.gate = SpawnGate(
            self.timers,
            GateCallbacks(
                can_start=lambda: self.state == "PLAYING",
                can_afford=lambda cost: self.cost >= cost,
                is_on_cooldown=lambda cid: self.cooldowns.get(cid, 0.0) > 0,
                on_success=self._spawn,
                on_deny=self._deny,
            ),
            rng=self.game.rng,
            cfg=settings.gate,
            adaptive=settings.adaptive,
            telemetry=self.game.telemetry,
        )

        self.w, self.h = self.game.w, self.game.h
        self.top_h = int(self.h * TOP_BAR_FRAC)
        self.deck_h = int(self.h * DECK_BAR_FRAC)

        n = max(1, len(self.deck))
        bw = min(180, (self.w - 40 - 12*(n-1)) // n)
        bh = self.deck_h - 24
        by = self.h - self.deck_h + 12
        x0 = self.w//2 - (n*bw + 12*(n-1))//2
        self.deck_btns = [
            Button(pygame.Rect(x0 + i*(bw+12), by, bw, bh), c.name, C_CARD, cb=self._request, arg=c,
                   hover_col=C_CARD_HI, sub=f"{c.cost}")
            for i, c in enumerate(self.deck)
        ]
        self.btn_mode = Button(pygame.Rect(self.w - 160, 12, 148, self.top_h - 24), "", C_PANEL, cb=self._toggle_mode)
        self._sync_mode_label()

        self.choice_btns: List[Button] = []
        self._choice_for = None

    def exit(self):
        self.gate.destroy()
        super().exit()

    # --- gate host callbacks ---
    def _request(self, unit: Combatant):
        self.gate.request(unit.id, int(unit.cost))

    def _spawn(self, cid: str, cost: int):
        # cost may have changed while the quiz was open
        if self.cost < cost:
            self.denied.append(cid)
            return
        self.cost -= cost
        unit = next((u for u in self.deck if u.id == cid), None)
        self.cooldowns[cid] = float(unit.spawn_cooldown() if unit else 0)
        self.spawned.append(cid)

    def _deny(self, cid: str, cost: int):
        self.denied.append(cid)

    def _toggle_mode(self):
        self.gate.toggle_adaptive()
        self._sync_mode_label()

    def _sync_mode_label(self):
        self.btn_mode.text = "MATH ON" if self.gate.adaptive else "MATH OFF"

    def _rebuild_choices(self):
        s = self.gate.session
        self._choice_for = s
        self.choice_btns = []
        if s is None:
            return
        panel = quiz_panel_rect(self.w, self.h)
        x0 = panel.centerx - QUIZ_BTN - QUIZ_GAP//2
        y0 = panel.bottom - 2*QUIZ_BTN - QUIZ_GAP - 16
        for i, v in enumerate(s.challenge.choices):
            row, col = divmod(i, 2)
            r = pygame.Rect(x0 + col*(QUIZ_BTN+QUIZ_GAP), y0 + row*(QUIZ_BTN+QUIZ_GAP), QUIZ_BTN, QUIZ_BTN)
            self.choice_btns.append(Button(r, str(v), C_CHOICE, cb=self.gate.answer, arg=v, hover_col=C_CARD_HI))

    # --- loop ---
    def handle_event(self, event):
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.request(QUIT)
                return
            if event.key == pygame.K_m:
                self._toggle_mode()
                return
            if self.gate.is_active() and pygame.K_1 <= event.key <= pygame.K_4:
                i = event.key - pygame.K_1
                if i < len(self.gate.session.challenge.choices):
                    self.gate.answer(self.gate.session.challenge.choices[i])
                return
        if event.type == pygame.MOUSEMOTION:
            for b in self.deck_btns + self.choice_btns:
                b.track(event.pos)
        if event.type == pygame.MOUSEBUTTONDOWN:
            if self.gate.is_active():
                # the overlay swallows clicks while a quiz is open
                for b in self.choice_btns:
                    b.click(event.pos)
                return
            self.btn_mode.click(event.pos)
            for b in self.deck_btns:
                b.click(event.pos)

    def update(self, dt: float):
        dt = self.game.clock.scaled_dt(dt)

        # UI timers always run, even when the world is held
        super().update(dt)
        if self._choice_for is not self.gate.session:
            self._rebuild_choices()

        if self.pause_world and self.gate.is_active():
            return

        self.cost = min(self.cost_max, self.cost + COST_REGEN * dt)
        ms = dt * 1000.0
        for k in list(self.cooldowns.keys()):
            self.cooldowns[k] = max(0.0, self.cooldowns[k] - ms)

        for b, u in zip(self.deck_btns, self.deck):
            total = float(u.spawn_cooldown()) or 1.0
            b.shade = self.cooldowns.get(u.id, 0.0) / total
            b.disabled = self.cost < u.cost

    def draw(self, screen):
        screen.fill(C_BG)
        ground_y = self.h - self.deck_h - int(self.h * 0.18)
        pygame.draw.rect(screen, C_GROUND, (0, ground_y, self.w, self.h - ground_y))
        pygame.draw.rect(screen, C_UI_BG, (0, self.h - self.deck_h, self.w, self.deck_h))

        draw_top_bar(screen, self.game.fonts, self.w, self.top_h, self.cost, self.cost_max, self.stage_label, len(self.spawned))
        self.btn_mode.draw(screen, self.game.fonts.s)

        for b, u in zip(self.deck_btns, self.deck):
            b.draw(screen, self.game.fonts.s, self.game.fonts.xs)
            pygame.draw.rect(screen, RARITY_COL.get(u.rarity, C_TEXT), (b.rect.x + 8, b.rect.y + 8, 10, 10), border_radius=5)

        if self.gate.is_active():
            draw_quiz_panel(screen, self.game.fonts, self.w, self.h, self.gate.session, self.choice_btns)
