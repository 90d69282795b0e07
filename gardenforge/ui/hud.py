from __future__ import annotations
import pygame
from ..settings import C_UI_BG, C_TEXT, C_GOLD, C_PANEL, C_INK, C_OK, C_FAIL, QUIZ_PANEL_W, QUIZ_PANEL_H
from ..systems.spawn_gate import CORRECT

def draw_top_bar(screen, fonts, w: int, top_h: int, cost: float, cost_max: float, stage_label: str, spawned: int):
    pygame.draw.rect(screen, C_UI_BG, (0, 0, w, top_h))

    t = fonts.title.render(f"{stage_label}   ALLIES {spawned}", True, C_TEXT)
    screen.blit(t, (20, top_h//2 - t.get_height()//2))

    # cost gauge (right)
    bar_w = 260
    bx = w - bar_w - 180
    by = top_h//2 - 8
    pygame.draw.rect(screen, (50, 40, 30), (bx, by, bar_w, 16), border_radius=8)
    fill = int(bar_w * (cost / max(1.0, cost_max)))
    pygame.draw.rect(screen, C_GOLD, (bx, by, fill, 16), border_radius=8)
    lbl = fonts.xs.render(f"COST {int(cost)}/{int(cost_max)}", True, C_TEXT)
    screen.blit(lbl, (bx + bar_w//2 - lbl.get_width()//2, by + 18))


def quiz_panel_rect(w: int, h: int) -> pygame.Rect:
    return pygame.Rect(w//2 - QUIZ_PANEL_W//2, h//2 - 80 - QUIZ_PANEL_H//2, QUIZ_PANEL_W, QUIZ_PANEL_H)


def draw_quiz_panel(screen, fonts, w: int, h: int, session, buttons):
    s = pygame.Surface((w, h), pygame.SRCALPHA)
    s.fill((0, 0, 0, 178))
    screen.blit(s, (0, 0))

    panel = quiz_panel_rect(w, h)
    pygame.draw.rect(screen, C_PANEL, panel, border_radius=14)
    pygame.draw.rect(screen, C_INK, panel, 4, border_radius=14)

    title = fonts.title.render("Quiz!", True, C_INK)
    screen.blit(title, (panel.centerx - title.get_width()//2, panel.y + 10))
    q = fonts.question.render(session.challenge.text, True, C_OK)
    screen.blit(q, (panel.centerx - q.get_width()//2, panel.y + 14 + title.get_height()))

    for b in buttons:
        b.draw(screen, fonts.choice)

    if session.result is not None:
        if session.result == CORRECT:
            r = fonts.question.render("OK!", True, C_OK)
        else:
            r = fonts.question.render(f"x  {session.challenge.answer}", True, C_FAIL)
        screen.blit(r, (panel.centerx - r.get_width()//2, panel.bottom + 8))
