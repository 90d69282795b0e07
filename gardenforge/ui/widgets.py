from __future__ import annotations
import pygame

from ..settings import C_INK

class Button:
    def __init__(self, rect: pygame.Rect, text: str, col, cb=None, arg=None, hover_col=None, sub: str = ""):
        self.rect = rect
        self.text = text
        self.sub = sub
        self.col = col
        self.hover_col = hover_col or col
        self.cb = cb
        self.arg = arg
        self.disabled = False
        self.visible = True
        self.hover = False
        # 0..1 share of the button covered by a cooldown shade
        self.shade = 0.0

    def draw(self, surf, font, sub_font=None):
        if not self.visible: return
        c = (150,150,150) if self.disabled else (self.hover_col if self.hover else self.col)
        pygame.draw.rect(surf, c, self.rect, border_radius=10)
        pygame.draw.rect(surf, C_INK, self.rect, 3, border_radius=10)
        if self.shade > 0:
            h = int(self.rect.h * min(1.0, self.shade))
            s = pygame.Surface((self.rect.w, h), pygame.SRCALPHA)
            s.fill((0,0,0,120))
            surf.blit(s, (self.rect.x, self.rect.bottom - h))
        txt = font.render(self.text, True, C_INK)
        ty = self.rect.centery - txt.get_height()//2
        if self.sub and sub_font:
            ty -= sub_font.get_height()//2
            st = sub_font.render(self.sub, True, C_INK)
            surf.blit(st, (self.rect.centerx - st.get_width()//2, ty + txt.get_height()))
        surf.blit(txt, (self.rect.centerx - txt.get_width()//2, ty))

    def track(self, pos):
        self.hover = self.visible and self.rect.collidepoint(pos)

    def click(self, pos):
        if self.visible and (not self.disabled) and self.rect.collidepoint(pos) and self.cb:
            if self.arg is None: self.cb()
            else: self.cb(self.arg)
            return True
        return False
