from __future__ import annotations
import pygame

class Fonts:
    def __init__(self, h: int):
        # sized from window height so the quiz stays readable in fullscreen
        self.title    = pygame.font.SysFont("Arial", max(18, h // 32), bold=True)
        self.question = pygame.font.SysFont("Arial", max(22, h // 26), bold=True)
        self.choice   = pygame.font.SysFont("Arial", max(16, h // 36), bold=True)
        self.s        = pygame.font.SysFont("Arial", max(12, h // 52))
        self.xs       = pygame.font.SysFont("Arial", max(11, h // 64))

def make_fonts(h: int) -> Fonts:
    return Fonts(h)
