from __future__ import annotations

# Window defaults
DEFAULT_W = 1280
DEFAULT_H = 720
FPS = 60

TOP_BAR_FRAC = 0.10
DECK_BAR_FRAC = 0.20
DECK_SIZE = 5

# cost gauge (spend currency)
COST_START = 200
COST_MAX = 1000
COST_REGEN = 100      # per second

# quiz panel
QUIZ_PANEL_W = 300
QUIZ_PANEL_H = 250
QUIZ_BTN = 60
QUIZ_GAP = 12

# colors
C_BG      = (135, 206, 235)
C_GROUND  = (124, 179, 66)
C_UI_BG   = (59, 42, 26)
C_TEXT    = (240, 240, 240)
C_GOLD    = (255, 215, 0)
C_CARD    = (248, 231, 182)
C_CARD_HI = (255, 243, 207)
C_INK     = (59, 42, 26)
C_PANEL   = (255, 248, 231)
C_CHOICE  = (255, 224, 102)
C_OK      = (45, 106, 79)
C_FAIL    = (193, 18, 31)

RARITY_COL = {
    "N": (200, 200, 200),
    "R": (120, 200, 255),
    "SR": (210, 120, 255),
    "SSR": (255, 215, 0),
    "UR": (255, 80, 200),
}
