from __future__ import annotations

import os

# headless pygame for the host scene tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("GARDENFORGE_LOG", "0")
