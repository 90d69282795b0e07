from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..models import Combatant, Mission, RARITIES, rarity_rank
from .errors import ContentLoadError, DuplicateMissionError


def _read_list(path: Path) -> list:
    if not path.exists():
        raise ContentLoadError(f"{path}: file not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ContentLoadError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, list):
        raise ContentLoadError(f"{path}: expected a JSON list")
    return data


def _write_list(path: Path, rows: list):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)
        f.write("\n")


class RosterStore:
    """Combatant records keyed by id, backed by one JSON list."""

    def __init__(self, combatants: List[Combatant], path: Optional[Path] = None):
        self.path = path
        self._by_id: Dict[str, Combatant] = {}
        for c in combatants:
            if c.id in self._by_id:
                raise ContentLoadError(f"duplicate combatant id '{c.id}'")
            self._by_id[c.id] = c

    @classmethod
    def load(cls, path: Path) -> "RosterStore":
        try:
            rows = [Combatant.from_dict(d) for d in _read_list(path)]
        except (KeyError, TypeError, ValueError) as e:
            raise ContentLoadError(f"{path}: bad combatant record ({e})") from e
        return cls(rows, path=path)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Combatant]:
        return iter(self._by_id.values())

    def __contains__(self, cid: str) -> bool:
        return cid in self._by_id

    def get(self, cid: str) -> Optional[Combatant]:
        return self._by_id.get(cid)

    def all(self) -> List[Combatant]:
        return list(self._by_id.values())

    def by_rarity(self) -> Dict[str, List[Combatant]]:
        """Partition by tier, tiers in RARITIES order, roster order within a tier."""
        out: Dict[str, List[Combatant]] = {r: [] for r in RARITIES}
        for c in self._by_id.values():
            out.setdefault(c.rarity, []).append(c)
        return {r: out[r] for r in sorted(out, key=rarity_rank) if out[r]}

    def save(self, path: Optional[Path] = None):
        target = path or self.path
        if target is None:
            raise ContentLoadError("roster has no backing file")
        _write_list(target, [c.to_dict() for c in self._by_id.values()])


class MissionCatalog:
    """Mission records keyed by id. Append-only from the authoring side."""

    def __init__(self, missions: List[Mission], path: Optional[Path] = None):
        self.path = path
        # kept as a list: the validator must be able to see duplicated ids
        self._missions: List[Mission] = list(missions)

    @classmethod
    def load(cls, path: Path) -> "MissionCatalog":
        try:
            rows = [Mission.from_dict(d) for d in _read_list(path)]
        except (KeyError, TypeError, ValueError) as e:
            raise ContentLoadError(f"{path}: bad mission record ({e})") from e
        return cls(rows, path=path)

    def __len__(self) -> int:
        return len(self._missions)

    def __iter__(self) -> Iterator[Mission]:
        return iter(self._missions)

    def __contains__(self, mid: str) -> bool:
        return any(m.id == mid for m in self._missions)

    def get(self, mid: str) -> Optional[Mission]:
        for m in self._missions:
            if m.id == mid:
                return m
        return None

    def all(self) -> List[Mission]:
        return list(self._missions)

    def ids(self) -> List[str]:
        return [m.id for m in self._missions]

    def by_difficulty(self, label: str) -> List[Mission]:
        return [m for m in self._missions if m.difficulty == label]

    def by_zone(self, zone: str) -> List[Mission]:
        return [m for m in self._missions if (m.zone or "world1") == zone]

    def append(self, mission: Mission):
        if mission.id in self:
            raise DuplicateMissionError(f"stage id '{mission.id}' already exists")
        self._missions.append(mission)

    def save(self, path: Optional[Path] = None):
        target = path or self.path
        if target is None:
            raise ContentLoadError("catalog has no backing file")
        _write_list(target, [m.to_dict() for m in self._missions])
