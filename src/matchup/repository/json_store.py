"""JSON-based repository for the static game tables."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from matchup.domain import models as dm
from matchup.schemas.unit import UnitRecord

logger = logging.getLogger(__name__)

UNITS_FILE = "units_stats.json"
MODIFIERS_FILE = "faction_modifiers.json"
FACTIONS_FILE = "factions.json"
MAPS_FILE = "maps.json"


class StaticDataRepository:
    """Read-only access to unit, modifier, faction and map tables on disk."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self._units: TypeAdapter[list[UnitRecord]] = TypeAdapter(list[UnitRecord])
        self._modifiers: TypeAdapter[dict[str, dm.FactionModifier]] = TypeAdapter(
            dict[str, dm.FactionModifier]
        )
        self._factions: TypeAdapter[list[dm.Faction]] = TypeAdapter(list[dm.Faction])
        self._maps: TypeAdapter[list[dm.BattleMap]] = TypeAdapter(list[dm.BattleMap])

    def _path_for(self, filename: str) -> Path:
        return self.base_path / filename

    def load_units(self) -> list[UnitRecord]:
        """Load the unit table; a table that is not a JSON array yields no units."""

        path = self._path_for(UNITS_FILE)
        payload = json.loads(path.read_bytes())
        if not isinstance(payload, list):
            logger.error("%s does not contain a list of units; ignoring it", path)
            return []
        return self._units.validate_python(payload)

    def load_modifiers(self) -> dict[str, dm.FactionModifier]:
        """Load per-faction multipliers; a missing file means no modifiers."""

        path = self._path_for(MODIFIERS_FILE)
        if not path.exists():
            logger.warning("%s not found; using neutral modifiers", path)
            return {}
        return self._modifiers.validate_json(path.read_bytes())

    def load_factions(self) -> list[dm.Faction]:
        """Load the faction catalog in file order."""

        factions = self._factions.validate_json(self._path_for(FACTIONS_FILE).read_bytes())
        names = [faction.name for faction in factions]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate faction names in {FACTIONS_FILE}")
        return factions

    def load_maps(self) -> list[dm.BattleMap]:
        """Load the map catalog in file order."""

        return self._maps.validate_json(self._path_for(MAPS_FILE).read_bytes())
