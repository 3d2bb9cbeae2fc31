"""Domain model for the matchup generator.

This package hosts the pure rules layer.  It exposes:

* Dataclasses describing factions, maps, teams and session state (see :mod:`models`).
* Enumerations used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`).
* Pure rule functions: stat aggregation (:mod:`stats`) and team allocation
  (:mod:`allocation`).

Nothing here performs I/O; static tables are loaded by the repository layer.
"""

from . import allocation, enums, models, rules_config, stats

__all__ = [
    "allocation",
    "enums",
    "models",
    "rules_config",
    "stats",
]
