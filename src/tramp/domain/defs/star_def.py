"""Star system catalog structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class StarSystemDef:
    """A star system with its position in light-years relative to Sol.

    ``spectral_class`` and ``station_count`` are flavour for the map and for
    event targeting; prices never read them.
    """

    id: int
    name: str
    x: float
    y: float
    z: float
    spectral_class: str
    station_count: int = 1
