"""
Softener Tank Catalog

Fixed, ordered list of standard mineral tanks with their nominal resin
volume. A tank's id is its position in the catalog. Selecting a tank fills
in the resin volume per vessel for the sizing calculator.

Volumes for the 16", 21", 42"×60" and 48"×72" tanks are typical estimates;
check the manufacturer's sheet for the exact fill.
"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Mapping, Tuple

from .exceptions import UnknownTankError
from .unit_conversions import VolumeUnit, convert_volume

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TankSpec:
    """Nominal dimensions and resin fill of a softener tank."""
    label: str
    diameter_in: float
    height_in: float
    resin_cuft: float
    wall_type: str  # "Overall" height or "Straight Wall" height

    @property
    def resin_volume_L(self) -> float:
        return convert_volume(self.resin_cuft, VolumeUnit.CUFT, VolumeUnit.L)

    @property
    def option_text(self) -> str:
        """Text shown for this tank in a selection control."""
        return f"{self.label} — {self.resin_cuft:g} ft³"

    def to_dict(self, tank_id: int) -> Dict[str, Any]:
        return {
            "id": tank_id,
            "label": self.label,
            "diameter_in": self.diameter_in,
            "height_in": self.height_in,
            "resin_cuft": self.resin_cuft,
            "resin_volume_L": round(self.resin_volume_L, 1),
            "wall_type": self.wall_type,
            "option_text": self.option_text,
        }


def _tank(diameter_in: float, height_in: float, resin_cuft: float, wall_type: str) -> TankSpec:
    label = f'{diameter_in:g}" × {height_in:g}" ({wall_type})'
    return TankSpec(label, diameter_in, height_in, resin_cuft, wall_type)


TANK_CATALOG: Tuple[TankSpec, ...] = (
    _tank(10, 48, 1.0, "Overall"),
    _tank(12, 52, 2.0, "Overall"),
    _tank(14, 65, 3.0, "Overall"),
    _tank(16, 65, 4.0, "Overall"),
    _tank(21, 62, 7.0, "Overall"),
    _tank(24, 60, 10.0, "Straight Wall"),
    _tank(30, 60, 15.0, "Straight Wall"),
    _tank(36, 60, 20.0, "Straight Wall"),
    _tank(42, 60, 21.0, "Straight Wall"),
    _tank(42, 72, 25.0, "Straight Wall"),
    _tank(48, 60, 35.0, "Straight Wall"),
    _tank(48, 72, 42.0, "Straight Wall"),
    _tank(54, 60, 50.0, "Straight Wall"),
    _tank(60, 60, 65.0, "Straight Wall"),
)


def list_tanks() -> Tuple[TankSpec, ...]:
    """Return the catalog in display order."""
    return TANK_CATALOG


def catalog_entries() -> List[Dict[str, Any]]:
    """Every catalog tank as a dict, id = position."""
    return [tank.to_dict(tank_id) for tank_id, tank in enumerate(TANK_CATALOG)]


def default_tank() -> TankSpec:
    """Tank used to pre-fill the resin volume before any selection."""
    return TANK_CATALOG[0]


def _coerce_tank_id(tank_id: Any) -> int:
    # Selection controls hand back the option value as a string
    if isinstance(tank_id, bool):
        raise UnknownTankError(tank_id, len(TANK_CATALOG))
    if isinstance(tank_id, int):
        index = tank_id
    elif isinstance(tank_id, str) and tank_id.strip().isdigit():
        index = int(tank_id.strip())
    else:
        raise UnknownTankError(tank_id, len(TANK_CATALOG))

    if not 0 <= index < len(TANK_CATALOG):
        raise UnknownTankError(tank_id, len(TANK_CATALOG))
    return index


def get_tank(tank_id: Any) -> TankSpec:
    """
    Look up a catalog entry.

    Args:
        tank_id: Position in the catalog (int or digit string)

    Returns:
        The TankSpec at that position

    Raises:
        UnknownTankError: If the id is not an integer in range
    """
    return TANK_CATALOG[_coerce_tank_id(tank_id)]


def describe_tank(tank_id: Any) -> Dict[str, Any]:
    """Catalog entry as a dict for MCP responses, or an UnknownTankError dict."""
    try:
        index = _coerce_tank_id(tank_id)
    except UnknownTankError as e:
        logger.warning(f"Tank lookup failed: {e}")
        return e.to_dict()
    return TANK_CATALOG[index].to_dict(index)


def resin_volume_for(tank_id: Any) -> float:
    """Nominal resin volume (ft³) of a catalog tank."""
    return get_tank(tank_id).resin_cuft


def apply_tank_selection(fields: Mapping[str, Any], tank_id: Any) -> Dict[str, Any]:
    """
    Return a copy of raw sizing fields with the resin volume per vessel
    overwritten by the selected tank's nominal volume.
    """
    tank = get_tank(tank_id)
    updated = dict(fields)
    updated["resin_cuft_per_vessel"] = tank.resin_cuft
    logger.debug(f"Tank {tank.label} selected, resin per vessel set to {tank.resin_cuft} ft³")
    return updated
