"""
Water Softener Sizing Tool

Estimates regeneration interval, salt use and throughput for a
cation-exchange water softener from hardness, foulant levels, daily water
use, resin volume and the selected capacity curve.

Effective hardness adds weighted iron and manganese penalties to the
measured hardness:

    effective_hardness = hardness + 3·Fe + 2·Mn   (gpg, ppm)

Throughput is the system capacity divided by effective hardness, derated
first by the safety margin and then by the operational reserve:

    raw         = capacity_per_cuft · resin_cuft / effective_hardness
    safe        = raw · (1 - safety_pct/100)
    operational = safe · (1 - reserve_pct/100)

Salt figures need a salt dose (lb/ft³). When none is given it is looked up
from the capacity preset. An unknown preset, or an explicit dose of 0 or
below, leaves every salt figure unavailable (None) rather than zero.
"""

import json
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core_config import CONFIG
from .exceptions import InvalidInputError, SofteningDesignError
from .tank_catalog import apply_tank_selection

logger = logging.getLogger(__name__)

REQUIRED_POSITIVE_FIELDS = (
    "hardness_gpg",
    "daily_use_gpd",
    "resin_cuft_per_vessel",
    "capacity_grains_per_cuft",
)

EXAMPLE_SIZING_INPUT = {
    "hardness_gpg": 20,
    "iron_ppm": 1,
    "manganese_ppm": 0,
    "daily_use_gpd": 300,
    "resin_cuft_per_vessel": 2,
    "vessel_count": 1,
    "capacity_grains_per_cuft": 30000,
    "safety_pct": 10,
    "reserve_pct": 0,
}


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw field value into a finite float.

    Numbers pass through, strings are trimmed and parsed. Blank strings,
    booleans, unparseable text and non-finite values give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def infer_salt_dose_from_preset(capacity_grains_per_cuft: Optional[float]) -> Optional[float]:
    """Salt dose (lb/ft³) for a capacity preset, or None if not a known preset."""
    if capacity_grains_per_cuft is None:
        return None
    return CONFIG.get_salt_dose_table().get(capacity_grains_per_cuft)


def configuration_label(vessel_count: int) -> str:
    if vessel_count == 1:
        return "Single"
    if vessel_count == 2:
        return "Dual / Parallel"
    return f"Multi-vessel ({vessel_count})"


class SizingInput(BaseModel):
    """
    Input for softener sizing.

    Raw form values are accepted: numeric strings are parsed, blanks count
    as absent. Required fields that are missing or non-numeric are kept as
    None so compute_sizing can reject them together.

    Example:
        {
            "hardness_gpg": 20,
            "iron_ppm": 1,
            "daily_use_gpd": 300,
            "resin_cuft_per_vessel": 2,
            "capacity_grains_per_cuft": 30000
        }
    """
    model_config = ConfigDict(frozen=True)

    # Required (validated by compute_sizing)
    hardness_gpg: Optional[float] = Field(None, description="Water hardness (gpg), must be > 0")
    daily_use_gpd: Optional[float] = Field(None, description="Daily water use (gal/day), must be > 0")
    resin_cuft_per_vessel: Optional[float] = Field(None, description="Resin per vessel (ft³), must be > 0")
    capacity_grains_per_cuft: Optional[float] = Field(
        None,
        description="Capacity curve preset (grains/ft³), e.g. 20000, 24000, 27000, 30000"
    )

    # Optional with defaults
    iron_ppm: float = Field(0.0, description="Iron (ppm), absent or invalid counts as 0")
    manganese_ppm: float = Field(0.0, description="Manganese (ppm), absent or invalid counts as 0")
    vessel_count: int = Field(CONFIG.DEFAULT_VESSEL_COUNT, description="Vessels in parallel, at least 1")
    salt_dose_lb_per_cuft: Optional[float] = Field(
        None,
        description="Explicit salt dose (lb/ft³); inferred from the capacity preset if absent"
    )
    safety_pct: Optional[float] = Field(None, description="Safety margin (%), default 10, clamped to 0-100")
    reserve_pct: Optional[float] = Field(None, description="Operational reserve (%), default 0, clamped to 0-100")

    @field_validator(
        "hardness_gpg", "daily_use_gpd", "resin_cuft_per_vessel",
        "capacity_grains_per_cuft", "safety_pct", "reserve_pct",
        mode="before"
    )
    @classmethod
    def _parse_optional_number(cls, value: Any) -> Optional[float]:
        return parse_number(value)

    @field_validator("iron_ppm", "manganese_ppm", mode="before")
    @classmethod
    def _parse_foulant(cls, value: Any) -> float:
        number = parse_number(value)
        if number is None or number < 0:
            return 0.0
        return number

    @field_validator("vessel_count", mode="before")
    @classmethod
    def _parse_vessel_count(cls, value: Any) -> int:
        number = parse_number(value)
        if number is None:
            return CONFIG.DEFAULT_VESSEL_COUNT
        return max(1, math.floor(number))

    @field_validator("salt_dose_lb_per_cuft", mode="before")
    @classmethod
    def _parse_salt_dose(cls, value: Any) -> Optional[float]:
        # Blank or unparseable doses fall back to preset inference. Zero and
        # negative doses are kept; compute_sizing reports them as unusable.
        return parse_number(value)


class SizingResult(BaseModel):
    """Softener sizing estimate. None marks a value that could not be computed."""
    model_config = ConfigDict(frozen=True)

    # Echoed (effective) inputs
    configuration: str = Field(..., description="Single, Dual / Parallel or Multi-vessel")
    vessel_count: int
    resin_cuft_per_vessel: float
    capacity_grains_per_cuft: float
    daily_use_gpd: float
    safety_pct: float = Field(..., description="Safety margin applied after clamping")
    reserve_pct: float = Field(..., description="Operational reserve applied after clamping")

    # Derived quantities
    total_resin_cuft: float = Field(..., description="Resin volume of all vessels")
    effective_hardness_gpg: float = Field(..., description="Hardness + 3·Fe + 2·Mn")
    daily_grain_load: float = Field(..., description="Grains removed per day")
    total_capacity_grains: float = Field(..., description="System exchange capacity")
    raw_throughput_gal: float = Field(..., description="Gallons between regenerations, no derate")
    safety_adjusted_throughput_gal: float = Field(..., description="Throughput after safety margin")
    operational_throughput_gal: float = Field(..., description="Throughput after safety and reserve")
    regen_interval_days: float = Field(..., description="Days between regenerations")

    # Salt figures
    salt_dose_lb_per_cuft: Optional[float] = Field(None, description="Salt dose used")
    salt_dose_source: str = Field(..., description="explicit, preset or unavailable")
    salt_per_regen_system_lb: Optional[float] = None
    salt_per_regen_per_vessel_lb: Optional[float] = None
    salt_efficiency_grains_per_lb: Optional[float] = None
    salt_per_day_lb: Optional[float] = None
    salt_per_30_days_lb: Optional[float] = None

    unavailable_fields: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


def _clamp_percent(value: Optional[float], default_pct: float) -> float:
    pct = default_pct if value is None else value
    return min(max(pct, CONFIG.MIN_PERCENT), CONFIG.MAX_PERCENT)


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def compute_sizing(sizing_input: Union[SizingInput, Mapping[str, Any]]) -> SizingResult:
    """
    Compute softener sizing for one input.

    Args:
        sizing_input: SizingInput, or a mapping of raw field values

    Returns:
        SizingResult with unavailable salt figures set to None

    Raises:
        InvalidInputError: If hardness, daily use, resin volume or capacity
            is missing, non-numeric, zero or negative, or if the derived
            capacity, throughput or interval overflows
    """
    if not isinstance(sizing_input, SizingInput):
        sizing_input = SizingInput.model_validate(dict(sizing_input))

    invalid = {
        name: getattr(sizing_input, name)
        for name in REQUIRED_POSITIVE_FIELDS
        if not _is_positive(getattr(sizing_input, name))
    }
    if invalid:
        raise InvalidInputError(invalid)

    logger.debug(f"Sizing input: {sizing_input.model_dump()}")
    warnings: List[str] = []

    hardness = sizing_input.hardness_gpg
    daily_use = sizing_input.daily_use_gpd
    resin_per_vessel = sizing_input.resin_cuft_per_vessel
    capacity_per_cuft = sizing_input.capacity_grains_per_cuft
    vessel_count = sizing_input.vessel_count

    total_resin_cuft = resin_per_vessel * vessel_count

    effective_hardness = (
        hardness
        + CONFIG.IRON_HARDNESS_WEIGHT * sizing_input.iron_ppm
        + CONFIG.MANGANESE_HARDNESS_WEIGHT * sizing_input.manganese_ppm
    )
    daily_grain_load = effective_hardness * daily_use
    total_capacity_grains = capacity_per_cuft * total_resin_cuft

    # effective_hardness > 0: hardness validated positive, penalties non-negative
    raw_throughput_gal = total_capacity_grains / effective_hardness

    # Safety margin is always applied; 0 % is a valid request
    safety_pct = _clamp_percent(sizing_input.safety_pct, CONFIG.DEFAULT_SAFETY_PCT)
    safety_frac = safety_pct / 100.0
    safety_adjusted_gal = raw_throughput_gal * (1 - safety_frac)

    # Reserve compounds with the safety margin
    reserve_pct = _clamp_percent(sizing_input.reserve_pct, CONFIG.DEFAULT_RESERVE_PCT)
    reserve_frac = reserve_pct / 100.0
    operational_gal = safety_adjusted_gal * (1 - reserve_frac)

    for name, requested, applied in (
        ("safety_pct", sizing_input.safety_pct, safety_pct),
        ("reserve_pct", sizing_input.reserve_pct, reserve_pct),
    ):
        if requested is not None and requested != applied:
            warnings.append(f"{name} {requested:g} clamped to {applied:g}")

    regen_interval_days = operational_gal / daily_use

    overflowed = {
        name: value
        for name, value in (
            ("total_resin_cuft", total_resin_cuft),
            ("effective_hardness_gpg", effective_hardness),
            ("daily_grain_load", daily_grain_load),
            ("total_capacity_grains", total_capacity_grains),
            ("raw_throughput_gal", raw_throughput_gal),
            ("regen_interval_days", regen_interval_days),
        )
        if not math.isfinite(value)
    }
    if overflowed:
        raise InvalidInputError(
            overflowed,
            hint="Inputs are too large to size; check the units of hardness, "
                 "daily use, resin ft³ and capacity"
        )

    explicit_dose = sizing_input.salt_dose_lb_per_cuft
    if explicit_dose is not None:
        salt_dose = explicit_dose if explicit_dose > 0 else None
        salt_dose_source = "explicit"
    else:
        salt_dose = infer_salt_dose_from_preset(capacity_per_cuft)
        salt_dose_source = "preset" if salt_dose is not None else "unavailable"

    salt_per_regen_system = None
    salt_per_regen_per_vessel = None
    salt_efficiency = None
    salt_per_day = None
    salt_per_period = None

    if salt_dose is not None and not math.isfinite(salt_dose * total_resin_cuft):
        warnings.append(
            f"Salt dose {salt_dose:g} lb/ft³ is too large to estimate salt use"
        )
        salt_dose = None
    elif explicit_dose is not None and salt_dose is None:
        warnings.append(
            f"Explicit salt dose {explicit_dose:g} lb/ft³ is not usable; "
            f"enter a dose above 0 to estimate salt use"
        )
    elif salt_dose is None:
        warnings.append(
            f"No salt dose known for capacity preset {capacity_per_cuft:g} grains/ft³; "
            f"enter an explicit salt dose to estimate salt use"
        )

    if salt_dose is not None:
        salt_per_regen_system = salt_dose * total_resin_cuft
        salt_per_regen_per_vessel = salt_dose * resin_per_vessel
        if salt_per_regen_system > 0 and math.isfinite(total_capacity_grains / salt_per_regen_system):
            salt_efficiency = total_capacity_grains / salt_per_regen_system
        if regen_interval_days > 0:
            per_day = salt_per_regen_system / regen_interval_days
            if math.isfinite(per_day * CONFIG.SALT_USE_PERIOD_DAYS):
                salt_per_day = per_day
                salt_per_period = per_day * CONFIG.SALT_USE_PERIOD_DAYS
            else:
                warnings.append("Daily salt use is too large to estimate")
        else:
            warnings.append(
                "Operational throughput is zero at the requested safety/reserve margins; "
                "daily salt use is unavailable"
            )

    values = {
        "configuration": configuration_label(vessel_count),
        "vessel_count": vessel_count,
        "resin_cuft_per_vessel": resin_per_vessel,
        "capacity_grains_per_cuft": capacity_per_cuft,
        "daily_use_gpd": daily_use,
        "safety_pct": safety_pct,
        "reserve_pct": reserve_pct,
        "total_resin_cuft": total_resin_cuft,
        "effective_hardness_gpg": effective_hardness,
        "daily_grain_load": daily_grain_load,
        "total_capacity_grains": total_capacity_grains,
        "raw_throughput_gal": raw_throughput_gal,
        "safety_adjusted_throughput_gal": safety_adjusted_gal,
        "operational_throughput_gal": operational_gal,
        "regen_interval_days": regen_interval_days,
        "salt_dose_lb_per_cuft": salt_dose,
        "salt_dose_source": salt_dose_source,
        "salt_per_regen_system_lb": salt_per_regen_system,
        "salt_per_regen_per_vessel_lb": salt_per_regen_per_vessel,
        "salt_efficiency_grains_per_lb": salt_efficiency,
        "salt_per_day_lb": salt_per_day,
        "salt_per_30_days_lb": salt_per_period,
    }
    unavailable = [name for name, value in values.items() if value is None]
    if unavailable:
        logger.info(f"Sizing degraded, unavailable: {', '.join(unavailable)}")

    logger.info(
        f"Sized {vessel_count} x {resin_per_vessel:g} ft³: "
        f"{operational_gal:.0f} gal/regen, {regen_interval_days:.2f} days"
    )

    return SizingResult(**values, unavailable_fields=unavailable, warnings=warnings)


def size_water_softener(
    input_data: Union[str, Mapping[str, Any]],
    tank_id: Any = None
) -> Dict[str, Any]:
    """
    Request-level entry for the MCP tool.

    Args:
        input_data: Raw sizing fields as a dict or JSON object string
        tank_id: Optional catalog tank whose volume replaces resin_cuft_per_vessel

    Returns:
        SizingResult as a dict, or an error dict with "error" and "message"
    """
    if isinstance(input_data, str):
        if len(input_data) > CONFIG.MAX_REQUEST_SIZE_BYTES:
            return {
                "error": "Request too large",
                "message": (
                    f"Request size {len(input_data)} bytes exceeds maximum "
                    f"{CONFIG.MAX_REQUEST_SIZE_BYTES} bytes"
                ),
            }
        try:
            input_data = json.loads(input_data)
        except json.JSONDecodeError:
            return {
                "error": "Invalid JSON input",
                "message": "Input must be a valid JSON object or dict",
            }

    if not isinstance(input_data, Mapping):
        return {
            "error": "Invalid input structure",
            "message": f"Expected an object of sizing fields, got {type(input_data).__name__}",
            "example_structure": EXAMPLE_SIZING_INPUT,
        }

    try:
        if tank_id is not None:
            input_data = apply_tank_selection(input_data, tank_id)
        result = compute_sizing(input_data)
    except SofteningDesignError as e:
        logger.warning(f"Softener sizing rejected: {e}")
        error = e.to_dict()
        if isinstance(e, InvalidInputError):
            error["example_structure"] = EXAMPLE_SIZING_INPUT
        return error

    return result.model_dump()


