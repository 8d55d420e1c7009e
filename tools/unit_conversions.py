"""
Unit Conversion Module for Water Softener Sizing MCP Server

Centralizes unit conversions between the US residential units used for
softener sizing (gpg, ft³) and the metric units found in lab water
analyses and tank datasheets.
"""

from enum import Enum
from typing import Any, Dict
from .core_config import CONFIG


class VolumeUnit(Enum):
    """Supported volume units"""
    CUFT = "ft³"
    L = "L"


def calculate_hardness_as_caco3(ca_mg_l: float, mg_mg_l: float) -> float:
    """
    Calculate total hardness as CaCO3 equivalent.

    Args:
        ca_mg_l: Calcium concentration in mg/L
        mg_mg_l: Magnesium concentration in mg/L

    Returns:
        Total hardness in mg/L as CaCO3
    """
    return ca_mg_l * CONFIG.CA_TO_CACO3 + mg_mg_l * CONFIG.MG_TO_CACO3


def mg_l_caco3_to_gpg(hardness_mg_l: float) -> float:
    """Convert hardness in mg/L as CaCO3 to grains per gallon."""
    return hardness_mg_l / CONFIG.MG_L_CACO3_PER_GPG


def estimate_hardness(ca_mg_l: float, mg_mg_l: float = 0.0) -> Dict[str, Any]:
    """
    Hardness of a lab analysis in the units the sizing calculator takes.

    Returns:
        Dict with hardness_mg_l_caco3 and hardness_gpg, or an error dict
        if either concentration is negative
    """
    if ca_mg_l < 0 or mg_mg_l < 0:
        return {
            "error": "Invalid water analysis",
            "message": "Calcium and magnesium must be non-negative",
        }
    hardness_mg_l = calculate_hardness_as_caco3(ca_mg_l, mg_mg_l)
    return {
        "hardness_mg_l_caco3": hardness_mg_l,
        "hardness_gpg": mg_l_caco3_to_gpg(hardness_mg_l),
    }


def convert_volume(value: float, from_unit: VolumeUnit, to_unit: VolumeUnit) -> float:
    """
    Convert volume between different units.

    Args:
        value: Volume value
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Converted volume
    """
    # Convert to L as intermediate unit
    if from_unit == VolumeUnit.CUFT:
        l_value = value * CONFIG.LITERS_PER_CUFT
    elif from_unit == VolumeUnit.L:
        l_value = value
    else:
        raise ValueError(f"Unknown volume unit: {from_unit}")

    # Convert from L to target unit
    if to_unit == VolumeUnit.CUFT:
        return l_value / CONFIG.LITERS_PER_CUFT
    elif to_unit == VolumeUnit.L:
        return l_value
    else:
        raise ValueError(f"Unknown volume unit: {to_unit}")
