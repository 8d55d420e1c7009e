"""
Core Configuration Module for Water Softener Sizing MCP Server

Centralizes all configuration constants to prevent duplication and divergence.
Empirical weights, design defaults, unit factors and paths are defined here.
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
import os
from typing import Mapping, Optional
import logging

logger = logging.getLogger(__name__)


# Get project root with robust approach
def get_project_root() -> Path:
    """Get project root with environment variable support."""
    # Strategy 1: Environment variable (most reliable for MCP clients)
    if 'SOFTENER_SIZING_ROOT' in os.environ:
        root = Path(os.environ['SOFTENER_SIZING_ROOT'])
        if root.exists():
            return root
        logger.warning(f"SOFTENER_SIZING_ROOT points to non-existent path: {root}")

    # Strategy 2: Relative to this file (fallback)
    return Path(__file__).resolve().parent.parent


# Salt dose (lb NaCl per ft³ resin) for each capacity-curve preset (grains/ft³).
# Lookup is by exact equality; anything else has no known dose.
_SALT_DOSE_LB_PER_CUFT_BY_CAPACITY = MappingProxyType({
    20000.0: 6.0,
    24000.0: 9.0,
    27000.0: 12.0,
    30000.0: 15.0,
})


@dataclass(frozen=True)
class CoreConfig:
    """
    Centralized configuration for softener sizing.

    Using frozen=True ensures these values cannot be modified at runtime.
    """

    # Hardness penalties for foulants (gpg added per ppm)
    IRON_HARDNESS_WEIGHT: float = 3.0
    MANGANESE_HARDNESS_WEIGHT: float = 2.0

    # Design defaults
    DEFAULT_SAFETY_PCT: float = 10.0  # Derate for resin fouling / efficiency loss
    DEFAULT_RESERVE_PCT: float = 0.0  # Optional operational reserve
    DEFAULT_VESSEL_COUNT: int = 1
    MIN_PERCENT: float = 0.0
    MAX_PERCENT: float = 100.0

    # Reporting period for salt consumption
    SALT_USE_PERIOD_DAYS: int = 30

    # Unit factors
    MG_L_CACO3_PER_GPG: float = 17.1  # 1 gpg = 17.1 mg/L as CaCO3
    LITERS_PER_CUFT: float = 28.3168
    CA_TO_CACO3: float = 2.497  # 100.09 / 40.08
    MG_TO_CACO3: float = 4.118  # 100.09 / 24.305

    # Server limits
    MAX_REQUEST_SIZE_BYTES: int = 1024 * 1024
    DEFAULT_TOOL_TIMEOUT_S: float = 30.0

    def get_salt_dose_table(self) -> Mapping[float, float]:
        """Read-only capacity preset (grains/ft³) -> salt dose (lb/ft³) table."""
        return _SALT_DOSE_LB_PER_CUFT_BY_CAPACITY

    def get_log_file(self) -> Path:
        """Get log file path from environment or default next to the project."""
        env_path = os.getenv('SOFTENER_SIZING_LOG_FILE')
        if env_path:
            return Path(env_path)
        return get_project_root() / "softener_sizing_mcp.log"

    def get_tool_timeout(self, default: Optional[float] = None) -> float:
        """Get per-call timeout (seconds) for MCP tools."""
        fallback = self.DEFAULT_TOOL_TIMEOUT_S if default is None else default
        raw = os.getenv('MCP_SIZING_TIMEOUT_S')
        if raw is None:
            return fallback
        try:
            timeout = float(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid MCP_SIZING_TIMEOUT_S={raw!r}, using {fallback}s")
            return fallback
        if timeout <= 0:
            logger.warning(f"Ignoring non-positive MCP_SIZING_TIMEOUT_S={raw!r}, using {fallback}s")
            return fallback
        return timeout


# Create singleton instance
CONFIG = CoreConfig()
