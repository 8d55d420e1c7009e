#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Water Softener Sizing MCP Server

An STDIO MCP server for residential and light-commercial water softener
sizing. Provides tools for tank catalog lookup, hardness estimation and
regeneration interval / salt use estimation.
"""

import os
import sys
from pathlib import Path

# Load environment variables before any other imports
from dotenv import load_dotenv
load_dotenv()
if os.path.exists('.env'):
    print(f"Loaded .env file from {os.path.abspath('.env')}", file=sys.stderr)


# Ensure project root is on sys.path so our local `tools` package wins over any
# site-packages modules with the same name.
def _resolve_project_root() -> Path:
    """Resolve the project root using environment override when valid."""
    env_root = os.environ.get("SOFTENER_SIZING_ROOT")
    if env_root:
        candidate = Path(env_root)
        if candidate.exists():
            return candidate
    return Path(__file__).resolve().parent


PROJECT_ROOT = _resolve_project_root()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Now do the rest of the imports
import asyncio
import logging
import time
from typing import Any, Dict, Optional, Union

from fastmcp import FastMCP

from tools.core_config import CONFIG
from tools.softener_sizing import size_water_softener
from tools.tank_catalog import catalog_entries, describe_tank
from tools.unit_conversions import estimate_hardness

# Configure logging for MCP - CRITICAL for protocol integrity
# Use a file handler for detailed logs and a stderr handler for warnings/errors only
file_handler = logging.FileHandler(CONFIG.get_log_file())
file_handler.setLevel(logging.INFO)

stderr_handler = logging.StreamHandler(sys.stderr)
stderr_handler.setLevel(logging.WARNING)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[file_handler, stderr_handler]
)
logger = logging.getLogger(__name__)

# Create FastMCP instance with configuration
mcp = FastMCP("Water Softener Sizing Server")


async def _run_with_timeout(func, *args) -> Any:
    """Run a synchronous tool function in the default executor with a timeout."""
    loop = asyncio.get_event_loop()
    return await asyncio.wait_for(
        loop.run_in_executor(None, func, *args),
        timeout=CONFIG.get_tool_timeout()
    )


@mcp.tool(
    description="""List the standard softener tanks.

    Returns every catalog tank in display order with its id, nominal
    diameter and height (inches), wall type and nominal resin volume
    (ft³ and L). Pass a tank id to size_water_softener to use its resin
    volume per vessel.
    """
)
async def list_softener_tanks() -> Dict[str, Any]:
    """List catalog tanks."""
    tanks = catalog_entries()
    logger.info(f"list_softener_tanks returned {len(tanks)} tanks")
    return {"tanks": tanks}


@mcp.tool(
    description="""Look up one softener tank by catalog id (0 = smallest)."""
)
async def get_softener_tank(tank_id: Union[int, str]) -> Dict[str, Any]:
    """Return a single catalog tank or an error dict."""
    return describe_tank(tank_id)


@mcp.tool(
    description="""Estimate total hardness in grains per gallon from a lab analysis.

    Input: calcium and magnesium in mg/L.
    Returns hardness as mg/L CaCO3 and as gpg (1 gpg = 17.1 mg/L as CaCO3).
    """
)
async def estimate_hardness_gpg(ca_mg_l: float, mg_mg_l: float = 0.0) -> Dict[str, Any]:
    """Convert Ca/Mg to softener hardness units."""
    return estimate_hardness(ca_mg_l, mg_mg_l)


@mcp.tool(
    name="size_water_softener",
    description="""Size a water softener: regeneration interval, throughput and salt use.

    Input parameter: sizing_input (object or JSON string)

    Example:
    {
      "hardness_gpg": 20,
      "iron_ppm": 1,
      "manganese_ppm": 0,
      "daily_use_gpd": 300,
      "resin_cuft_per_vessel": 2,
      "vessel_count": 1,
      "capacity_grains_per_cuft": 30000,
      "safety_pct": 10,
      "reserve_pct": 0
    }

    Required fields (positive numbers):
    - hardness_gpg: Water hardness (grains per gallon)
    - daily_use_gpd: Daily water use (gallons per day)
    - resin_cuft_per_vessel: Resin per vessel (ft³), or pass tank_id instead
    - capacity_grains_per_cuft: Capacity curve preset (20000, 24000, 27000, 30000)

    Optional fields:
    - iron_ppm, manganese_ppm: Foulants, add 3 and 2 gpg per ppm (default 0)
    - vessel_count: Vessels in parallel (default 1)
    - salt_dose_lb_per_cuft: Salt dose; inferred from the preset if absent
      (20000->6, 24000->9, 27000->12, 30000->15 lb/ft³); a dose of 0 or
      below leaves the salt figures null
    - safety_pct: Safety margin percent (default 10)
    - reserve_pct: Additional operational reserve percent (default 0)

    Salt figures that cannot be computed are returned as null and listed
    in unavailable_fields.
    """
)
async def size_softener(
    sizing_input: Union[Dict[str, Any], str],
    tank_id: Optional[Union[int, str]] = None
) -> Dict[str, Any]:
    """Size a softener for one set of inputs."""
    start_time = time.time()
    try:
        result = await _run_with_timeout(size_water_softener, sizing_input, tank_id)
    except asyncio.TimeoutError:
        logger.error("size_water_softener timed out")
        return {
            "error": "Sizing timeout",
            "message": "The sizing calculation took too long to complete",
            "hint": "Try again or check server logs",
        }

    elapsed = time.time() - start_time
    logger.info(f"size_water_softener completed in {elapsed:.3f} seconds")
    return result


# Main entry point
def main():
    """Run the MCP server."""
    logger.info("Starting Water Softener Sizing MCP Server...")
    logger.info(f"Project root: {PROJECT_ROOT}")

    logger.info("Available tools:")
    logger.info("  - list_softener_tanks: Standard tank catalog")
    logger.info("  - get_softener_tank: Single tank lookup")
    logger.info("  - estimate_hardness_gpg: Ca/Mg analysis to gpg")
    logger.info("  - size_water_softener: Regeneration interval and salt use")
    logger.info(f"Tool timeout: {CONFIG.get_tool_timeout()} seconds")

    mcp.run()


if __name__ == "__main__":
    main()
