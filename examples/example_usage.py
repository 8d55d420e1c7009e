#!/usr/bin/env python
"""
Example usage of the Water Softener Sizing tools
Demonstrates tank selection and sizing without going through an MCP client
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tools.exceptions import InvalidInputError
from tools.softener_sizing import compute_sizing
from tools.tank_catalog import apply_tank_selection, list_tanks
from tools.unit_conversions import calculate_hardness_as_caco3, mg_l_caco3_to_gpg


def example_softener_sizing():
    """Example workflow for sizing a twin-tank softener"""

    # Step 1: Convert the lab analysis to gpg
    print("=" * 60)
    print("STEP 1: Hardness from Lab Analysis")
    print("=" * 60)
    hardness_mg_l = calculate_hardness_as_caco3(ca_mg_l=85.0, mg_mg_l=24.0)
    hardness_gpg = mg_l_caco3_to_gpg(hardness_mg_l)
    print(f"  Total Hardness: {hardness_mg_l:.0f} mg/L as CaCO3 = {hardness_gpg:.1f} gpg")

    # Step 2: Pick a tank from the catalog
    print("\n" + "=" * 60)
    print("STEP 2: Tank Catalog")
    print("=" * 60)
    for tank_id, tank in enumerate(list_tanks()):
        print(f"  [{tank_id:2d}] {tank.option_text}")

    fields = {
        "hardness_gpg": hardness_gpg,
        "iron_ppm": 0.5,
        "manganese_ppm": 0.1,
        "daily_use_gpd": 600,
        "vessel_count": 2,
        "capacity_grains_per_cuft": 27000,
        "safety_pct": 10,
        "reserve_pct": 15,
    }
    fields = apply_tank_selection(fields, 2)

    # Step 3: Size the system
    print("\n" + "=" * 60)
    print("STEP 3: Sizing")
    print("=" * 60)
    result = compute_sizing(fields)
    print(f"  Configuration: {result.configuration}")
    print(f"  Resin: {result.resin_cuft_per_vessel:g} ft³ x {result.vessel_count} = {result.total_resin_cuft:g} ft³")
    print(f"  Effective Hardness: {result.effective_hardness_gpg:.2f} gpg")
    print(f"  Total Capacity: {result.total_capacity_grains:,.0f} grains")
    print(f"  Throughput (no safety): {result.raw_throughput_gal:,.0f} gal")
    print(f"  Throughput (operational): {result.operational_throughput_gal:,.0f} gal")
    print(f"  Regen Interval: {result.regen_interval_days:.2f} days")
    print(f"  Salt per Regen: {result.salt_per_regen_system_lb:.0f} lb "
          f"({result.salt_per_regen_per_vessel_lb:.0f} lb per vessel)")
    print(f"  Salt per 30 days: {result.salt_per_30_days_lb:.0f} lb")

    # Step 4: Validation failure
    try:
        compute_sizing({**fields, "daily_use_gpd": 0})
    except InvalidInputError as e:
        print(f"\nRejected: {e.message}")


if __name__ == "__main__":
    example_softener_sizing()
