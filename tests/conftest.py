"""
Shared pytest fixtures for softener-sizing-mcp test suite.

Provides:
- Test markers registration
- Common sizing input fixtures
- Parametrized test data for capacity presets
"""
import pytest
from typing import Dict, Any


# =============================================================================
# Pytest Markers Registration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "catalog: marks tank catalog tests")
    config.addinivalue_line("markers", "sizing: marks sizing calculator tests")
    config.addinivalue_line("markers", "server: marks MCP request-level tests")


# =============================================================================
# Sizing Input Fixtures
# =============================================================================

@pytest.fixture
def reference_input() -> Dict[str, Any]:
    """Single 2 ft³ vessel on 20 gpg water with 1 ppm iron.

    Effective hardness 23 gpg, 60,000 grain capacity, 30,000 gr/ft³ preset.
    """
    return {
        "hardness_gpg": 20.0,
        "iron_ppm": 1.0,
        "manganese_ppm": 0.0,
        "daily_use_gpd": 300.0,
        "resin_cuft_per_vessel": 2.0,
        "vessel_count": 1,
        "capacity_grains_per_cuft": 30000.0,
        "safety_pct": 10.0,
        "reserve_pct": 0.0,
    }


@pytest.fixture
def form_field_input() -> Dict[str, Any]:
    """Raw form values as a browser would hand them over (strings, blanks)."""
    return {
        "hardness_gpg": " 15 ",
        "iron_ppm": "",
        "manganese_ppm": "0.5",
        "daily_use_gpd": "250",
        "resin_cuft_per_vessel": "1.5",
        "vessel_count": "2",
        "capacity_grains_per_cuft": "24000",
        "salt_dose_lb_per_cuft": "",
    }


@pytest.fixture
def dual_vessel_input(reference_input) -> Dict[str, Any]:
    """Twin 3 ft³ vessels with manganese and an operating reserve."""
    data = dict(reference_input)
    data.update({
        "manganese_ppm": 0.5,
        "resin_cuft_per_vessel": 3.0,
        "vessel_count": 2,
        "capacity_grains_per_cuft": 27000.0,
        "reserve_pct": 20.0,
    })
    return data


# =============================================================================
# Parametrized Test Data
# =============================================================================

CAPACITY_PRESETS = [
    pytest.param((20000, 6.0), id="low_salt"),
    pytest.param((24000, 9.0), id="medium_salt"),
    pytest.param((27000, 12.0), id="high_salt"),
    pytest.param((30000, 15.0), id="max_salt"),
]


@pytest.fixture(params=CAPACITY_PRESETS)
def capacity_preset(request):
    """Parametrized (capacity grains/ft³, salt dose lb/ft³) preset pair."""
    return request.param
