"""
Tests for the softener tank catalog.

Validates catalog order and contents, id lookup (including the string ids
a selection control hands back) and resin field pre-fill.
"""
import dataclasses

import pytest

from tools.exceptions import UnknownTankError
from tools.tank_catalog import (
    TANK_CATALOG,
    TankSpec,
    apply_tank_selection,
    default_tank,
    get_tank,
    list_tanks,
    resin_volume_for,
)


pytestmark = [pytest.mark.unit, pytest.mark.catalog]


class TestCatalogContents:

    def test_catalog_size_and_order(self):
        tanks = list_tanks()
        assert len(tanks) == 14
        assert tanks[0].label == '10" × 48" (Overall)'
        assert tanks[-1].label == '60" × 60" (Straight Wall)'

    def test_resin_volumes_are_increasing(self):
        volumes = [tank.resin_cuft for tank in list_tanks()]
        assert volumes == sorted(volumes)
        assert volumes[:5] == [1.0, 2.0, 3.0, 4.0, 7.0]
        assert volumes[-1] == 65.0

    def test_wall_types(self):
        overall = [t for t in list_tanks() if t.wall_type == "Overall"]
        straight = [t for t in list_tanks() if t.wall_type == "Straight Wall"]
        assert len(overall) == 5
        assert len(straight) == 9
        assert all(t.diameter_in >= 24 for t in straight)

    def test_entries_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            TANK_CATALOG[0].resin_cuft = 99.0

    def test_list_tanks_returns_same_table(self):
        assert list_tanks() is list_tanks()
        assert isinstance(list_tanks(), tuple)

    def test_default_tank_is_first(self):
        assert default_tank() is TANK_CATALOG[0]


class TestTankSpec:

    def test_metric_volume(self):
        tank = TankSpec('12" × 52" (Overall)', 12, 52, 2.0, "Overall")
        assert tank.resin_volume_L == pytest.approx(56.6336)

    def test_option_text(self):
        assert TANK_CATALOG[3].option_text == '16" × 65" (Overall) — 4 ft³'
        assert TANK_CATALOG[5].option_text == '24" × 60" (Straight Wall) — 10 ft³'

    def test_to_dict(self):
        entry = TANK_CATALOG[11].to_dict(11)
        assert entry["id"] == 11
        assert entry["diameter_in"] == 48
        assert entry["height_in"] == 72
        assert entry["resin_cuft"] == 42.0
        assert entry["resin_volume_L"] == pytest.approx(1189.3, abs=0.1)
        assert entry["wall_type"] == "Straight Wall"


class TestLookup:

    @pytest.mark.parametrize("tank_id, volume", [
        (0, 1.0), (4, 7.0), (8, 21.0), (9, 25.0), (13, 65.0),
        ("2", 3.0), (" 10 ", 35.0),
    ])
    def test_resin_volume_for(self, tank_id, volume):
        assert resin_volume_for(tank_id) == volume

    @pytest.mark.parametrize("tank_id", [-1, 14, 100, "x", "", "1.5", 2.0, None, True])
    def test_unknown_tank(self, tank_id):
        with pytest.raises(UnknownTankError) as exc_info:
            get_tank(tank_id)
        assert "list_softener_tanks" in exc_info.value.hint

    def test_apply_tank_selection_overwrites_resin(self):
        fields = {"hardness_gpg": "20", "resin_cuft_per_vessel": "1"}
        updated = apply_tank_selection(fields, 6)

        assert updated["resin_cuft_per_vessel"] == 15.0
        assert updated["hardness_gpg"] == "20"
        # caller's mapping is untouched
        assert fields["resin_cuft_per_vessel"] == "1"

    def test_apply_tank_selection_unknown_tank(self):
        with pytest.raises(UnknownTankError):
            apply_tank_selection({}, 42)
