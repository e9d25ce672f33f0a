"""
Tests for Composition Graph

Покрывает:
- attach: UnknownLand, DuplicateEdge, проверка удалённого реестра/актива
- detach: EdgeNotFound, порядок оставшихся рёбер
- total_price: цена земли + Σ цен активов при любой последовательности attach/detach
"""

import pytest

from geoledger.core.domain import AssetAttached, AssetDetached, CompositionEdge, to_wei
from geoledger.core.errors import (
    DuplicateEdge,
    EdgeNotFound,
    NotRegistryOwner,
    UnknownGeohash,
    UnknownLand,
    UnknownRegistry,
)

from tests.conftest import BUILDING_SELLER, CONTRACT_OWNER, LAND_SELLER


@pytest.fixture
def parcel(land, building):
    land.create(CONTRACT_OWNER, LAND_SELLER, "geo1", to_wei("0.02"))
    building.create_batch(
        CONTRACT_OWNER,
        BUILDING_SELLER,
        ["b1", "b2", "b3"],
        [to_wei("0.01"), to_wei("0.005"), to_wei("0.1")],
    )
    return land, building


class TestAttach:
    """Тесты attach_asset"""

    def test_attach_appends_edge(self, parcel):
        land, building = parcel
        edge = land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)

        assert edge == CompositionEdge(
            land_geohash="geo1", asset_geohash="b1", registry_address=building.address
        )
        assert land.edges_of("geo1") == [edge]
        assert land.assets_of("geo1") == ["b1"]
        assert land.events[-1] == AssetAttached(
            land_geohash="geo1", asset_geohash="b1", registry_address=building.address
        )

    def test_insertion_order_preserved(self, parcel):
        land, building = parcel
        for geohash in ("b3", "b1", "b2"):
            land.attach_asset(CONTRACT_OWNER, "geo1", geohash, building.address)
        assert land.assets_of("geo1") == ["b3", "b1", "b2"]

    def test_unknown_land(self, parcel):
        land, building = parcel
        with pytest.raises(UnknownLand):
            land.attach_asset(CONTRACT_OWNER, "nowhere", "b1", building.address)

    def test_duplicate_edge(self, parcel):
        land, building = parcel
        land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)
        with pytest.raises(DuplicateEdge, match="already been added"):
            land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)
        assert land.assets_of("geo1") == ["b1"]

    def test_same_asset_on_two_lands_allowed(self, parcel):
        land, building = parcel
        land.create(CONTRACT_OWNER, LAND_SELLER, "geo2", 1)
        land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)
        land.attach_asset(CONTRACT_OWNER, "geo2", "b1", building.address)
        assert land.assets_of("geo2") == ["b1"]

    def test_unknown_registry(self, parcel):
        land, _ = parcel
        with pytest.raises(UnknownRegistry):
            land.attach_asset(CONTRACT_OWNER, "geo1", "b1", "0xdeadbeef")

    def test_unknown_remote_asset(self, parcel):
        land, building = parcel
        with pytest.raises(UnknownGeohash):
            land.attach_asset(CONTRACT_OWNER, "geo1", "missing", building.address)

    def test_land_cannot_contain_itself(self, parcel):
        land, _ = parcel
        with pytest.raises(DuplicateEdge):
            land.attach_asset(CONTRACT_OWNER, "geo1", "geo1", land.address)

    def test_attach_land_from_same_registry(self, parcel):
        land, _ = parcel
        land.create(CONTRACT_OWNER, LAND_SELLER, "geo1-annex", to_wei("0.001"))
        land.attach_asset(CONTRACT_OWNER, "geo1", "geo1-annex", land.address)
        assert land.total_price("geo1") == to_wei("0.021")

    def test_privileged_only(self, parcel):
        land, building = parcel
        with pytest.raises(NotRegistryOwner):
            land.attach_asset(LAND_SELLER, "geo1", "b1", building.address)
        assert land.edges_of("geo1") == []


class TestDetach:
    """Тесты detach_asset"""

    def test_detach_preserves_order(self, parcel):
        land, building = parcel
        for geohash in ("b1", "b2", "b3"):
            land.attach_asset(CONTRACT_OWNER, "geo1", geohash, building.address)

        removed = land.detach_asset(CONTRACT_OWNER, "geo1", "b2")

        assert removed.asset_geohash == "b2"
        assert land.assets_of("geo1") == ["b1", "b3"]
        assert land.events[-1] == AssetDetached(
            land_geohash="geo1", asset_geohash="b2", registry_address=building.address
        )

    def test_detach_last_edge(self, parcel):
        land, building = parcel
        land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)
        land.detach_asset(CONTRACT_OWNER, "geo1", "b1")
        assert land.edges_of("geo1") == []

    def test_detach_missing_edge(self, parcel):
        land, _ = parcel
        with pytest.raises(EdgeNotFound):
            land.detach_asset(CONTRACT_OWNER, "geo1", "b1")

    def test_detach_unknown_land(self, parcel):
        land, _ = parcel
        with pytest.raises(UnknownLand):
            land.detach_asset(CONTRACT_OWNER, "nowhere", "b1")

    def test_detach_disambiguates_by_registry(self, parcel):
        land, building = parcel
        land.create(CONTRACT_OWNER, LAND_SELLER, "b1", to_wei("0.3"))
        land.attach_asset(CONTRACT_OWNER, "geo1", "b1", land.address)
        land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)

        land.detach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)

        assert [e.registry_address for e in land.edges_of("geo1")] == [land.address]

    def test_privileged_only(self, parcel):
        land, building = parcel
        land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)
        with pytest.raises(NotRegistryOwner):
            land.detach_asset(LAND_SELLER, "geo1", "b1")


class TestTotalPrice:
    """total_price == price_of(land) + Σ price_of(edge)"""

    def test_land_without_assets(self, parcel):
        land, _ = parcel
        assert land.total_price("geo1") == land.price_of("geo1")

    def test_unknown_land(self, parcel):
        land, _ = parcel
        with pytest.raises(UnknownLand):
            land.total_price("nowhere")

    def test_tracks_attach_detach_sequence(self, parcel):
        land, building = parcel

        def expected():
            return land.price_of("geo1") + sum(
                building.price_of(g) for g in land.assets_of("geo1")
            )

        steps = [
            ("attach", "b1"),
            ("attach", "b2"),
            ("detach", "b1"),
            ("attach", "b3"),
            ("attach", "b1"),
            ("detach", "b3"),
        ]
        for action, geohash in steps:
            before = land.total_price("geo1")
            if action == "attach":
                land.attach_asset(CONTRACT_OWNER, "geo1", geohash, building.address)
                assert land.total_price("geo1") == before + building.price_of(geohash)
            else:
                land.detach_asset(CONTRACT_OWNER, "geo1", geohash)
                assert land.total_price("geo1") == before - building.price_of(geohash)
            assert land.total_price("geo1") == expected()

    def test_concrete_scenario_price(self, composed):
        land, _ = composed
        assert land.total_price("geo1") == to_wei("0.03")
