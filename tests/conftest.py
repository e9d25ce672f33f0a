"""Общие fixtures: координатор, книга счетов, directory и два реестра."""

import pytest

from geoledger.core.domain.units import to_wei
from geoledger.ledger import AccountBook, TransactionCoordinator
from geoledger.registry import BuildingRegistry, LandRegistry, RegistryConfig, RegistryDirectory


CONTRACT_OWNER = "0x00000000000000000000000000000000000000c0"
LAND_SELLER = "0x00000000000000000000000000000000000000a1"
BUILDING_SELLER = "0x00000000000000000000000000000000000000b1"
BUYER = "0x00000000000000000000000000000000000000d1"
OTHER_BUYER = "0x00000000000000000000000000000000000000d2"
OPERATOR = "0x00000000000000000000000000000000000000e1"

LAND_URI = "https://example.com/land/{id}.json"
BUILDING_URI = "https://example.com/building/{id}.json"


@pytest.fixture
def coordinator():
    return TransactionCoordinator()


@pytest.fixture
def accounts(coordinator):
    book = AccountBook(coordinator)
    book.fund(BUYER, to_wei("10"))
    book.fund(OTHER_BUYER, to_wei("10"))
    return book


@pytest.fixture
def directory(coordinator):
    return RegistryDirectory(coordinator)


@pytest.fixture
def land(coordinator, accounts, directory):
    return LandRegistry(
        CONTRACT_OWNER,
        coordinator,
        accounts,
        RegistryConfig(name="land", default_uri=LAND_URI),
        directory,
    )


@pytest.fixture
def building(coordinator, accounts, directory):
    return BuildingRegistry(
        CONTRACT_OWNER,
        coordinator,
        accounts,
        RegistryConfig(name="building", default_uri=BUILDING_URI),
        directory=directory,
    )


@pytest.fixture
def composed(land, building):
    """geo1 (0.02) с прикреплённым b1 (0.01); реестр земли — агент реестра зданий."""
    land.create(CONTRACT_OWNER, LAND_SELLER, "geo1", to_wei("0.02"))
    building.create(CONTRACT_OWNER, BUILDING_SELLER, "b1", to_wei("0.01"))
    land.attach_asset(CONTRACT_OWNER, "geo1", "b1", building.address)
    building.set_authorized_agent(CONTRACT_OWNER, land.address, True)
    return land, building
