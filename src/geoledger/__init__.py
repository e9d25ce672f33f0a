"""
geoledger — tokenized land/building registry and marketplace.

Land parcels and buildings (keyed by opaque geohash strings) are minted as
uniquely-owned assets, optionally composed (building attached to land across
registries) and sold through atomic multi-beneficiary purchases.
"""

from geoledger.ledger import AccountBook, TransactionCoordinator
from geoledger.registry import (
    BuildingRegistry,
    LandRegistry,
    RegistryConfig,
    RegistryDirectory,
)

__version__ = "0.1.0"

__all__ = [
    "AccountBook",
    "TransactionCoordinator",
    "BuildingRegistry",
    "LandRegistry",
    "RegistryConfig",
    "RegistryDirectory",
]
