"""Registry — реестры активов (Land, Building) и их directory."""

from .base import AssetRegistry
from .building import BuildingRegistry
from .config import RegistryConfig
from .directory import RegistryDirectory
from .land import LandRegistry

__all__ = [
    "AssetRegistry",
    "BuildingRegistry",
    "LandRegistry",
    "RegistryConfig",
    "RegistryDirectory",
]
