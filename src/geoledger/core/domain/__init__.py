"""
Domain models and value objects.

Contains fundamental domain entities like Asset, CompositionEdge, RegistryState,
ledger events and wei/address units.
"""

from geoledger.core.domain.asset import Asset, AssetKind, CompositionEdge
from geoledger.core.domain.events import (
    AgentAuthorizationChanged,
    ApprovalForAll,
    AssetAttached,
    AssetDetached,
    LedgerEvent,
    OwnershipTransferred,
    Purchased,
    Transfer,
    URIChanged,
    ValueTransferred,
)
from geoledger.core.domain.registry_state import (
    REGISTRY_STATE_SCHEMA_VERSION,
    AssetRecord,
    OperatorApproval,
    RegistryState,
)
from geoledger.core.domain.units import (
    MAX_AMOUNT_WEI,
    WEI_PER_ETHER,
    ZERO_ADDRESS,
    checked_sum,
    derive_address,
    from_wei,
    to_wei,
    validate_amount,
    validate_geohash,
    validate_target,
)

__all__ = [
    # Units module
    "WEI_PER_ETHER",
    "MAX_AMOUNT_WEI",
    "ZERO_ADDRESS",
    "to_wei",
    "from_wei",
    "checked_sum",
    "derive_address",
    "validate_amount",
    "validate_geohash",
    "validate_target",
    # Asset models
    "Asset",
    "AssetKind",
    "CompositionEdge",
    # Registry snapshot
    "REGISTRY_STATE_SCHEMA_VERSION",
    "RegistryState",
    "AssetRecord",
    "OperatorApproval",
    # Events
    "LedgerEvent",
    "Transfer",
    "ApprovalForAll",
    "AgentAuthorizationChanged",
    "AssetAttached",
    "AssetDetached",
    "URIChanged",
    "OwnershipTransferred",
    "Purchased",
    "ValueTransferred",
]
