"""
Contract Validation Module

Модуль для валидации JSON контрактов geoledger (снапшоты реестров,
квитанции покупок).
"""

from .validators import (
    ContractValidator,
    PurchaseReceiptValidator,
    RegistryStateValidator,
    SchemaLoader,
    validate_purchase_receipt,
    validate_registry_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "RegistryStateValidator",
    "PurchaseReceiptValidator",
    # Functions
    "validate_registry_state",
    "validate_purchase_receipt",
]
