"""Purchase — атомарные покупки с разделением платежа между владельцами."""

from .engine import PurchaseEngine
from .port import AssetRegistryPort
from .receipt import AssetTransfer, Payout, PurchaseReceipt

__all__ = [
    "PurchaseEngine",
    "AssetRegistryPort",
    "AssetTransfer",
    "Payout",
    "PurchaseReceipt",
]
