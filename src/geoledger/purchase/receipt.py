"""PurchaseReceipt — результат закоммиченной атомарной покупки.

Сериализуется в dict, совместимый с контрактом purchase_receipt.json.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class AssetTransfer:
    """Одна передача актива в рамках покупки."""

    registry: str
    geohash: str
    asset_id: int
    from_owner: str
    to: str


@dataclass(frozen=True)
class Payout:
    """Доля одного получателя (beneficiary split)."""

    payee: str
    amount_wei: int


@dataclass(frozen=True)
class PurchaseReceipt:
    """Результат покупки."""

    buyer: str
    registry: str
    geohash: str
    total_wei: int
    with_assets: bool

    transfers: Tuple[AssetTransfer, ...]
    payouts: Tuple[Payout, ...]

    def amount_paid_to(self, payee: str) -> int:
        """Суммарная выплата получателю (у него может быть несколько активов)."""
        return sum(p.amount_wei for p in self.payouts if p.payee == payee)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["transfers"] = list(data["transfers"])
        data["payouts"] = list(data["payouts"])
        return data
