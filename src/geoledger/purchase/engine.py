"""Purchase Engine — атомарная покупка с разделением платежа.

Один вызов purchase() — одна логическая транзакция:
1. Resolve          — владелец/id/цена актива (UnknownGeohash)
2. Price            — required = цена актива + Σ цен прикреплённых активов
3. Validate payment — каждый актив выставлен на продажу (NotForSale),
                      payment == required строго (PaymentMismatch),
                      баланс покупателя и права агента на удалённых реестрах
4. Transfer assets  — актив и все прикреплённые активы → покупатель
                      (в порядке вставки рёбер)
5. Disburse funds   — каждому прежнему владельцу его цена
6. Commit / Abort   — квитанция проверяется по контракту purchase_receipt;
                      любой сбой в 4-6 откатывает всё целиком

Промежуточное состояние не персистится: атомарность обеспечивает
TransactionCoordinator общей книги счетов.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from geoledger.core.contracts import validate_purchase_receipt
from geoledger.core.domain.units import checked_sum, validate_amount, validate_target
from geoledger.core.errors import (
    AgentNotAuthorized,
    InsufficientFunds,
    NotForSale,
    PaymentMismatch,
)
from geoledger.ledger.accounts import AccountBook

from .port import AssetRegistryPort
from .receipt import AssetTransfer, Payout, PurchaseReceipt


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Lot:
    """Разрешённый (resolve) актив покупки."""

    registry: AssetRegistryPort
    geohash: str
    asset_id: int
    owner: str
    price: int


class PurchaseEngine:
    """Оркестратор покупки поверх AssetRegistryPort и AccountBook."""

    def __init__(self, accounts: AccountBook):
        self.accounts = accounts

    def quote(
        self,
        registry: AssetRegistryPort,
        geohash: str,
        attached: Sequence[Tuple[AssetRegistryPort, str]] = (),
    ) -> int:
        """Требуемая сумма платежа (шаги 1-2 без побочных эффектов)."""
        with self.accounts.coordinator.atomic("quote"):
            lots = self._resolve(registry, geohash, attached)
            return checked_sum(lot.price for lot in lots)

    def beneficiary_split(
        self,
        registry: AssetRegistryPort,
        geohash: str,
        attached: Sequence[Tuple[AssetRegistryPort, str]] = (),
    ) -> List[Payout]:
        """Пары (получатель, сумма): владелец каждого актива получает его цену."""
        with self.accounts.coordinator.atomic("beneficiary_split"):
            lots = self._resolve(registry, geohash, attached)
            return [Payout(payee=lot.owner, amount_wei=lot.price) for lot in lots]

    def purchase(
        self,
        buyer: str,
        registry: AssetRegistryPort,
        geohash: str,
        payment: int,
        attached: Sequence[Tuple[AssetRegistryPort, str]] = (),
    ) -> PurchaseReceipt:
        """
        Атомарная покупка актива (и прикреплённых активов).

        Args:
            buyer: покупатель (caller), с его счёта списывается payment
            registry: реестр продаваемого актива; выступает агентом передачи
            geohash: ключ продаваемого актива
            payment: приложенная сумма в wei
            attached: (реестр, geohash) прикреплённых активов в порядке рёбер

        Returns:
            PurchaseReceipt со всеми передачами и выплатами

        Raises:
            UnknownGeohash: актив (или прикреплённый актив) не найден
            NotForSale: актив (или прикреплённый актив) снят с продажи
            PaymentMismatch: payment != required
            InsufficientFunds: на счёте покупателя меньше payment
            AgentNotAuthorized: удалённый реестр не авторизовал registry
            PaymentRejected: получатель отказался от выплаты
        """
        validate_target(buyer, "buyer")
        validate_amount(payment)
        agent = registry.address

        with self.accounts.coordinator.atomic(f"purchase {geohash!r}"):
            # 1. Resolve
            lots = self._resolve(registry, geohash, attached)

            # 2. Price
            required = checked_sum(lot.price for lot in lots)

            # 3. Validate payment (и права до любых эффектов)
            for lot in lots:
                if not lot.registry.is_for_sale(lot.geohash):
                    raise NotForSale(lot.geohash, lot.registry.address)
            if payment != required:
                raise PaymentMismatch(required, payment)
            balance = self.accounts.balance_of(buyer)
            if balance < payment:
                raise InsufficientFunds(buyer, balance, payment)
            for lot in lots[1:]:
                if lot.registry is not registry and not lot.registry.is_authorized_agent(agent):
                    raise AgentNotAuthorized(agent, lot.registry.address)

            # 4. Transfer assets
            transfers = []
            for lot in lots:
                lot.registry.transfer(agent, lot.owner, buyer, lot.asset_id)
                transfers.append(
                    AssetTransfer(
                        registry=lot.registry.address,
                        geohash=lot.geohash,
                        asset_id=lot.asset_id,
                        from_owner=lot.owner,
                        to=buyer,
                    )
                )

            # 5. Disburse funds
            payouts = []
            for lot in lots:
                self.accounts.pay(buyer, lot.owner, lot.price)
                payouts.append(Payout(payee=lot.owner, amount_wei=lot.price))

            # 6. Commit — при выходе из внешнего atomic()
            logger.debug(
                "Settled %r for %s: %d transfers, %s wei", geohash, buyer, len(transfers), required
            )
            receipt = PurchaseReceipt(
                buyer=buyer,
                registry=agent,
                geohash=geohash,
                total_wei=required,
                with_assets=bool(attached),
                transfers=tuple(transfers),
                payouts=tuple(payouts),
            )
            validate_purchase_receipt(receipt.to_dict())
            return receipt

    def _resolve(
        self,
        registry: AssetRegistryPort,
        geohash: str,
        attached: Sequence[Tuple[AssetRegistryPort, str]],
    ) -> List[_Lot]:
        lots = []
        for target, target_geohash in [(registry, geohash), *attached]:
            lots.append(
                _Lot(
                    registry=target,
                    geohash=target_geohash,
                    asset_id=target.id_of(target_geohash),
                    owner=target.owner_of(target_geohash),
                    price=target.price_of(target_geohash),
                )
            )
        return lots
