"""
AccountBook — Книга нативных балансов (wei)

Моделирует value, прикреплённый к вызову: покупатель дебетуется на сумму
платежа, получатели кредитуются своими долями. Все движения идут через
общий TransactionCoordinator и откатываются вместе с передачей активов.

Получатель может отказаться принимать платежи (аналог контракта, чей
receive делает revert) — тогда любая выплата ему проваливает весь расчёт.
"""

import logging

from geoledger.core.domain.events import ValueTransferred
from geoledger.core.domain.units import MAX_AMOUNT_WEI, validate_amount, validate_target
from geoledger.core.errors import InsufficientFunds, InvalidAmount, PaymentRejected

from .store import LedgerStore
from .transaction import TransactionCoordinator, atomic


logger = logging.getLogger(__name__)


class AccountBook:
    """Балансы аккаунтов в wei."""

    def __init__(self, coordinator: TransactionCoordinator, name: str = "accounts"):
        self.coordinator = coordinator
        self._store = LedgerStore(name, coordinator, ("balance", "refuses"))

    @property
    def events(self):
        return self._store.events

    # =========================================================================
    # Чтение
    # =========================================================================

    @atomic
    def balance_of(self, account: str) -> int:
        return self._store.get("balance", account, 0)

    @atomic
    def accepts_payments(self, account: str) -> bool:
        return not self._store.get("refuses", account, False)

    # =========================================================================
    # Запись
    # =========================================================================

    @atomic
    def fund(self, account: str, amount: int) -> int:
        """
        Зачисление средств извне (genesis / faucet).

        Returns:
            Новый баланс аккаунта
        """
        validate_target(account, "account")
        validate_amount(amount)
        balance = self._store.get("balance", account, 0) + amount
        if balance > MAX_AMOUNT_WEI:
            raise InvalidAmount(balance)
        self._store.set("balance", account, balance)
        logger.debug("Funded %s with %s wei", account, amount)
        return balance

    @atomic
    def set_accepts_payments(self, account: str, accepts: bool) -> None:
        if accepts:
            self._store.delete("refuses", account)
        else:
            self._store.set("refuses", account, True)

    @atomic
    def debit(self, account: str, amount: int) -> None:
        """
        Списание со счёта.

        Raises:
            InsufficientFunds: Если баланс меньше суммы
        """
        validate_amount(amount)
        balance = self._store.get("balance", account, 0)
        if balance < amount:
            raise InsufficientFunds(account, balance, amount)
        self._store.set("balance", account, balance - amount)

    @atomic
    def credit(self, account: str, amount: int) -> None:
        """
        Зачисление на счёт.

        Raises:
            PaymentRejected: Если аккаунт не принимает платежи
        """
        validate_amount(amount)
        if self._store.get("refuses", account, False):
            raise PaymentRejected(account, amount)
        balance = self._store.get("balance", account, 0) + amount
        if balance > MAX_AMOUNT_WEI:
            raise InvalidAmount(balance)
        self._store.set("balance", account, balance)

    @atomic
    def pay(self, payer: str, payee: str, amount: int) -> None:
        """Перевод payer → payee одной атомарной единицей."""
        validate_target(payee, "payee")
        self.debit(payer, amount)
        self.credit(payee, amount)
        self._store.emit(ValueTransferred(payer=payer, payee=payee, amount_wei=amount))
