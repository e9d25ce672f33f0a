"""Ledger — транзакционное хранилище и книга нативных балансов.

- TransactionCoordinator: lock + change-set, all-or-nothing commit
- LedgerStore: именованные mapping-и одного реестра
- AccountBook: балансы в wei, выплаты получателям
"""

from .accounts import AccountBook
from .store import LedgerStore
from .transaction import ChangeSet, TransactionCoordinator, atomic

__all__ = [
    "AccountBook",
    "ChangeSet",
    "LedgerStore",
    "TransactionCoordinator",
    "atomic",
]
