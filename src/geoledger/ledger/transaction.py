"""Transaction — атомарное исполнение публичных операций.

Модель исполнения: serializable-per-call.
- Один RLock координатора сериализует все публичные точки входа
  (create, transfer, attach/detach, purchase, чтения).
- Все записи буферизуются в ChangeSet; хранилища читают change-set
  прежде committed-состояния.
- Commit применяет записи и публикует события только при нормальном
  выходе из внешнего atomic(); любое исключение отбрасывает change-set.
- Вложенный atomic() (кросс-реестровый transfer внутри покупки)
  присоединяется к внешнему change-set через savepoint.
"""

import functools
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple

from geoledger.core.domain.events import LedgerEvent


logger = logging.getLogger(__name__)


# Маркер удалённого ключа в change-set
DELETED = object()


class ChangeSet:
    """
    Буфер записей одной транзакции.

    writes: {store: {mapping: {key: value | DELETED}}}
    events: [(store, event)] в порядке эмиссии
    """

    def __init__(self, label: str):
        self.label = label
        self.writes: Dict[Any, Dict[str, Dict[Hashable, Any]]] = {}
        self.events: List[Tuple[Any, LedgerEvent]] = []

    def lookup(self, store: Any, mapping: str, key: Hashable) -> Tuple[bool, Any]:
        """(found, value) из буфера; value может быть DELETED."""
        bucket = self.writes.get(store, {}).get(mapping)
        if bucket is None or key not in bucket:
            return False, None
        return True, bucket[key]

    def write(self, store: Any, mapping: str, key: Hashable, value: Any) -> None:
        self.writes.setdefault(store, {}).setdefault(mapping, {})[key] = value

    def pending(self, store: Any, mapping: str) -> Dict[Hashable, Any]:
        return self.writes.get(store, {}).get(mapping, {})

    def emit(self, store: Any, event: LedgerEvent) -> None:
        self.events.append((store, event))

    @property
    def is_empty(self) -> bool:
        return not self.events and not any(
            bucket for mappings in self.writes.values() for bucket in mappings.values()
        )

    def savepoint(self) -> Tuple[Dict[Any, Dict[str, Dict[Hashable, Any]]], int]:
        """Копия буфера для частичного отката вложенного блока."""
        writes = {
            store: {mapping: dict(bucket) for mapping, bucket in mappings.items()}
            for store, mappings in self.writes.items()
        }
        return writes, len(self.events)

    def rollback_to(self, savepoint: Tuple[Dict[Any, Dict[str, Dict[Hashable, Any]]], int]) -> None:
        writes, events_len = savepoint
        self.writes = writes
        del self.events[events_len:]


class TransactionCoordinator:
    """
    Координатор транзакций одного "мира" реестров.

    Все реестры и книга счетов, участвующие в одной покупке, обязаны
    разделять координатор: только тогда кросс-реестровый вызов входит
    в ту же атомарную единицу.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._current: Optional[ChangeSet] = None
        self._depth = 0
        self._committed = 0
        self._rolled_back = 0

    @property
    def current(self) -> Optional[ChangeSet]:
        """Активный change-set (виден только потоку, держащему lock)."""
        return self._current

    @property
    def in_transaction(self) -> bool:
        return self._current is not None

    @property
    def committed_count(self) -> int:
        return self._committed

    @property
    def rolled_back_count(self) -> int:
        return self._rolled_back

    @property
    def lock(self):
        """Lock, сериализующий все публичные вызовы мира."""
        return self._lock

    def require_active(self) -> ChangeSet:
        if self._current is None:
            raise RuntimeError("Ledger writes are only allowed inside atomic()")
        return self._current

    @contextmanager
    def atomic(self, label: str = "operation") -> Iterator[ChangeSet]:
        """
        Атомарный блок.

        Внешний блок открывает change-set и коммитит его при успехе.
        Вложенный блок берёт savepoint и при исключении откатывается к нему,
        после чего исключение пробрасывается дальше без изменений.
        """
        with self._lock:
            if self._current is not None:
                changeset = self._current
                savepoint = changeset.savepoint()
                self._depth += 1
                try:
                    yield changeset
                except BaseException:
                    changeset.rollback_to(savepoint)
                    raise
                finally:
                    self._depth -= 1
                return

            changeset = ChangeSet(label)
            self._current = changeset
            self._depth = 1
            try:
                yield changeset
            except BaseException as exc:
                self._current = None
                self._depth = 0
                self._rolled_back += 1
                if changeset.is_empty:
                    logger.debug("%s aborted before any write: %s", label, exc)
                else:
                    logger.warning("%s rolled back: %s", label, exc)
                raise
            self._current = None
            self._depth = 0
            self._commit(changeset)

    def _commit(self, changeset: ChangeSet) -> None:
        for store, mappings in changeset.writes.items():
            store._apply(mappings)
        for store, event in changeset.events:
            store._publish(event)
        self._committed += 1


def atomic(method):
    """Декоратор: метод объекта с атрибутом coordinator исполняется в atomic()."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.coordinator.atomic(f"{type(self).__name__}.{method.__name__}"):
            return method(self, *args, **kwargs)

    return wrapper
