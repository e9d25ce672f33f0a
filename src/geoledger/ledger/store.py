"""Store — хранилище именованных mapping-ов с транзакционными записями.

Каждый реестр владеет своим LedgerStore (никаких process-wide синглтонов).
Значения в mapping-ах неизменяемы (int, str, tuple, frozen модели):
буфер change-set хранит значения целиком, без глубокого копирования.
"""

from typing import Any, Dict, Hashable, Iterable, Iterator, List, Tuple

from geoledger.core.domain.events import LedgerEvent

from .transaction import DELETED, TransactionCoordinator


class LedgerStore:
    """
    Хранилище mapping-ов одного реестра.

    Чтения видят change-set активной транзакции; записи и события
    допускаются только внутри coordinator.atomic().
    """

    def __init__(self, name: str, coordinator: TransactionCoordinator, mappings: Iterable[str]):
        self.name = name
        self.coordinator = coordinator
        self._maps: Dict[str, Dict[Hashable, Any]] = {mapping: {} for mapping in mappings}
        self._events: List[LedgerEvent] = []

    def __repr__(self) -> str:
        return f"LedgerStore({self.name!r})"

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def get(self, mapping: str, key: Hashable, default: Any = None) -> Any:
        committed = self._maps[mapping]
        changeset = self.coordinator.current
        if changeset is not None:
            found, value = changeset.lookup(self, mapping, key)
            if found:
                return default if value is DELETED else value
        return committed.get(key, default)

    def contains(self, mapping: str, key: Hashable) -> bool:
        sentinel = object()
        return self.get(mapping, key, sentinel) is not sentinel

    def items(self, mapping: str) -> Iterator[Tuple[Hashable, Any]]:
        """Слитый вид committed + pending (порядок вставки сохраняется)."""
        merged = dict(self._maps[mapping])
        changeset = self.coordinator.current
        if changeset is not None:
            for key, value in changeset.pending(self, mapping).items():
                if value is DELETED:
                    merged.pop(key, None)
                else:
                    merged[key] = value
        return iter(list(merged.items()))

    @property
    def events(self) -> Tuple[LedgerEvent, ...]:
        """Опубликованные (committed) события."""
        return tuple(self._events)

    # -------------------------------------------------------------------------
    # Запись
    # -------------------------------------------------------------------------

    def set(self, mapping: str, key: Hashable, value: Any) -> None:
        if mapping not in self._maps:
            raise KeyError(f"Unknown mapping {mapping!r} in store {self.name!r}")
        self.coordinator.require_active().write(self, mapping, key, value)

    def delete(self, mapping: str, key: Hashable) -> None:
        if mapping not in self._maps:
            raise KeyError(f"Unknown mapping {mapping!r} in store {self.name!r}")
        self.coordinator.require_active().write(self, mapping, key, DELETED)

    def emit(self, event: LedgerEvent) -> None:
        self.coordinator.require_active().emit(self, event)

    # -------------------------------------------------------------------------
    # Commit (вызывается только координатором)
    # -------------------------------------------------------------------------

    def _apply(self, mappings: Dict[str, Dict[Hashable, Any]]) -> None:
        for mapping, bucket in mappings.items():
            target = self._maps[mapping]
            for key, value in bucket.items():
                if value is DELETED:
                    target.pop(key, None)
                else:
                    target[key] = value

    def _publish(self, event: LedgerEvent) -> None:
        self._events.append(event)
