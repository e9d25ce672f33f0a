"""RegistryDirectory — разрешение адреса реестра в объект реестра.

Рёбра композиции хранят только адрес удалённого реестра; directory
превращает его в handle на публичный интерфейс этого реестра.
"""

import logging
from typing import Dict, Iterator

from geoledger.core.errors import CoordinatorMismatch, UnknownRegistry
from geoledger.ledger.transaction import TransactionCoordinator


logger = logging.getLogger(__name__)


class RegistryDirectory:
    """Адрес → реестр (все реестры разделяют один координатор)."""

    def __init__(self, coordinator: TransactionCoordinator):
        self.coordinator = coordinator
        self._registries: Dict[str, object] = {}

    def register(self, registry) -> None:
        """
        Raises:
            CoordinatorMismatch: реестр живёт в другом координаторе
            ValueError: адрес уже занят другим реестром
        """
        if registry.coordinator is not self.coordinator:
            raise CoordinatorMismatch(registry.address)
        with self.coordinator.lock:
            existing = self._registries.get(registry.address)
            if existing is not None and existing is not registry:
                raise ValueError(f"Address {registry.address} is already registered")
            self._registries[registry.address] = registry
        logger.debug("Registered %s at %s", registry.name, registry.address)

    def unregister(self, registry) -> None:
        """Снятие регистрации; адрес, занятый другим реестром, не трогается."""
        with self.coordinator.lock:
            if self._registries.get(registry.address) is registry:
                del self._registries[registry.address]
                logger.debug("Unregistered %s at %s", registry.name, registry.address)

    def resolve(self, address: str):
        registry = self._registries.get(address)
        if registry is None:
            raise UnknownRegistry(address)
        return registry

    def __contains__(self, address: str) -> bool:
        return address in self._registries

    def __iter__(self) -> Iterator[object]:
        return iter(list(self._registries.values()))

    def __len__(self) -> int:
        return len(self._registries)
