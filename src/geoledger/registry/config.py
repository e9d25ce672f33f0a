"""RegistryConfig — параметры развёртывания реестра."""

from dataclasses import dataclass
from typing import Optional

from geoledger.core.domain.units import derive_address


@dataclass(frozen=True)
class RegistryConfig:
    """Конфигурация реестра.

    - name: человекочитаемое имя (также seed адреса)
    - default_uri: default metadata URI; "{id}" заменяется на 64-hex id
    - address: явный адрес; по умолчанию derive_address(name)
    """
    name: str
    default_uri: str = ""
    address: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("registry name must be non-empty")

    @property
    def resolved_address(self) -> str:
        return self.address or derive_address(self.name)
