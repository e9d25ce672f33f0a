"""Authorization Layer — allow-list агентов передачи реестра.

Authorized agent (другой реестр или адрес) вправе вызывать transfer
от имени любого владельца без per-owner approval. Нужен, чтобы
Purchase Engine одного реестра мог переместить актив другого реестра
в рамках кросс-реестровой покупки.
"""

import logging
from typing import List

from geoledger.core.domain.events import AgentAuthorizationChanged
from geoledger.core.domain.units import validate_target
from geoledger.ledger.transaction import atomic


logger = logging.getLogger(__name__)


class AgentAllowList:
    """
    Mixin для AssetRegistry.

    Требует от хост-класса: _store (mapping "agent"), coordinator,
    _only_owner(caller), address.
    """

    @atomic
    def set_authorized_agent(self, caller: str, agent: str, enabled: bool) -> None:
        """
        Выдача/отзыв права агента (только владелец реестра).

        Raises:
            NotRegistryOwner: caller не владелец реестра
            ZeroAddress: agent — нулевой адрес
        """
        self._only_owner(caller)
        validate_target(agent, "agent")
        if enabled:
            self._store.set("agent", agent, True)
        else:
            self._store.delete("agent", agent)
        self._store.emit(AgentAuthorizationChanged(agent=agent, enabled=enabled))
        logger.info(
            "%s: agent %s %s", self.name, agent, "authorized" if enabled else "revoked"
        )

    @atomic
    def is_authorized_agent(self, agent: str) -> bool:
        # Реестр всегда агент самого себя (внутренний расчёт покупки)
        if agent == self.address:
            return True
        return bool(self._store.get("agent", agent, False))

    @atomic
    def authorized_agents(self) -> List[str]:
        return [agent for agent, _ in self._store.items("agent")]
