"""Тесты Authorization Layer (authorized agents)."""

import pytest

from geoledger.core.domain import AgentAuthorizationChanged, ZERO_ADDRESS
from geoledger.core.errors import AuthorizationError, NotRegistryOwner, ZeroAddress

from tests.conftest import CONTRACT_OWNER, LAND_SELLER, OPERATOR


class TestAuthorizedAgents:
    def test_grant_and_revoke(self, building, land):
        assert not building.is_authorized_agent(land.address)

        building.set_authorized_agent(CONTRACT_OWNER, land.address, True)
        assert building.is_authorized_agent(land.address)
        assert building.authorized_agents() == [land.address]
        assert building.events[-1] == AgentAuthorizationChanged(agent=land.address, enabled=True)

        building.set_authorized_agent(CONTRACT_OWNER, land.address, False)
        assert not building.is_authorized_agent(land.address)
        assert building.authorized_agents() == []

    def test_privileged_only(self, building):
        with pytest.raises(NotRegistryOwner):
            building.set_authorized_agent(LAND_SELLER, OPERATOR, True)
        assert not building.is_authorized_agent(OPERATOR)

    def test_not_owner_is_authorization_error(self, building):
        with pytest.raises(AuthorizationError):
            building.set_authorized_agent(OPERATOR, OPERATOR, True)

    def test_zero_address_agent(self, building):
        with pytest.raises(ZeroAddress):
            building.set_authorized_agent(CONTRACT_OWNER, ZERO_ADDRESS, True)

    def test_registry_is_its_own_agent(self, building):
        assert building.is_authorized_agent(building.address)
        assert building.authorized_agents() == []

    def test_agents_are_per_registry(self, building, land):
        building.set_authorized_agent(CONTRACT_OWNER, OPERATOR, True)
        assert building.is_authorized_agent(OPERATOR)
        assert not land.is_authorized_agent(OPERATOR)
