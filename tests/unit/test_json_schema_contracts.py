"""
Tests for JSON Schema Contract Validators

Контракты registry_state и purchase_receipt:
- Загрузка и кэширование схем
- Валидация правильных данных
- Детекция нарушений required / const / enum / maximum
"""

import pytest
from jsonschema import ValidationError

from geoledger.core.contracts import (
    PurchaseReceiptValidator,
    RegistryStateValidator,
    SchemaLoader,
    validate_purchase_receipt,
    validate_registry_state,
)
from geoledger.core.domain import MAX_AMOUNT_WEI


def _state(**overrides):
    data = {
        "schema_version": "1",
        "kind": "land",
        "name": "land",
        "address": "0x00000000000000000000000000000000000000f0",
        "owner": "0x00000000000000000000000000000000000000c0",
        "default_uri": "",
        "next_asset_id": 2,
        "assets": [
            {
                "asset_id": 1,
                "geohash": "geo1",
                "owner": "0x00000000000000000000000000000000000000a1",
                "price": MAX_AMOUNT_WEI,
                "uri": None,
                "for_sale": True,
            }
        ],
        "operator_approvals": [],
        "authorized_agents": [],
        "edges": [],
    }
    data.update(overrides)
    return data


class TestSchemaLoader:
    def test_loads_and_caches(self):
        loader = SchemaLoader()
        schema = loader.load_schema("registry_state")
        assert schema["title"] == "registry_state"
        assert loader.load_schema("registry_state") is schema

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("missing")


class TestRegistryStateContract:
    def test_valid_state(self):
        validate_registry_state(_state())

    @pytest.mark.parametrize(
        "overrides",
        [
            {"schema_version": "2"},
            {"kind": "parcel"},
            {"next_asset_id": 0},
            {"edges": [{"land_geohash": "geo1"}]},
        ],
    )
    def test_invalid_state(self, overrides):
        with pytest.raises(ValidationError):
            validate_registry_state(_state(**overrides))

    def test_price_above_uint256_rejected(self):
        data = _state()
        data["assets"][0]["price"] = MAX_AMOUNT_WEI + 1
        assert not RegistryStateValidator().is_valid(data)

    def test_unknown_top_level_fields_allowed(self):
        assert RegistryStateValidator().is_valid(_state(extension={"added": "later"}))


class TestPurchaseReceiptContract:
    def test_receipt_requires_transfers_and_payouts(self):
        receipt = {
            "buyer": "0xd1",
            "registry": "0xf0",
            "geohash": "geo1",
            "total_wei": 1,
            "with_assets": False,
            "transfers": [],
            "payouts": [],
        }
        errors = list(PurchaseReceiptValidator().iter_errors(receipt))
        assert len(errors) == 2

        with pytest.raises(ValidationError):
            validate_purchase_receipt(receipt)
