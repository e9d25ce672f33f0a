"""
JSON Schema Contract Validators

Контракты на границе реестра:
- registry_state.json   — снапшот хранилища реестра (additive-only);
                          проверяется в AssetRegistry.restore
- purchase_receipt.json — квитанция атомарной покупки;
                          проверяется PurchaseEngine до commit

Схемы поставляются внутри пакета (package data) и проходят
meta-validation при первой загрузке.
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match


SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузчик контрактов из каталога schema/ с кэшем по имени."""

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.is_dir():
            raise RuntimeError(f"Contract directory not found: {schema_dir}")
        self.schema_dir = schema_dir
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Контракт по имени (без .json).

        Raises:
            FileNotFoundError: контракта нет в каталоге
            ValueError: контракт не проходит meta-validation
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{schema_name}.json"
        if not path.exists():
            raise FileNotFoundError(f"Schema not found: {path}")
        schema = json.loads(path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Contract {schema_name}.json is not a valid JSON Schema: {e.message}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта."""

    schema_name: str = ""

    def __init__(self, loader: SchemaLoader = _SCHEMA_LOADER):
        self.schema = loader.load_schema(self.schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое (самое релевантное) нарушение
        """
        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            raise error

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        return self.validator.iter_errors(data)


class RegistryStateValidator(ContractValidator):
    schema_name = "registry_state"


class PurchaseReceiptValidator(ContractValidator):
    schema_name = "purchase_receipt"


_VALIDATORS: Dict[str, ContractValidator] = {}


def _validator(cls) -> ContractValidator:
    validator = _VALIDATORS.get(cls.schema_name)
    if validator is None:
        validator = _VALIDATORS[cls.schema_name] = cls()
    return validator


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_registry_state(data: Dict[str, Any]) -> None:
    """
    Raises:
        jsonschema.ValidationError: снапшот нарушает контракт registry_state
    """
    _validator(RegistryStateValidator).validate(data)


def validate_purchase_receipt(data: Dict[str, Any]) -> None:
    """
    Raises:
        jsonschema.ValidationError: квитанция нарушает контракт purchase_receipt
    """
    _validator(PurchaseReceiptValidator).validate(data)
