"""Helpers for loading JSON schemas and validating payloads."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator, ValidationError
from jsonschema.exceptions import best_match

_SCHEMA_DIR = Path(__file__).resolve().parents[1] / "schemas"


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict[str, Any]:
    path = _SCHEMA_DIR / f"{name}.schema.json"
    with path.open("r", encoding="utf-8") as handle:
        schema = json.load(handle)
    Draft202012Validator.check_schema(schema)
    return schema


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft202012Validator:
    return Draft202012Validator(load_schema(name))


def validate(document: Any, *, schema_name: str) -> None:
    """Raise :class:`SchemaValidationError` for the most relevant violation."""
    error = best_match(_validator(schema_name).iter_errors(document))
    if error is not None:
        raise SchemaValidationError(error)


class SchemaValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, error: ValidationError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def path(self) -> str:
        return ".".join(str(elem) for elem in self.error.absolute_path)
