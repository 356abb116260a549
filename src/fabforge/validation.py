"""Validation utilities for fab documents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "fab.schema.json"


@dataclass(frozen=True)
class ValidationProblem:
    """One schema violation, located by JSON path (e.g. ``$.skele.children[0]``)."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@lru_cache(maxsize=1)
def _validator() -> jsonschema.Draft202012Validator:
    schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
    return jsonschema.Draft202012Validator(schema)


def fab_problems(data: Any) -> list[ValidationProblem]:
    """Return every schema violation in *data*; empty when it is valid."""
    errors = sorted(_validator().iter_errors(data), key=lambda e: e.json_path)
    return [ValidationProblem(path=e.json_path, message=e.message) for e in errors]
