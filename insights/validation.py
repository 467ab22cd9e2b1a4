from __future__ import annotations

from typing import Any

from jsonschema import ValidationError, validate

from insights.results import AnalysisResult
from insights.schemas import ANALYSIS_RESULT_SCHEMA


class SchemaValidationError(ValueError):
    pass


def validate_schema(output: dict[str, Any], schema: dict[str, Any]) -> None:
    try:
        validate(instance=output, schema=schema)
    except ValidationError as exc:
        raise SchemaValidationError(str(exc)) from exc


def _missing_cells(payload: dict[str, Any]) -> list[tuple[int, str]]:
    table = payload.get("tableData") or {}
    headers = table.get("headers", [])
    missing: list[tuple[int, str]] = []
    for index, row in enumerate(table.get("rows", [])):
        missing.extend((index, header) for header in headers if header not in row)
    return missing


def validate_result(result: AnalysisResult | dict[str, Any]) -> dict[str, Any]:
    """Check a result against the rendering contract and return its payload."""
    payload = result.to_payload() if isinstance(result, AnalysisResult) else result
    validate_schema(payload, ANALYSIS_RESULT_SCHEMA)
    missing = _missing_cells(payload)
    if missing:
        raise SchemaValidationError(f"Table rows without values for headers: {missing}")
    return payload
