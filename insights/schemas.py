from __future__ import annotations

_ROW_VALUE = {"type": ["string", "number", "integer", "boolean", "null"]}
_POINTS = {
    "type": "array",
    "items": {"type": "object", "additionalProperties": _ROW_VALUE},
}
_AXIS_CHART = {
    "type": "object",
    "additionalProperties": False,
    "required": ["type", "data", "title", "xKey", "yKey"],
    "properties": {
        "type": {"type": "string", "enum": ["bar", "line", "area"]},
        "data": _POINTS,
        "title": {"type": "string"},
        "xKey": {"type": "string", "minLength": 1},
        "yKey": {"type": "string", "minLength": 1},
    },
}
_SCATTER_CHART = {
    "type": "object",
    "additionalProperties": False,
    "required": ["type", "data", "title", "xKey", "yKey", "labelKey"],
    "properties": {
        "type": {"const": "scatter"},
        "data": _POINTS,
        "title": {"type": "string"},
        "xKey": {"type": "string", "minLength": 1},
        "yKey": {"type": "string", "minLength": 1},
        "labelKey": {"type": "string", "minLength": 1},
    },
}
_PIE_CHART = {
    "type": "object",
    "additionalProperties": False,
    "required": ["type", "data", "title", "nameKey", "valueKey"],
    "properties": {
        "type": {"const": "pie"},
        "data": _POINTS,
        "title": {"type": "string"},
        "nameKey": {"type": "string", "minLength": 1},
        "valueKey": {"type": "string", "minLength": 1},
    },
}

ANALYSIS_RESULT_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["summary", "suggestions"],
    "properties": {
        "summary": {"type": "string", "minLength": 1},
        "tableData": {
            "type": "object",
            "additionalProperties": False,
            "required": ["headers", "rows"],
            "properties": {
                "headers": {"type": "array", "minItems": 1, "items": {"type": "string"}},
                "rows": {
                    "type": "array",
                    "items": {"type": "object", "additionalProperties": _ROW_VALUE},
                },
            },
        },
        "chartData": {"oneOf": [_AXIS_CHART, _SCATTER_CHART, _PIE_CHART]},
        "suggestions": {
            "type": "array",
            "minItems": 1,
            "maxItems": 5,
            "items": {"type": "string", "minLength": 1},
        },
        "error": {"type": "string", "enum": ["Empty query", "Query not understood"]},
    },
    "allOf": [
        {
            "if": {"required": ["error"]},
            "then": {"not": {"anyOf": [{"required": ["tableData"]}, {"required": ["chartData"]}]}},
        }
    ],
}
