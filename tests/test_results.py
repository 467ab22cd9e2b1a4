import pytest
from pydantic import ValidationError

from insights.assembler import error_result
from insights.results import AnalysisResult, BarChart, PieChart, ScatterChart, TableData
from insights.validation import SchemaValidationError, validate_result


def _result(**overrides) -> AnalysisResult:
    fields = {
        "summary": "Summary",
        "table_data": TableData(headers=["Name", "Value"], rows=[{"Name": "A", "Value": 1}]),
        "chart_data": BarChart(data=[{"name": "A", "value": 1}], title="Chart"),
        "suggestions": ["Next question"],
    }
    fields.update(overrides)
    return AnalysisResult(**fields)


def test_payload_uses_camel_case_keys() -> None:
    payload = _result().to_payload()
    assert set(payload) == {"summary", "tableData", "chartData", "suggestions"}
    assert payload["chartData"] == {
        "type": "bar",
        "data": [{"name": "A", "value": 1}],
        "title": "Chart",
        "xKey": "name",
        "yKey": "value",
    }


def test_pie_chart_has_no_axes() -> None:
    payload = _result(chart_data=PieChart(data=[{"name": "A", "value": 1}], title="Pie")).to_payload()
    assert "xKey" not in payload["chartData"]
    assert payload["chartData"]["nameKey"] == "name"
    assert payload["chartData"]["valueKey"] == "value"


def test_chart_union_is_discriminated_by_type() -> None:
    result = AnalysisResult.model_validate(
        {
            "summary": "Summary",
            "chartData": {"type": "scatter", "data": [{"name": "Age 30", "x": 30, "y": 2}], "title": "Scatter"},
            "suggestions": ["Next"],
        }
    )
    assert isinstance(result.chart_data, ScatterChart)
    assert result.chart_data.label_key == "name"


def test_table_rows_must_cover_headers() -> None:
    with pytest.raises(ValidationError):
        TableData(headers=["Name", "Value"], rows=[{"Name": "A"}])


def test_suggestion_count_is_bounded() -> None:
    with pytest.raises(ValidationError):
        _result(suggestions=[])
    with pytest.raises(ValidationError):
        _result(suggestions=[f"q{i}" for i in range(6)])


def test_error_result_cannot_carry_table() -> None:
    with pytest.raises(ValidationError):
        _result(error="Empty query")


def test_error_result_payload_is_valid() -> None:
    result = error_result("Query not understood")
    assert result.is_error
    payload = validate_result(result)
    assert payload["error"] == "Query not understood"
    assert "tableData" not in payload


def test_schema_rejects_error_with_table() -> None:
    payload = _result().to_payload()
    payload["error"] = "Empty query"
    with pytest.raises(SchemaValidationError):
        validate_result(payload)


def test_schema_rejects_unknown_error_tag() -> None:
    payload = error_result("Empty query").to_payload()
    payload["error"] = "Boom"
    with pytest.raises(SchemaValidationError):
        validate_result(payload)


def test_schema_rejects_too_many_suggestions() -> None:
    payload = _result().to_payload()
    payload["suggestions"] = ["a", "b", "c", "d", "e", "f"]
    with pytest.raises(SchemaValidationError):
        validate_result(payload)


def test_validation_rejects_rows_missing_header_values() -> None:
    payload = _result().to_payload()
    payload["tableData"]["rows"] = [{"Name": "A"}]
    with pytest.raises(SchemaValidationError):
        validate_result(payload)


def test_schema_rejects_pie_chart_with_axis_keys() -> None:
    payload = _result(chart_data=PieChart(data=[], title="Pie")).to_payload()
    payload["chartData"]["xKey"] = "name"
    with pytest.raises(SchemaValidationError):
        validate_result(payload)
