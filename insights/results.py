from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TableData(_Payload):
    headers: list[str]
    rows: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _rows_cover_headers(self) -> "TableData":
        for index, row in enumerate(self.rows):
            missing = [header for header in self.headers if header not in row]
            if missing:
                raise ValueError(f"Row {index} has no value for {missing}")
        return self


class _AxisChart(_Payload):
    data: list[dict[str, Any]]
    title: str
    x_key: str = "name"
    y_key: str = "value"


class BarChart(_AxisChart):
    type: Literal["bar"] = "bar"


class LineChart(_AxisChart):
    type: Literal["line"] = "line"


class AreaChart(_AxisChart):
    type: Literal["area"] = "area"


class ScatterChart(_Payload):
    type: Literal["scatter"] = "scatter"
    data: list[dict[str, Any]]
    title: str
    x_key: str = "x"
    y_key: str = "y"
    label_key: str = "name"


class PieChart(_Payload):
    # Slices are labelled through the legend, so there are no axes.
    type: Literal["pie"] = "pie"
    data: list[dict[str, Any]]
    title: str
    name_key: str = "name"
    value_key: str = "value"


ChartSpec = Annotated[
    Union[BarChart, LineChart, AreaChart, ScatterChart, PieChart],
    Field(discriminator="type"),
]


class AnalysisResult(_Payload):
    summary: str
    table_data: TableData | None = None
    chart_data: ChartSpec | None = None
    suggestions: list[str] = Field(min_length=1, max_length=5)
    error: str | None = None

    @model_validator(mode="after")
    def _error_has_no_artifacts(self) -> "AnalysisResult":
        if self.error and (self.table_data is not None or self.chart_data is not None):
            raise ValueError("Error results cannot carry table or chart data")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_payload(self) -> dict[str, Any]:
        """Camel-cased dict consumed by renderers and the result schema."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
