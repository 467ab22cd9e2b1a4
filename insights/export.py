from __future__ import annotations

import io
from datetime import date
from typing import NamedTuple, Sequence

import pandas as pd
from pydantic import BaseModel

from insights.models import AnalysisContext
from insights.results import AnalysisResult

EXCEL_SHEET_NAME_LIMIT = 31


def report_filename(prefix: str, day: date | None = None) -> str:
    return f"{prefix}_{(day or date.today()).isoformat()}.xlsx"


def _sheet_name(name: str) -> str:
    return name[:EXCEL_SHEET_NAME_LIMIT] or "Sheet1"


def _records_frame(records: Sequence[BaseModel]) -> pd.DataFrame:
    return pd.DataFrame([record.model_dump(mode="json") for record in records])


def result_to_frame(result: AnalysisResult) -> pd.DataFrame:
    if result.table_data is None:
        return pd.DataFrame()
    return pd.DataFrame(result.table_data.rows, columns=result.table_data.headers)


def _workbook_bytes(sheets: dict[str, pd.DataFrame]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=_sheet_name(name), index=False)
    return buffer.getvalue()


def export_result(result: AnalysisResult, sheet_name: str = "Analysis") -> bytes:
    if result.table_data is None:
        raise ValueError("This result has no table to export.")
    return _workbook_bytes({sheet_name: result_to_frame(result)})


def export_full_report(context: AnalysisContext) -> bytes:
    sheets = {
        "Customers": _records_frame(context.customers),
        "Sales": _records_frame(context.sales),
        "Web Activity": _records_frame(context.web_activity),
        "Market Trends": _records_frame(context.market_trends),
    }
    if context.uploaded_data is not None:
        uploaded = context.uploaded_data
        sheets["Uploaded Data"] = pd.DataFrame(list(uploaded.rows), columns=list(uploaded.headers))
    return _workbook_bytes(sheets)


class ReportType(NamedTuple):
    title: str
    collection: str


REPORT_TYPES: dict[str, ReportType] = {
    "customers": ReportType("Customer Report", "customers"),
    "sales": ReportType("Sales Report", "sales"),
    "activity": ReportType("Web Activity Report", "web_activity"),
    "market": ReportType("Market Trends Report", "market_trends"),
}


def collection_filename(key: str, day: date | None = None) -> str:
    return report_filename(f"{key}_report", day)


def export_collection(context: AnalysisContext, key: str) -> bytes:
    """One collection as its own workbook, with the report title as the sheet name."""
    report = REPORT_TYPES.get(key)
    if report is None:
        raise ValueError(f"Unknown report type '{key}'. Available: {sorted(REPORT_TYPES)}")
    return _workbook_bytes({report.title: _records_frame(getattr(context, report.collection))})
