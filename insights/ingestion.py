from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path
from typing import Any

import pandas as pd

from insights import config
from insights.models import UploadedData

logger = logging.getLogger(__name__)


class IngestionError(ValueError):
    """Raised when an uploaded spreadsheet cannot be turned into rows."""


def _detect_csv_encoding(content: bytes) -> str:
    last_error: Exception | None = None
    for encoding in config.CSV_ENCODINGS:
        try:
            decoded = content.decode(encoding)
            pd.read_csv(io.StringIO(decoded), nrows=200)
            return encoding
        except (UnicodeDecodeError, pd.errors.ParserError) as exc:
            last_error = exc
    raise IngestionError(f"Could not parse CSV with supported encodings. Last error: {last_error}")


def list_sheets(content: bytes) -> list[str]:
    try:
        with pd.ExcelFile(io.BytesIO(content), engine="openpyxl") as workbook:
            return list(workbook.sheet_names)
    except (zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise IngestionError(f"Could not open the Excel workbook: {exc}") from exc


def _select_sheet(content: bytes, selected_sheet: str | None) -> str:
    sheets = list_sheets(content)
    if not sheets:
        raise IngestionError("The Excel workbook does not contain sheets.")
    if selected_sheet and selected_sheet not in sheets:
        raise IngestionError(f"Selected sheet '{selected_sheet}' not found. Available: {sheets}")
    return selected_sheet or sheets[0]


def _read_frame(content: bytes, suffix: str, sheet_name: str | None) -> pd.DataFrame:
    try:
        if suffix == ".csv":
            encoding = _detect_csv_encoding(content)
            return pd.read_csv(io.BytesIO(content), encoding=encoding)
        sheet = _select_sheet(content, sheet_name)
        return pd.read_excel(io.BytesIO(content), sheet_name=sheet, engine="openpyxl")
    except IngestionError:
        raise
    except pd.errors.EmptyDataError as exc:
        raise IngestionError("File is empty or has no data rows") from exc
    except (zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise IngestionError(f"Could not read {suffix} file: {exc}") from exc


def _to_json_compatible_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    frame = df.copy()
    for column in frame.columns:
        if pd.api.types.is_datetime64_any_dtype(frame[column]):
            frame[column] = frame[column].astype("string")
    return json.loads(frame.to_json(orient="records", date_format="iso"))


def ingest_bytes(content: bytes, file_name: str, sheet_name: str | None = None) -> UploadedData:
    suffix = Path(file_name).suffix.lower()
    if suffix not in config.SUPPORTED_EXTENSIONS:
        raise IngestionError(f"Unsupported file type: {suffix or 'unknown'}")
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise IngestionError(f"File exceeds the {config.MAX_UPLOAD_BYTES} byte upload limit.")
    if not content:
        raise IngestionError("File is empty or has no data rows")

    df = _read_frame(content, suffix, sheet_name)
    df = df.dropna(how="all")
    df.columns = [str(column).strip() for column in df.columns]
    duplicates = sorted(df.columns[df.columns.duplicated()].unique())
    if duplicates:
        raise IngestionError(f"Duplicate column headers: {duplicates}")
    if df.empty:
        raise IngestionError("File contains no data rows")

    uploaded = UploadedData(
        headers=tuple(df.columns),
        rows=tuple(_to_json_compatible_rows(df)),
        file_name=Path(file_name).name,
    )
    logger.info("Ingested %s: %d rows, %d columns", uploaded.file_name, len(uploaded.rows), len(uploaded.headers))
    return uploaded


def ingest_file(file_path: str | Path, sheet_name: str | None = None) -> UploadedData:
    path = Path(file_path)
    return ingest_bytes(path.read_bytes(), path.name, sheet_name=sheet_name)
