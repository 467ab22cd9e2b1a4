from pathlib import Path

import pandas as pd
import pytest

from insights import config
from insights.ingestion import IngestionError, ingest_bytes, ingest_file, list_sheets


def _write_workbook(path: Path) -> None:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"city": ["Boston", "Miami"], "orders": [3, 5]}).to_excel(writer, sheet_name="Orders", index=False)
        pd.DataFrame({"segment": ["Premium"]}).to_excel(writer, sheet_name="Segments", index=False)


def test_csv_upload_becomes_rows() -> None:
    uploaded = ingest_bytes(b"name,amount\nWidget,10\nGadget,2.5\n", "orders.csv")
    assert uploaded.headers == ("name", "amount")
    assert uploaded.rows == ({"name": "Widget", "amount": 10.0}, {"name": "Gadget", "amount": 2.5})
    assert uploaded.file_name == "orders.csv"


def test_csv_latin1_is_decoded() -> None:
    content = "city,orders\nMünchen,4\n".encode("latin-1")
    uploaded = ingest_bytes(content, "cities.csv")
    assert uploaded.rows[0]["city"] == "München"


def test_blank_rows_are_dropped() -> None:
    uploaded = ingest_bytes(b"a,b\n1,2\n,\n3,4\n", "data.csv")
    assert len(uploaded.rows) == 2


def test_header_only_csv_is_rejected() -> None:
    with pytest.raises(IngestionError, match="no data rows"):
        ingest_bytes(b"a,b\n", "data.csv")


def test_empty_file_is_rejected() -> None:
    with pytest.raises(IngestionError):
        ingest_bytes(b"", "data.csv")


def test_unsupported_extension_is_rejected() -> None:
    with pytest.raises(IngestionError, match="Unsupported file type"):
        ingest_bytes(b"a,b\n1,2\n", "data.txt")


def test_upload_size_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 4)
    with pytest.raises(IngestionError, match="upload limit"):
        ingest_bytes(b"a,b\n1,2\n", "data.csv")


def test_excel_first_sheet_is_default(tmp_path: Path) -> None:
    path = tmp_path / "report.xlsx"
    _write_workbook(path)

    assert list_sheets(path.read_bytes()) == ["Orders", "Segments"]
    uploaded = ingest_file(path)
    assert uploaded.headers == ("city", "orders")
    assert uploaded.rows[1] == {"city": "Miami", "orders": 5}


def test_excel_selected_sheet(tmp_path: Path) -> None:
    path = tmp_path / "report.xlsx"
    _write_workbook(path)

    uploaded = ingest_file(path, sheet_name="Segments")
    assert uploaded.headers == ("segment",)


def test_excel_unknown_sheet_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "report.xlsx"
    _write_workbook(path)

    with pytest.raises(IngestionError, match="not found"):
        ingest_file(path, sheet_name="Missing")


def test_corrupt_workbook_is_rejected() -> None:
    content = b"not a zip workbook"
    with pytest.raises(IngestionError, match="Excel workbook"):
        list_sheets(content)
    with pytest.raises(IngestionError):
        ingest_bytes(content, "broken.xlsx")


def test_headers_repeated_after_trimming_are_rejected() -> None:
    with pytest.raises(IngestionError, match="Duplicate column headers"):
        ingest_bytes(b"a, a\n1,2\n", "dup.csv")
