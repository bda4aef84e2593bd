import importlib.util
import io
import time

import pandas as pd
import pytest

from campaign_core import ingestion
from campaign_core.ingestion import (
    PARSERS,
    UploadedFile,
    coerce_cell,
    parse_csv_bytes,
    parse_excel_bytes,
    parse_uploads,
)


def _xlsx(*frames: pd.DataFrame) -> bytes:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for idx, frame in enumerate(frames):
            frame.to_excel(writer, index=False, sheet_name=f"Sheet{idx + 1}")
    return out.getvalue()


def _csv(n: int, prefix: str) -> bytes:
    lines = ["campaign,leads"] + [f"{prefix}{i},{i}" for i in range(n)]
    return ("\n".join(lines) + "\n").encode("utf-8")


def test_coerce_cell_dynamic_typing():
    assert coerce_cell("12") == 12
    assert coerce_cell("-3.5") == -3.5
    assert coerce_cell("1e3") == 1000.0
    assert coerce_cell("true") is True
    assert coerce_cell("FALSE") is False
    assert coerce_cell("") is None
    assert coerce_cell("2025-01-01") == "2025-01-01"
    assert coerce_cell("12abc") == "12abc"


def test_parse_csv_uses_header_and_types_cells():
    content = b"campaign,leads,cost\nA,10,1.5\nB,,x\n\n,,\n"
    rows = parse_csv_bytes(content)
    assert rows == [
        {"campaign": "A", "leads": 10, "cost": 1.5},
        {"campaign": "B", "leads": None, "cost": "x"},
        {"campaign": None, "leads": None, "cost": None},
    ]


def test_parse_csv_keeps_rows_around_ragged_lines():
    content = b"campaign,leads\nA,1\nB,2,extra\nC\n"
    result = parse_uploads([UploadedFile("x.csv", content)], "csv")
    assert result.failed == []
    assert result.rows == [
        {"campaign": "A", "leads": 1},
        {"campaign": "B", "leads": 2},
        {"campaign": "C", "leads": None},
    ]


def test_parse_csv_tolerates_bom_and_empty_input():
    rows = parse_csv_bytes(b"\xef\xbb\xbfdate,leads\n2025-01-01,5\n")
    assert rows == [{"date": "2025-01-01", "leads": 5}]
    assert parse_csv_bytes(b"") == []
    assert parse_csv_bytes(b"date,leads\n") == []


def test_parse_excel_reads_first_sheet_and_omits_blank_cells():
    first = pd.DataFrame({"campaign": ["A", "B"], "leads": [1, None]})
    second = pd.DataFrame({"other": [1, 2, 3]})
    rows = parse_excel_bytes(_xlsx(first, second))
    assert len(rows) == 2
    assert rows[0]["campaign"] == "A"
    assert rows[0]["leads"] == 1
    assert rows[1] == {"campaign": "B"}


def test_parse_excel_passes_dates_through():
    frame = pd.DataFrame({"date": pd.to_datetime(["2025-01-01", "2025-02-01"]), "leads": [3, 4]})
    rows = parse_excel_bytes(_xlsx(frame))
    assert str(rows[0]["date"])[:10] == "2025-01-01"
    assert rows[1]["leads"] == 4


def test_parse_uploads_keeps_selection_order(monkeypatch):
    def slow_first(content: bytes):
        if content.startswith(b"slow"):
            time.sleep(0.2)
        return [{"source": content.decode()}]

    monkeypatch.setitem(PARSERS, "csv", slow_first)
    files = [UploadedFile("a.csv", b"slow-a"), UploadedFile("b.csv", b"fast-b"), UploadedFile("c.csv", b"fast-c")]
    result = parse_uploads(files, "csv")
    assert [r["source"] for r in result.rows] == ["slow-a", "fast-b", "fast-c"]


def test_parse_uploads_skips_files_that_fail():
    good = UploadedFile("good.xlsx", _xlsx(pd.DataFrame({"campaign": ["A"], "cost": [10]})))
    bad = UploadedFile("bad.xlsx", b"definitely not a workbook")
    result = parse_uploads([bad, good], "excel")
    assert result.failed == ["bad.xlsx"]
    assert [r["campaign"] for r in result.rows] == ["A"]


def test_preview_takes_five_per_file_and_ten_overall():
    files = [UploadedFile(f"{p}.csv", _csv(7, p)) for p in ("a", "b", "c")]
    result = parse_uploads(files, "csv")
    assert len(result.rows) == 21
    assert [r["campaign"] for r in result.preview] == [f"a{i}" for i in range(5)] + [f"b{i}" for i in range(5)]


def test_parse_uploads_rejects_unknown_kind():
    with pytest.raises(ValueError):
        parse_uploads([UploadedFile("x.json", b"{}")], "json")  # type: ignore[arg-type]


def test_parse_uploads_without_files():
    result = parse_uploads([], "csv")
    assert result.rows == [] and result.preview == [] and result.failed == []


def test_preview_limits_are_configured():
    assert ingestion.PREVIEW_PER_FILE == 5
    assert ingestion.PREVIEW_LIMIT == 10


def test_legacy_xls_workbooks_use_xlrd():
    assert ingestion.excel_engine(ingestion.XLS_SIGNATURE + b"\x00" * 16) == "xlrd"
    assert ingestion.excel_engine(_xlsx(pd.DataFrame({"a": [1]}))) == "openpyxl"
    assert importlib.util.find_spec("xlrd") is not None
