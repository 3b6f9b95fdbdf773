from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import requests

from points_tracker.errors import DecodeError, FileUnavailableError
from points_tracker.ingest.catalog import (
    SourceFile,
    discover_catalog,
    entity_name_from_filename,
    iter_source_files,
)
from points_tracker.ingest.decode import decode_first_sheet
from points_tracker.ingest.read_files import ingest_file
from points_tracker.ingest.sources import HttpFileSource, LocalFileSource


def test_entity_name_is_text_before_first_space() -> None:
    assert entity_name_from_filename("Maurício Abril.xlsx") == "Maurício"
    assert entity_name_from_filename("Matheus Junho 2.XLSX") == "Matheus"
    assert entity_name_from_filename("Wesley.xlsx") == "Wesley"
    assert SourceFile("mes 4", "Ana Abril.xlsx").path == "mes 4/Ana Abril.xlsx"


def test_iter_source_files_keeps_catalog_order() -> None:
    files = list(iter_source_files({"mes 5": ["B x.xlsx"], "mes 4": ["A x.xlsx", "C x.xlsx"]}))
    assert [f.path for f in files] == ["mes 5/B x.xlsx", "mes 4/A x.xlsx", "mes 4/C x.xlsx"]


def test_discover_catalog_scans_month_folders(tmp_path: Path) -> None:
    (tmp_path / "mes 5").mkdir()
    (tmp_path / "mes 4").mkdir()
    (tmp_path / "mes 4" / "Ana Abril.xlsx").write_bytes(b"x")
    (tmp_path / "mes 4" / "~$Ana Abril.xlsx").write_bytes(b"x")
    (tmp_path / "mes 4" / "notes.txt").write_text("x")
    (tmp_path / "mes 5" / "Ana Maio.xlsx").write_bytes(b"x")
    assert discover_catalog(tmp_path) == {"mes 4": ["Ana Abril.xlsx"], "mes 5": ["Ana Maio.xlsx"]}
    assert discover_catalog(tmp_path / "missing") == {}


def test_decode_first_sheet_returns_rows(make_xlsx: Any) -> None:
    data = make_xlsx([
        {"Data": "20/04/2024", "Pontos": 10, "Observações": None},
        {"Data": None, "Pontos": None, "Observações": None},
        {"Data": "21/04/2024", "Pontos": 2.5, "Observações": "x"},
    ])
    rows = decode_first_sheet(data, "Ana Abril.xlsx")
    assert len(rows) == 2
    assert rows[0]["Data"] == "20/04/2024"
    assert rows[0]["Pontos"] == 10
    assert rows[0]["Observações"] is None
    assert rows[1]["Pontos"] == 2.5


def test_decode_first_sheet_reads_csv() -> None:
    data = "Data,Pontos\n20/04/2024,10\n".encode("utf-8")
    rows = decode_first_sheet(data, "Ana Abril.csv")
    assert rows == [{"Data": "20/04/2024", "Pontos": "10"}]


def test_discover_catalog_picks_up_legacy_workbooks(tmp_path: Path) -> None:
    (tmp_path / "mes 4").mkdir()
    (tmp_path / "mes 4" / "Ana Abril.xls").write_bytes(b"x")
    assert discover_catalog(tmp_path) == {"mes 4": ["Ana Abril.xls"]}


def test_decode_first_sheet_hands_xls_to_an_installed_engine() -> None:
    # OLE compound-document signature followed by junk
    data = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504
    with pytest.raises(DecodeError) as exc:
        decode_first_sheet(data, "Ana Abril.xls")
    assert "ImportError" not in exc.value.reason


@pytest.mark.parametrize("data", [b"", b"definitely not a workbook"])
def test_decode_first_sheet_rejects_garbage(data: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_first_sheet(data, "broken.xlsx")


def test_local_file_source(tmp_path: Path) -> None:
    (tmp_path / "mes 4").mkdir()
    (tmp_path / "mes 4" / "Ana Abril.xlsx").write_bytes(b"abc")
    src = LocalFileSource(tmp_path)
    assert src.exists("mes 4/Ana Abril.xlsx")
    assert not src.exists("mes 4/Bia Abril.xlsx")
    assert src.read_bytes("mes 4/Ana Abril.xlsx") == b"abc"
    with pytest.raises(FileUnavailableError):
        src.read_bytes("mes 4/Bia Abril.xlsx")


class _Response:
    def __init__(self, status: int, content: bytes = b"") -> None:
        self.status_code = status
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code}")


class _Session:
    def __init__(self, files: dict[str, bytes], fail: bool = False) -> None:
        self.files = files
        self.fail = fail
        self.urls: list[str] = []

    def _lookup(self, url: str) -> _Response:
        self.urls.append(url)
        if self.fail:
            raise requests.ConnectionError("offline")
        if url in self.files:
            return _Response(200, self.files[url])
        return _Response(404)

    def head(self, url: str, **_: Any) -> _Response:
        return self._lookup(url)

    def get(self, url: str, **_: Any) -> _Response:
        return self._lookup(url)


def test_http_file_source_quotes_paths() -> None:
    url = "https://example.com/registros%20monitorar/mes%204/Maur%C3%ADcio%20Abril.xlsx"
    session = _Session({url: b"data"})
    src = HttpFileSource("https://example.com/registros%20monitorar/", session=session)
    assert src.exists("mes 4/Maurício Abril.xlsx")
    assert src.read_bytes("mes 4/Maurício Abril.xlsx") == b"data"
    assert not src.exists("mes 4/Ana Abril.xlsx")
    with pytest.raises(FileUnavailableError):
        src.read_bytes("mes 4/Ana Abril.xlsx")


def test_http_file_source_network_errors_are_unavailable() -> None:
    src = HttpFileSource("https://example.com", session=_Session({}, fail=True))
    with pytest.raises(FileUnavailableError):
        src.exists("mes 4/Ana Abril.xlsx")


def test_ingest_file_builds_entity_aggregate(ana_source: Any) -> None:
    agg = ingest_file(ana_source, SourceFile("mes 4", "Ana Abril.xlsx"))
    assert agg.name == "Ana"
    assert agg.total_points == 15
    assert agg.total_records == 2
    assert [r.points for r in agg.records] == [10, 5]
    assert agg.monthly_buckets["Abril"].points == 10
    assert agg.monthly_buckets["Maio"].points == 5
    assert agg.weekly_buckets["Week 4"].record_count == 1
    assert agg.weekly_buckets["Week 1"].record_count == 1


def test_ingest_file_skips_blank_and_zero_rows(make_xlsx: Any, memory_source: Any) -> None:
    src = memory_source({"mes 4/Ana Abril.xlsx": make_xlsx([
        {"Data": "20/04/2024", "Pontos": 10},
        {"Data": "21/04/2024", "Pontos": 0},
        {"Data": "TOTAL", "Pontos": 10},
        {"Data": "22/04/2024", "Pontos": -1},
    ])})
    agg = ingest_file(src, SourceFile("mes 4", "Ana Abril.xlsx"))
    assert agg.total_records == 1
    assert agg.total_points == 10


def test_ingest_file_missing_raises(ana_source: Any) -> None:
    with pytest.raises(FileUnavailableError):
        ingest_file(ana_source, SourceFile("mes 4", "Bia Abril.xlsx"))


def test_ingest_file_survives_row_failures(ana_source: Any, monkeypatch: pytest.MonkeyPatch) -> None:
    import points_tracker.ingest.read_files as read_files

    real_parse = read_files.parse_row
    calls = {"n": 0}

    def flaky(row: Any, entity: str, aliases: Any) -> Any:
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("boom")
        return real_parse(row, entity, aliases)

    monkeypatch.setattr(read_files, "parse_row", flaky)
    agg = ingest_file(ana_source, SourceFile("mes 4", "Ana Abril.xlsx"))
    assert agg.total_records == 1
    assert agg.total_points == 5
