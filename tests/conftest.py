from __future__ import annotations

import io
from typing import Any, Callable

import pandas as pd
import pytest


def _xlsx_bytes(rows: list[dict[str, Any]]) -> bytes:
    buf = io.BytesIO()
    pd.DataFrame(rows).to_excel(buf, index=False)
    return buf.getvalue()


class MemorySource:
    """File source backed by a dict of path -> bytes, counting reads."""

    def __init__(self, files: dict[str, bytes]) -> None:
        self.files = files
        self.reads = 0

    def exists(self, path: str) -> bool:
        return path in self.files

    def read_bytes(self, path: str) -> bytes:
        self.reads += 1
        return self.files[path]


@pytest.fixture()
def make_xlsx() -> Callable[[list[dict[str, Any]]], bytes]:
    return _xlsx_bytes


@pytest.fixture()
def ana_source() -> MemorySource:
    """Two files for 'Ana' across two month folders."""
    return MemorySource({
        "mes 4/Ana Abril.xlsx": _xlsx_bytes([
            {"Data": "20/04/2024", "Refinaria": "REPAR", "Pontos": 10, "Observações": "inspeção"},
            {"Data": "27/04/2024", "Refinaria": "REVAP", "Pontos": 5, "Observações": ""},
        ]),
        "mes 5/Ana Maio.xlsx": _xlsx_bytes([
            {"Data": "02/05/2024", "Refinaria": "REPAR", "Pontos": 8, "Observações": "relatório"},
        ]),
    })


ANA_CATALOG = {"mes 4": ["Ana Abril.xlsx"], "mes 5": ["Ana Maio.xlsx"]}


@pytest.fixture()
def ana_catalog() -> dict[str, list[str]]:
    return {k: list(v) for k, v in ANA_CATALOG.items()}


@pytest.fixture()
def memory_source() -> type[MemorySource]:
    return MemorySource
