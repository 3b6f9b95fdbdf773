"""The catalog of spreadsheet files to read.

`SourceFile` represents one (folder, file name) pair; a catalog maps each
month folder to the files expected inside it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Sequence

log = logging.getLogger(__name__)

SPREADSHEET_SUFFIXES = (".xlsx", ".xls", ".csv")
_SUFFIX_RE = re.compile(r"\.(xlsx|xls|csv)$", re.IGNORECASE)

SourceCatalog = Mapping[str, Sequence[str]]

# Layout of the production "registros monitorar" folder
DEFAULT_CATALOG: dict[str, list[str]] = {
    "mes 4": ["Matheus Abril.xlsx", "Maurício Abril.xlsx", "Rodrigo Abril.xlsx"],
    "mes 5": ["Matheus Maio.xlsx", "Maurício Maio.xlsx", "Wesley Maio.xlsx"],
    "mes 6": ["Matheus Junho.xlsx", "Maurício Junho.xlsx", "Wesley Junho.xlsx"],
    "mes 7": ["Matheus Julho.xlsx", "Maurício Julho.xlsx", "Wesley Julho.xlsx"],
}


def entity_name_from_filename(filename: str) -> str:
    """Return the employee name encoded in a file name.

    The name is everything before the first space, i.e. before the month
    token ('Matheus Abril.xlsx' -> 'Matheus').
    """
    stem = _SUFFIX_RE.sub("", Path(filename).name).strip()
    return stem.split(" ")[0]


@dataclass(frozen=True)
class SourceFile:
    """One spreadsheet in the catalog.

    Attributes:
        folder: Month folder name (e.g. 'mes 4').
        filename: File name inside the folder (e.g. 'Matheus Abril.xlsx').
    """
    folder: str
    filename: str

    @property
    def path(self) -> str:
        """Path relative to the data root, always '/'-separated."""
        return f"{self.folder}/{self.filename}"

    @property
    def entity_name(self) -> str:
        return entity_name_from_filename(self.filename)


def iter_source_files(catalog: SourceCatalog) -> Iterator[SourceFile]:
    """Yield catalog files in catalog order (folders, then files within each)."""
    for folder, files in catalog.items():
        for filename in files:
            yield SourceFile(folder=folder, filename=filename)


def discover_catalog(root: Path) -> dict[str, list[str]]:
    """Build a catalog by scanning the sub-folders of `root` for spreadsheets.

    Folders and files are sorted by name so the result is deterministic.
    Lock files left open by spreadsheet editors ('~$...') are ignored.

    Args:
        root: Data root containing one sub-folder per month.

    Returns:
        Mapping of folder name to the spreadsheet names found in it.
    """
    catalog: dict[str, list[str]] = {}
    if not root.is_dir():
        log.warning("Data root not found: %s", root)
        return catalog

    for folder in sorted(p for p in root.iterdir() if p.is_dir()):
        files = sorted(
            f.name
            for f in folder.iterdir()
            if f.is_file()
            and f.suffix.lower() in SPREADSHEET_SUFFIXES
            and not f.name.startswith("~$")
        )
        if files:
            catalog[folder.name] = files

    log.info("Discovered %d files in %d folders under %s",
             sum(len(v) for v in catalog.values()), len(catalog), root)
    return catalog
