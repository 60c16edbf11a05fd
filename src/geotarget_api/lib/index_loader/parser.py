"""CSV parsing for address index files and address validation batches.

Index files carry ``zip_code,city,county,state,country_code[,criteria_id]``.
Address files carry any of ``zip_code,city,county``. Headers are matched
case-insensitively and unknown columns are ignored.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger

from geotarget_api.lib.coverage import AddressRecord

INDEX_COLUMNS = ("zip_code", "city", "county", "state", "country_code", "criteria_id")
REQUIRED_INDEX_COLUMNS = ("zip_code", "city", "county", "state")
ADDRESS_COLUMNS = ("zip_code", "city", "county")

DEFAULT_COUNTRY_CODE = "US"


def _read_chunks(file_path: Path, columns: tuple[str, ...], batch_size: int) -> Iterator[list[dict[str, Any]]]:
    reader = pd.read_csv(
        file_path,
        chunksize=batch_size,
        dtype=str,
        keep_default_na=False,
    )

    rename_map: dict[str, str] | None = None
    for chunk in reader:
        if rename_map is None:
            rename_map = {}
            for csv_col in chunk.columns:
                key = str(csv_col).strip().lower()
                if key in columns:
                    rename_map[csv_col] = key
                else:
                    logger.debug(f"Ignoring unknown CSV column: {csv_col!r}")

        chunk = chunk.rename(columns=rename_map)
        chunk = chunk[[c for c in chunk.columns if c in columns]]
        # pandas represents missing cells as NaN; normalize to Python None
        yield [{k: (None if pd.isna(v) else v) for k, v in row.items()} for row in chunk.to_dict("records")]


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_index_row(raw: dict[str, Any]) -> dict[str, str | None] | None:
    """Normalize one index row, or return None when a required field is missing.

    Values are stripped; state and country codes are uppercased and the
    country defaults to US.
    """
    row = {column: _clean(raw.get(column)) for column in INDEX_COLUMNS}
    if any(row[column] is None for column in REQUIRED_INDEX_COLUMNS):
        return None
    row["state"] = row["state"].upper()  # type: ignore[union-attr]
    row["country_code"] = (row["country_code"] or DEFAULT_COUNTRY_CODE).upper()
    return row


def parse_index_csv(file_path: Path, batch_size: int = 1000) -> Iterator[list[dict[str, Any]]]:
    """Read an address index CSV in chunks of raw row dicts.

    Args:
        file_path: Path to the CSV file.
        batch_size: Rows per chunk.

    Yields:
        Lists of raw row dicts keyed by index column name.

    Raises:
        ValueError: If the file lacks a required column.
    """
    header = pd.read_csv(file_path, nrows=0, dtype=str).columns
    present = {str(c).strip().lower() for c in header}
    missing = [c for c in REQUIRED_INDEX_COLUMNS if c not in present]
    if missing:
        msg = f"Index file {file_path} is missing required columns: {', '.join(missing)}"
        raise ValueError(msg)

    logger.info(f"Parsing address index {file_path} with batch_size={batch_size}")
    yield from _read_chunks(file_path, INDEX_COLUMNS, batch_size)


def parse_address_csv(file_path: Path) -> list[AddressRecord]:
    """Read an address CSV into records, keeping each raw row as ``original_data``."""
    records: list[AddressRecord] = []
    for chunk in _read_chunks(file_path, ADDRESS_COLUMNS, 1000):
        for raw in chunk:
            records.append(
                AddressRecord(
                    zip_code=_clean(raw.get("zip_code")),
                    city=_clean(raw.get("city")),
                    county=_clean(raw.get("county")),
                    original_data=raw,
                )
            )
    return records
