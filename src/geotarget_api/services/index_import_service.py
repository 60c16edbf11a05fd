"""Address index import service — bulk load CSV files into the mapping table."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geotarget_api.lib.index_loader import normalize_index_row, parse_index_csv
from geotarget_api.models.address_mapping import AddressMapping

_Key = tuple[str, str, str, str]


@dataclass
class ImportSummary:
    """Row counts for one import run."""

    inserted: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.skipped


def _key(row: dict[str, Any]) -> _Key:
    return (row["zip_code"], row["city"], row["county"], row["country_code"])


async def _load_existing(session: AsyncSession, rows: list[dict[str, Any]]) -> dict[_Key, AddressMapping]:
    zip_codes = sorted({row["zip_code"] for row in rows})
    result = await session.execute(select(AddressMapping).where(AddressMapping.zip_code.in_(zip_codes)))
    return {(m.zip_code, m.city, m.county, m.country_code): m for m in result.scalars().all()}


async def _load_criteria_owners(session: AsyncSession, rows: list[dict[str, Any]]) -> dict[str, _Key]:
    criteria_ids = sorted({row["criteria_id"] for row in rows if row["criteria_id"]})
    if not criteria_ids:
        return {}
    result = await session.execute(select(AddressMapping).where(AddressMapping.criteria_id.in_(criteria_ids)))
    return {m.criteria_id: (m.zip_code, m.city, m.county, m.country_code) for m in result.scalars().all()}


async def upsert_index_rows(session: AsyncSession, raw_rows: list[dict[str, Any]]) -> ImportSummary:
    """Insert or update a batch of raw index rows.

    Rows are keyed by (zip_code, city, county, country_code); an existing row
    gets its state and criteria ID replaced. Rows missing a required field,
    or whose criteria ID already belongs to a different location, are skipped.

    Args:
        session: Database session. The caller commits.
        raw_rows: Row dicts as produced by the CSV parser.

    Returns:
        Counts for this batch.
    """
    summary = ImportSummary()
    rows: list[dict[str, Any]] = []
    for raw in raw_rows:
        row = normalize_index_row(raw)
        if row is None:
            summary.skipped += 1
        else:
            rows.append(row)
    if not rows:
        return summary

    existing = await _load_existing(session, rows)
    criteria_owners = await _load_criteria_owners(session, rows)

    for row in rows:
        key = _key(row)
        criteria_id = row["criteria_id"]
        if criteria_id and criteria_owners.get(criteria_id, key) != key:
            owner = criteria_owners[criteria_id]
            logger.warning(f"Skipping {key}: criteria ID {criteria_id} already belongs to {owner}")
            summary.skipped += 1
            continue

        mapping = existing.get(key)
        if mapping is None:
            mapping = AddressMapping(
                zip_code=row["zip_code"],
                city=row["city"],
                county=row["county"],
                state=row["state"],
                country_code=row["country_code"],
                criteria_id=criteria_id,
            )
            session.add(mapping)
            existing[key] = mapping
            summary.inserted += 1
        else:
            if mapping.criteria_id and mapping.criteria_id != criteria_id:
                criteria_owners.pop(mapping.criteria_id, None)
            mapping.state = row["state"]
            mapping.criteria_id = criteria_id
            summary.updated += 1
        if criteria_id:
            criteria_owners[criteria_id] = key

    await session.flush()
    return summary


async def import_index_file(session: AsyncSession, file_path: Path, batch_size: int = 1000) -> ImportSummary:
    """Import an address index CSV, committing after each chunk.

    Args:
        session: Database session.
        file_path: Path to the CSV file.
        batch_size: Rows per chunk.

    Returns:
        Totals across the whole file.

    Raises:
        ValueError: If the file lacks a required column.
    """
    totals = ImportSummary()
    for chunk_idx, chunk in enumerate(parse_index_csv(file_path, batch_size=batch_size)):
        summary = await upsert_index_rows(session, chunk)
        await session.commit()
        totals.inserted += summary.inserted
        totals.updated += summary.updated
        totals.skipped += summary.skipped
        logger.info(
            f"Chunk {chunk_idx + 1}: {summary.inserted} inserted, {summary.updated} updated, {summary.skipped} skipped"
        )

    logger.info(
        f"Imported {file_path.name}: {totals.inserted} inserted, {totals.updated} updated, {totals.skipped} skipped"
    )
    return totals
