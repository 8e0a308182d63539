"""
Royalty CSV Import Service.

Turns a distributor royalty report into ``Transaction`` rows. Reports from
different distributors name their columns differently, so each transaction field
is read from the first non-empty column among a list of known aliases.

The import runs as a FastAPI background task with its own session. Progress is
written back to the ``CsvUpload`` row every few rows so the UI can poll it.
"""

from __future__ import annotations

import csv
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.concurrency import run_in_threadpool

from streamo.core.database.base import to_naive_utc, utc_now
from streamo.core.database.entities.csv_uploads import CsvUpload
from streamo.core.database.entities.transactions import Transaction
from streamo.core.database.repositories.csv_uploads import CsvUploadRepository
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import CsvUploadStatus
from streamo.core.monitoring import log_csv_import, log_error

logger = get_logger(__name__)

PROGRESS_EVERY = 5
MAX_REPORTED_ERRORS = 10

COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": (
        "Title",
        "Track Name",
        "Release Title",
        "Release",
        "Song Title",
        "Child Asset Title/Name",
        "Parent Asset Title/Name",
    ),
    "artist": ("Artist", "Artist Name", "Primary Artist"),
    "isrc": ("ISRC", "isrc", "International Standard Recording Code", "Child Asset Identifier"),
    "upc": ("UPC", "upc", "Universal Product Code", "Parent Asset Identifier"),
    "service_type": ("Service", "Platform", "DSP", "Store", "Partner"),
    "territory": ("Country", "Territory", "Region"),
    "transaction_type": ("Type", "Transaction Type", "Channel"),
    "quantity": ("Quantity", "Streams", "Units", "Plays", "Count"),
    "currency": ("Currency",),
    "revenue": ("Gross Revenue in USD", "Revenue", "Earnings", "Amount"),
    "revenue_usd": (
        "Amount Due in USD",
        "Net Revenue in USD",
        "Revenue (USD)",
        "Earnings (USD)",
        "USD Amount",
        "Amount",
    ),
    "label": ("Label", "Label Name"),
    "transaction_date": ("Transaction Month", "Date", "Transaction Date"),
    "notes": ("Notes",),
}

DATE_FORMATS = ("%Y-%m", "%m/%d/%Y", "%b %Y", "%B %Y")


def pick(row: Dict[str, Any], field: str) -> Optional[str]:
    """Return the first non-empty value among ``field``'s column aliases."""
    for column in COLUMN_ALIASES[field]:
        value = row.get(column)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return None


def parse_int(value: Optional[str]) -> int:
    """Parse a count; anything unparsable counts as 0."""
    if value is None:
        return 0
    try:
        parsed = float(value.replace(",", ""))
    except ValueError:
        return 0
    return int(parsed) if math.isfinite(parsed) else 0


def parse_float(value: Optional[str]) -> float:
    """Parse an amount; anything unparsable counts as 0."""
    if value is None:
        return 0.0
    try:
        parsed = float(value.replace(",", ""))
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def parse_report_date(value: str) -> datetime:
    """
    Parse the date forms found in royalty reports.

    Accepts ISO dates and datetimes, ``YYYY-MM``, ``MM/DD/YYYY`` and ``Mon YYYY``.

    Raises:
        ValueError: When none of the forms match
    """
    text = value.strip()
    try:
        return to_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid date '{value}'")


def build_transaction(upload_id: str, row_number: int, row: Dict[str, Any]) -> Transaction:
    """
    Map one report row to a transaction.

    Raises:
        ValueError: When the row cannot be imported (e.g. unparsable date)
    """
    raw_date = pick(row, "transaction_date")
    transaction_date = parse_report_date(raw_date) if raw_date else utc_now()

    return Transaction(
        csv_upload_id=upload_id,
        row_number=row_number,
        transaction_id=f"TRANS-{upload_id}-{row_number}",
        title=pick(row, "title") or "",
        artist=pick(row, "artist") or "",
        isrc=pick(row, "isrc") or "",
        upc=pick(row, "upc") or "",
        label=pick(row, "label") or "",
        service_type=pick(row, "service_type") or "",
        territory=pick(row, "territory") or "",
        transaction_type=pick(row, "transaction_type") or "stream",
        quantity=parse_int(pick(row, "quantity")),
        currency=pick(row, "currency") or "USD",
        revenue=parse_float(pick(row, "revenue")),
        revenue_usd=parse_float(pick(row, "revenue_usd")),
        transaction_date=transaction_date,
        notes=pick(row, "notes") or "",
        raw_data={key: value for key, value in row.items() if key is not None},
    )


def read_csv_rows(path: Path, limit: Optional[int] = None) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read a report into memory.

    Args:
        path: CSV file on disk
        limit: Stop after this many data rows

    Returns:
        Tuple of (header names, rows as dicts)
    """
    rows: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        headers = list(reader.fieldnames or [])
        for row in reader:
            if limit is not None and len(rows) >= limit:
                break
            rows.append(row)
    return headers, rows


def summarize_errors(errors: Sequence[str]) -> Optional[str]:
    """Keep the first few row errors and count the rest."""
    if not errors:
        return None
    message = "\n".join(errors[:MAX_REPORTED_ERRORS])
    if len(errors) > MAX_REPORTED_ERRORS:
        message += f"\n...and {len(errors) - MAX_REPORTED_ERRORS} more errors"
    return message


async def _mark_failed(session_factory: async_sessionmaker[AsyncSession], upload_id: str, message: str) -> None:
    async with session_factory() as session:
        uploads = CsvUploadRepository(session)
        upload = await uploads.get_by_id(upload_id)
        if upload is None:
            return
        upload.status = CsvUploadStatus.failed.value
        upload.error_message = message
        await uploads.update(upload)
        log_csv_import(upload_id, upload.status, upload.total_rows, upload.processed_rows, 0)


async def _save_progress(session: AsyncSession, upload: CsvUpload, processed: int, total: int) -> None:
    """Commit the imported rows so far together with the upload's progress."""
    upload.processed_rows = processed
    upload.progress = math.floor(processed / total * 100)
    session.add(upload)
    await session.commit()


async def _import(session: AsyncSession, upload: CsvUpload) -> None:
    uploads = CsvUploadRepository(session)

    upload.status = CsvUploadStatus.processing.value
    await uploads.update(upload)

    try:
        _, rows = await run_in_threadpool(read_csv_rows, Path(upload.file_path))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Could not read CSV upload {upload.id}: {e}")
        upload.status = CsvUploadStatus.failed.value
        upload.error_message = str(e)
        await uploads.update(upload)
        log_csv_import(upload.id, upload.status, 0, 0, 0)
        return

    total = len(rows)
    upload.total_rows = total
    await uploads.update(upload)
    logger.info(f"Importing CSV upload {upload.id}: {total} rows")

    upload_id = upload.id
    processed = 0
    errors: List[str] = []
    for row_number, row in enumerate(rows, start=1):
        try:
            transaction = build_transaction(upload_id, row_number, row)
            # Savepoint per row: a row the database rejects is skipped, earlier rows stay
            async with session.begin_nested():
                session.add(transaction)
            processed += 1
        except (ValueError, ArithmeticError, SQLAlchemyError) as e:
            message = f"Error processing row {row_number}: {e}"
            errors.append(message)
            logger.warning(message)

        if processed and (processed % PROGRESS_EVERY == 0 or row_number == total):
            await _save_progress(session, upload, processed, total)

    upload.processed_rows = processed
    upload.progress = 100
    upload.status = (CsvUploadStatus.completed_with_errors if errors else CsvUploadStatus.completed).value
    upload.error_message = summarize_errors(errors)
    upload.completed_at = utc_now()
    await uploads.update(upload)

    logger.info(
        f"CSV upload {upload.id} finished: status={upload.status}, rows={total}, "
        f"imported={processed}, errors={len(errors)}"
    )
    log_csv_import(upload.id, upload.status, total, processed, len(errors))


async def process_csv_file(upload_id: str, session_factory: async_sessionmaker[AsyncSession]) -> None:
    """
    Import a stored royalty report.

    Runs outside the request: every failure is recorded on the upload row
    (status ``failed``) instead of being raised.

    Args:
        upload_id: The ``CsvUpload`` to process
        session_factory: Factory for the task's own database session
    """
    try:
        async with session_factory() as session:
            upload = await CsvUploadRepository(session).get_by_id(upload_id)
            if upload is None:
                logger.error(f"CSV upload {upload_id} not found; nothing to import")
                return
            await _import(session, upload)
    except Exception as e:
        logger.error(f"CSV import {upload_id} failed: {e}", exc_info=True)
        log_error("CsvImportError", str(e), {"upload_id": upload_id})
        await _mark_failed(session_factory, upload_id, str(e))
