"""
Royalty CSV Endpoints.

Staff upload distributor royalty reports here. The file is stored and imported
in the background; clients poll ``/csv/{id}/status`` for progress.
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, File, Query, UploadFile, status
from starlette.concurrency import run_in_threadpool

from streamo.core.database.entities.csv_uploads import CsvUpload
from streamo.core.database.repositories.csv_uploads import CsvUploadRepository
from streamo.core.database.repositories.transactions import TransactionRepository
from streamo.core.database.repositories.users import UserRepository
from streamo.core.errors import NotFoundError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import CsvUploadStatus
from streamo.core.models.io.common import MessageResponse, Page
from streamo.core.models.io.csv import CsvContent, CsvUploadListItem, CsvUploadRead
from streamo.core.models.io.users import UserSummary
from streamo.server.services import storage
from streamo.server.services.csv_import import process_csv_file, read_csv_rows
from streamo.server.services.deps import AdminUser, PageDep, SessionDep, SessionFactoryDep

logger = get_logger(__name__)

router = APIRouter()


async def _get_upload(session: SessionDep, upload_id: str) -> CsvUpload:
    upload = await CsvUploadRepository(session).get_by_id(upload_id)
    if upload is None:
        raise NotFoundError("CSV upload", upload_id)
    return upload


@router.post(
    "/upload",
    response_model=CsvUploadRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Royalty Report",
    description="Staff only. Store a CSV royalty report and import it in the background.",
    response_description="The pending upload; poll its status for progress.",
    responses={400: {"description": "Not a CSV file"}, 413: {"description": "File too large"}},
)
async def upload_csv(
    actor: AdminUser,
    session: SessionDep,
    session_factory: SessionFactoryDep,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
) -> CsvUploadRead:
    stored = await storage.save_upload(file, "csv", "royalty", storage.CSV)
    upload = await CsvUploadRepository(session).create(
        CsvUpload(
            file_name=stored.file_name,
            original_file_name=stored.original_name,
            file_path=str(stored.file_path),
            file_size=stored.size,
            mime_type=stored.mime_type,
            status=CsvUploadStatus.pending.value,
            uploaded_by=actor.id,
        )
    )
    response = CsvUploadRead.model_validate(upload)
    background_tasks.add_task(process_csv_file, upload.id, session_factory)
    logger.info(f"User {actor.id} uploaded CSV {upload.id} ({stored.size} bytes), import scheduled")
    return response


@router.get(
    "",
    response_model=Page[CsvUploadListItem],
    summary="List Uploads",
    description="Staff only. Uploads newest first with the uploader's name and email.",
)
async def list_uploads(
    _: AdminUser,
    session: SessionDep,
    pagination: PageDep,
    status_filter: Optional[CsvUploadStatus] = Query(default=None, alias="status"),
) -> Page[CsvUploadListItem]:
    uploads, total = await CsvUploadRepository(session).search(
        status=status_filter.value if status_filter else None, limit=pagination.limit, offset=pagination.offset
    )
    uploaders = await UserRepository(session).get_many([u.uploaded_by for u in uploads])
    items = []
    for upload in uploads:
        item = CsvUploadListItem.model_validate(upload)
        uploader = uploaders.get(upload.uploaded_by)
        item.uploader = UserSummary.model_validate(uploader) if uploader else None
        items.append(item)
    return Page.build(items, total, pagination.page, pagination.limit)


@router.get(
    "/{upload_id}/status",
    response_model=CsvUploadRead,
    summary="Upload Status",
    description="Staff only. Import status and progress of one upload.",
    responses={404: {"description": "Upload not found"}},
)
async def upload_status(upload_id: str, _: AdminUser, session: SessionDep) -> CsvUploadRead:
    return CsvUploadRead.model_validate(await _get_upload(session, upload_id))


@router.get(
    "/{upload_id}/content",
    response_model=CsvContent,
    summary="Preview Upload",
    description="Staff only. The first rows of the stored file as parsed by the importer.",
    responses={404: {"description": "Upload or file not found"}},
)
async def upload_content(
    upload_id: str, _: AdminUser, session: SessionDep, limit: int = Query(default=100, ge=1, le=1000)
) -> CsvContent:
    upload = await _get_upload(session, upload_id)
    path = Path(upload.file_path)
    if not path.exists():
        raise NotFoundError("CSV file")
    headers, rows = await run_in_threadpool(read_csv_rows, path, limit)
    return CsvContent(upload_id=upload.id, headers=headers, rows=rows, total_rows=upload.total_rows)


@router.delete(
    "/{upload_id}",
    response_model=MessageResponse,
    summary="Delete Upload",
    description="Staff only. Remove the stored file, the upload and every transaction imported from it.",
    responses={404: {"description": "Upload not found"}},
)
async def delete_upload(upload_id: str, actor: AdminUser, session: SessionDep) -> MessageResponse:
    upload = await _get_upload(session, upload_id)
    Path(upload.file_path).unlink(missing_ok=True)
    removed = await TransactionRepository(session).delete_for_upload(upload.id)
    await CsvUploadRepository(session).delete(upload.id)
    logger.info(f"User {actor.id} deleted CSV upload {upload_id} and {removed} transactions")
    return MessageResponse(message="CSV upload deleted successfully")
