"""
File attachment service: metadata records for uploaded supporting documents.

Upload validates the declared size and MIME type and stores the record; the
bytes themselves are already at file_path. Delete removes the bytes on a
best-effort basis and always removes the record.
"""

from typing import Any, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from budget_workflow.config import settings
from budget_workflow.errors import NotFound, ValidationError
from budget_workflow.models.file_attachment import FileAttachment
from budget_workflow.schemas.file_attachment import FileAttachmentCreate
from budget_workflow.services.lifecycle import (
    EDITABLE_STATUSES,
    ensure_editable,
    is_editable,
    lock_request,
)
from budget_workflow.services.storage import get_file_store
from budget_workflow.services.validation import validate_payload

logger = structlog.get_logger()

MAX_FILE_SIZE = 50 * 1024 * 1024  # 50 MiB

ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "image/jpeg",
    "image/png",
})


async def upload_file(
    session: AsyncSession,
    payload: Union[Mapping[str, Any], FileAttachmentCreate],
    max_size: Optional[int] = None,
    allowed_types: frozenset[str] = ALLOWED_MIME_TYPES,
    editable: frozenset[str] = EDITABLE_STATUSES,
) -> FileAttachment:
    data = validate_payload("create_file", payload)
    if max_size is None:
        max_size = min(settings.MAX_UPLOAD_BYTES, MAX_FILE_SIZE)

    request = await lock_request(session, data.budget_request_id)
    if not request:
        raise NotFound("Budget request", data.budget_request_id)
    ensure_editable(request, "upload files to", editable)

    if data.file_size > max_size:
        raise ValidationError.single(
            "file_size",
            f"File size {data.file_size} bytes exceeds maximum allowed size of {max_size} bytes",
            "file_too_large",
        )

    if data.mime_type not in allowed_types:
        raise ValidationError.single(
            "mime_type",
            f"File type {data.mime_type} is not allowed",
            "mime_type_not_allowed",
        )

    attachment = FileAttachment(**data.model_dump())
    session.add(attachment)
    await session.flush()

    logger.info(
        "file_uploaded",
        file_id=attachment.id,
        request_id=request.id,
        size=attachment.file_size,
        mime_type=attachment.mime_type,
    )
    return attachment


async def get_file(session: AsyncSession, file_id: int) -> Optional[FileAttachment]:
    result = await session.execute(
        select(FileAttachment).where(FileAttachment.id == file_id)
    )
    return result.scalar_one_or_none()


async def list_files(session: AsyncSession, request_id: int) -> list[FileAttachment]:
    result = await session.execute(
        select(FileAttachment)
        .where(FileAttachment.budget_request_id == request_id)
        .order_by(FileAttachment.uploaded_at.desc(), FileAttachment.id.desc())
    )
    return list(result.scalars().all())


def _remove_physical_file(store, attachment: FileAttachment) -> None:
    try:
        if store.exists(attachment.file_path):
            store.delete(attachment.file_path)
        else:
            logger.info(
                "file_physical_missing",
                file_id=attachment.id,
                path=attachment.file_path,
            )
    except Exception as e:
        # Never blocks removal of the metadata record.
        logger.error(
            "file_physical_delete_failed",
            file_id=attachment.id,
            path=attachment.file_path,
            error=str(e),
        )


async def delete_file(
    session: AsyncSession,
    file_id: int,
    store=None,
    editable: frozenset[str] = EDITABLE_STATUSES,
) -> bool:
    attachment = await get_file(session, file_id)
    if not attachment:
        return False

    request = await lock_request(session, attachment.budget_request_id)
    if not request or not is_editable(request.status, editable):
        logger.info(
            "file_delete_refused",
            file_id=file_id,
            status=request.status if request else None,
        )
        return False

    _remove_physical_file(store or get_file_store(), attachment)

    await session.delete(attachment)
    await session.flush()

    logger.info("file_deleted", file_id=file_id, request_id=request.id)
    return True
