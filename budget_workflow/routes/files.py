# budget_workflow/routes/files.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from budget_workflow.database import get_db
from budget_workflow.models.file_attachment import FileAttachment
from budget_workflow.schemas.common import DeleteResult
from budget_workflow.schemas.file_attachment import (
    FileAttachmentCreate,
    FileAttachmentResponse,
)
from budget_workflow.services import file_service

router = APIRouter()


def file_to_response(f: FileAttachment) -> FileAttachmentResponse:
    return FileAttachmentResponse(
        id=f.id,
        budget_request_id=f.budget_request_id,
        filename=f.filename,
        original_filename=f.original_filename,
        file_path=f.file_path,
        file_size=f.file_size,
        mime_type=f.mime_type,
        uploaded_at=f.uploaded_at.isoformat() if f.uploaded_at else "",
    )


@router.post("", response_model=FileAttachmentResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    body: FileAttachmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register an uploaded document. The bytes must already be at ``file_path``."""
    attachment = await file_service.upload_file(db, body)
    return file_to_response(attachment)


@router.delete("/{file_id}", response_model=DeleteResult)
async def delete_file(file_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await file_service.delete_file(db, file_id)
    return DeleteResult(deleted=deleted)
