from pydantic import BaseModel, Field


class FileAttachmentCreate(BaseModel):
    budget_request_id: int
    filename: str = Field(..., min_length=1)
    original_filename: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    file_size: int = Field(..., gt=0)
    mime_type: str = Field(..., min_length=1)


class FileAttachmentResponse(BaseModel):
    id: int
    budget_request_id: int
    filename: str
    original_filename: str
    file_path: str
    file_size: int
    mime_type: str
    uploaded_at: str
