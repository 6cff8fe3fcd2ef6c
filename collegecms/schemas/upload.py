"""Upload response contract."""

from pydantic import BaseModel


class UploadedFileOut(BaseModel):
    filename: str
    original_filename: str
    url: str
    size: int
