from typing import Optional

from pydantic import BaseModel


class UploadRequest(BaseModel):
    filename: Optional[str] = None
    # base64, optionally with a data:<mime>;base64, prefix
    data: Optional[str] = None


class UploadResponse(BaseModel):
    url: str
    filename: str
