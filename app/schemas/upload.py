"""
Schemas de subida de archivos.
"""

from app.schemas.common import CamelModel


class UploadResponse(CamelModel):
    success: bool = True
    file_path: str
    file_name: str
