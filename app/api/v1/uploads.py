"""
Endpoints de archivos adjuntos: subida (foto del sorriso, escaneo 3D)
y descarga de lo guardado. Ambos requieren sesión.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from app.auth.dependencies import get_current_user
from app.models.user import User
from app.schemas.upload import UploadResponse
from app.services.upload_service import UploadKind, resolve_upload_path, store_upload

router = APIRouter()

files_router = APIRouter()


@router.post("/smile-photo", response_model=UploadResponse)
async def upload_smile_photo(
    smile_photo: UploadFile | None = File(None, alias="smilePhoto"),
    user: User = Depends(get_current_user),
):
    """Sube la foto del sorriso (sólo imágenes)."""
    return await store_upload(smile_photo, UploadKind.SMILE_PHOTO)


@router.post("/scanner-file", response_model=UploadResponse)
async def upload_scanner_file(
    scanner_file: UploadFile | None = File(None, alias="scannerFile"),
    user: User = Depends(get_current_user),
):
    """Sube el archivo del escáner intraoral (STL, OBJ, PLY o ZIP)."""
    return await store_upload(scanner_file, UploadKind.SCANNER_FILE)


@files_router.get("/{kind}/{filename}")
async def download_upload(
    kind: UploadKind,
    filename: str,
    user: User = Depends(get_current_user),
):
    """Sirve un archivo previamente subido."""
    return FileResponse(resolve_upload_path(kind, filename))
