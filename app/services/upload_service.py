"""
Almacenamiento en disco de archivos adjuntos (foto del sorriso, escaneo 3D).

Los archivos se guardan bajo UPLOAD_DIR/<tipo>/ con nombre
`<epoch ms>-<aleatorio><ext>`; la ruta pública devuelta es la que se
adjunta al pedido en smilePhotoPath / scannerFilePath.
"""

import enum
import logging
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from app.config import get_settings
from app.core.exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)

settings = get_settings()

CHUNK_SIZE = 1024 * 1024


class UploadKind(str, enum.Enum):
    """Tipo de adjunto → subdirectorio."""
    SMILE_PHOTO = "smile-photos"
    SCANNER_FILE = "scanner-files"


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR)


def _check_file_type(file: UploadFile, kind: UploadKind) -> str:
    """Valida el tipo y retorna la extensión normalizada."""
    ext = Path(file.filename or "").suffix.lower()
    if kind == UploadKind.SMILE_PHOTO:
        if not (file.content_type or "").startswith("image/"):
            raise ValidationException("Apenas imagens são permitidas para foto do sorriso", field="smilePhoto")
    elif ext not in settings.SCANNER_FILE_EXTENSIONS:
        raise ValidationException("Apenas arquivos STL, OBJ, PLY ou ZIP são permitidos", field="scannerFile")
    return ext


def _unique_name(ext: str) -> str:
    return f"{time.time_ns() // 1_000_000}-{secrets.randbelow(10**9)}{ext}"


async def store_upload(file: UploadFile | None, kind: UploadKind) -> dict:
    """
    Guarda el archivo y retorna `{success, filePath, fileName}`.
    Si supera MAX_UPLOAD_SIZE_BYTES se descarta lo escrito.
    """
    if file is None or not file.filename:
        raise ValidationException("Nenhum arquivo foi enviado", field="file")

    ext = _check_file_type(file, kind)
    target_dir = upload_root() / kind.value
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / _unique_name(ext)

    written = 0
    try:
        with target.open("wb") as out:
            while chunk := await file.read(CHUNK_SIZE):
                written += len(chunk)
                if written > settings.MAX_UPLOAD_SIZE_BYTES:
                    raise ValidationException(
                        f"Arquivo muito grande. Tamanho máximo: "
                        f"{settings.MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)}MB",
                        field="file",
                    )
                out.write(chunk)
    except BaseException:
        # Nunca queda un archivo a medio escribir
        target.unlink(missing_ok=True)
        raise
    finally:
        await file.close()

    logger.info("Archivo guardado: %s (%s bytes, original=%s)", target, written, file.filename)
    return {
        "success": True,
        "file_path": f"/uploads/{kind.value}/{target.name}",
        "file_name": file.filename,
    }


def resolve_upload_path(kind: UploadKind, filename: str) -> Path:
    """Ruta en disco de un archivo guardado; rechaza nombres con componentes de ruta."""
    if not filename or Path(filename).name != filename or filename in (".", ".."):
        raise NotFoundException("File")
    base = (upload_root() / kind.value).resolve()
    path = (base / filename).resolve()
    if path.parent != base or not path.is_file():
        raise NotFoundException("File")
    return path
