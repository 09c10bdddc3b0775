"""
Tests de subida y descarga de archivos adjuntos.
"""

from httpx import AsyncClient

from app.config import get_settings

settings = get_settings()

UPLOAD = f"{settings.API_PREFIX}/upload"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def test_upload_requires_session(client: AsyncClient, upload_dir):
    response = await client.post(
        f"{UPLOAD}/smile-photo",
        files={"smilePhoto": ("sorriso.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}
    assert not any(upload_dir.rglob("*.png"))


async def test_upload_smile_photo(auth_client: AsyncClient, upload_dir):
    response = await auth_client.post(
        f"{UPLOAD}/smile-photo",
        files={"smilePhoto": ("sorriso.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["fileName"] == "sorriso.png"
    assert body["filePath"].startswith("/uploads/smile-photos/")
    assert body["filePath"].endswith(".png")

    stored = upload_dir / "smile-photos" / body["filePath"].rsplit("/", 1)[-1]
    assert stored.read_bytes() == PNG_BYTES


async def test_upload_smile_photo_rejects_non_image(auth_client: AsyncClient, upload_dir):
    response = await auth_client.post(
        f"{UPLOAD}/smile-photo",
        files={"smilePhoto": ("notas.txt", b"texto", "text/plain")},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Apenas imagens são permitidas para foto do sorriso"


async def test_upload_scanner_file(auth_client: AsyncClient, upload_dir):
    response = await auth_client.post(
        f"{UPLOAD}/scanner-file",
        files={"scannerFile": ("arcada.STL", b"solid arcada\nendsolid", "application/octet-stream")},
    )
    assert response.status_code == 200
    assert response.json()["filePath"].endswith(".stl")


async def test_upload_scanner_file_rejects_extension(auth_client: AsyncClient, upload_dir):
    response = await auth_client.post(
        f"{UPLOAD}/scanner-file",
        files={"scannerFile": ("arcada.exe", b"MZ", "application/octet-stream")},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Apenas arquivos STL, OBJ, PLY ou ZIP são permitidos"


async def test_upload_without_file(auth_client: AsyncClient, upload_dir):
    response = await auth_client.post(f"{UPLOAD}/scanner-file", data={"other": "x"})
    assert response.status_code == 400
    assert response.json()["error"] == "Nenhum arquivo foi enviado"


async def test_upload_too_large(auth_client: AsyncClient, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_BYTES", 10)
    response = await auth_client.post(
        f"{UPLOAD}/scanner-file",
        files={"scannerFile": ("arcada.stl", b"x" * 64, "application/octet-stream")},
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("Arquivo muito grande")
    assert not any((upload_dir / "scanner-files").iterdir())


async def test_download_uploaded_file(auth_client: AsyncClient, upload_dir):
    uploaded = await auth_client.post(
        f"{UPLOAD}/smile-photo",
        files={"smilePhoto": ("sorriso.png", PNG_BYTES, "image/png")},
    )
    path = uploaded.json()["filePath"]

    response = await auth_client.get(path)
    assert response.status_code == 200
    assert response.content == PNG_BYTES


async def test_download_requires_session(client: AsyncClient, upload_dir):
    response = await client.get("/uploads/smile-photos/qualquer.png")
    assert response.status_code == 401


async def test_download_missing_file(auth_client: AsyncClient, upload_dir):
    response = await auth_client.get("/uploads/scanner-files/nao-existe.stl")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "File not found"}


async def test_download_unknown_kind(auth_client: AsyncClient, upload_dir):
    response = await auth_client.get("/uploads/outros/arquivo.png")
    assert response.status_code == 400
