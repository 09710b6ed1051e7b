# council_portal/services/storage_service.py
import hashlib
import logging
import os
import time
from pathlib import Path
from typing import Iterable, Optional

import httpx

from council_portal.config import settings

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/raw/upload"


class StorageError(Exception):
    """Remote upload failed or returned no URL."""


class CloudinaryUploader:
    """Signed uploads to Cloudinary's REST upload endpoint."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str,
                 root_folder: str = "", timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.root_folder = root_folder.strip("/")
        self.timeout = timeout
        self.transport = transport

    def _sign(self, params: dict) -> str:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    async def upload(self, content: bytes, filename: str, folder: str) -> str:
        target_folder = "/".join(part for part in (self.root_folder, folder) if part)
        params = {
            "folder": target_folder,
            "public_id": filename,
            "timestamp": int(time.time()),
        }
        data = {**params, "api_key": self.api_key, "signature": self._sign(params)}
        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    data=data,
                    files={"file": (filename, content, "application/pdf")},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"[Cloudinary] HTTP error uploading {filename}: {e}")
            raise StorageError(f"Upload of {filename} failed with status {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"[Cloudinary] Request error uploading {filename}: {e}")
            raise StorageError(f"Upload of {filename} failed: {e}") from e

        secure_url = response.json().get("secure_url")
        if not secure_url:
            raise StorageError(f"Upload of {filename} returned no URL")

        logger.info(f"[Cloudinary] Uploaded {filename} to {target_folder}")
        return secure_url


class DocumentStorage:
    """
    Local document copies under a base directory plus an optional remote uploader.

    Without an uploader the local copy is authoritative and its public path
    (``/uploads/<folder>/<file>``) is returned as the document URL.
    """

    def __init__(self, base_dir, uploader: Optional[CloudinaryUploader] = None,
                 public_prefix: str = "/uploads"):
        self.base_dir = Path(base_dir)
        self.uploader = uploader
        self.public_prefix = public_prefix.rstrip("/")

    @property
    def remote_enabled(self) -> bool:
        return self.uploader is not None

    def write_local(self, folder: str, filename: str, content: bytes) -> Path:
        folder_path = self.base_dir / folder
        os.makedirs(folder_path, exist_ok=True)
        path = folder_path / filename
        with open(path, "wb") as buffer:
            buffer.write(content)
        return path

    def remove_local(self, paths: Iterable[Path]) -> None:
        for path in paths:
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove staged file {path}: {e}")

    def local_url(self, folder: str, filename: str) -> str:
        return f"{self.public_prefix}/{folder}/{filename}"

    async def upload(self, folder: str, filename: str, content: bytes) -> str:
        if self.uploader is None:
            return self.local_url(folder, filename)
        return await self.uploader.upload(content, filename, folder)


def get_storage() -> DocumentStorage:
    uploader = None
    if settings.cloudinary_configured:
        uploader = CloudinaryUploader(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            root_folder=settings.CLOUDINARY_FOLDER,
            timeout=settings.UPLOAD_TIMEOUT_SECONDS,
        )
    else:
        logger.warning("Cloudinary credentials not set - documents are kept in local storage only")
    return DocumentStorage(settings.UPLOAD_DIR, uploader)
