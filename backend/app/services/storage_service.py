"""
Storage Service
Uploads images and PDFs to Cloudinary

Purpose:
- Signed uploads when API key + secret are configured, unsigned preset uploads otherwise
- PDFs go up as "raw" resources, everything else as "image"
- Image URLs get automatic format/quality (f_auto,q_auto)
- Remote URL import for the bulk uploader (Google Drive links supported)

Author: TM3
Date: 2026-02-10
"""
import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from app.core.config import settings
from app.core.exceptions import StorageUploadException

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
AUTO_TRANSFORMATION = "f_auto,q_auto"
DRIVE_FILE_ID = re.compile(r"/d/([a-zA-Z0-9_-]+)/")


@dataclass
class UploadedFile:
    """A file received from the dashboard, ready to be uploaded"""
    content: bytes
    filename: str
    content_type: str = "application/octet-stream"

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").startswith("image/")


def optimize_image_url(url: str) -> str:
    """Insert f_auto,q_auto right after /upload/"""
    if not url or f"/upload/{AUTO_TRANSFORMATION}/" in url:
        return url
    return url.replace("/upload/", f"/upload/{AUTO_TRANSFORMATION}/", 1)


def transform_drive_url(url: str) -> str:
    """Google Drive share links -> direct download links"""
    match = DRIVE_FILE_ID.search(url or "")
    if not match:
        return url
    return f"https://drive.google.com/uc?export=download&id={match.group(1)}"


class CloudinaryStorage:
    """
    Cloudinary uploader

    Usage:
        storage = CloudinaryStorage()
        url = storage.upload(UploadedFile(data, "cover.png", "image/png"), folder="blogs")
    """

    def __init__(self):
        self._configured = False

    def _configure(self) -> None:
        if not settings.cloudinary_configured:
            raise StorageUploadException(
                "Cloudinary is not configured. Set CLOUDINARY_CLOUD_NAME and either "
                "CLOUDINARY_API_KEY/CLOUDINARY_API_SECRET or CLOUDINARY_UPLOAD_PRESET."
            )
        if not self._configured:
            cloudinary.config(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY or None,
                api_secret=settings.CLOUDINARY_API_SECRET or None,
                secure=True,
            )
            self._configured = True

    @property
    def signed(self) -> bool:
        return bool(settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET)

    def _send(self, source, resource_type: str, folder: Optional[str]) -> str:
        self._configure()
        options = {"resource_type": resource_type}
        if folder:
            options["folder"] = folder

        try:
            if self.signed:
                result = cloudinary.uploader.upload(source, **options)
            else:
                result = cloudinary.uploader.unsigned_upload(
                    source, settings.CLOUDINARY_UPLOAD_PRESET, **options
                )
        except CloudinaryError as e:
            raise StorageUploadException(f"Failed to upload to Cloudinary: {e}")

        url = (result or {}).get("secure_url")
        if not url:
            raise StorageUploadException("Failed to upload to Cloudinary: no secure_url returned")
        return url

    def upload(self, file: UploadedFile, folder: Optional[str] = None) -> str:
        """
        Upload one file and return its public URL

        Raises:
            StorageUploadException: Not configured or rejected by Cloudinary
        """
        buffer = io.BytesIO(file.content)
        buffer.name = file.filename
        resource_type = "raw" if file.is_pdf else "image"

        url = self._send(buffer, resource_type, folder)
        logger.info(f"Uploaded {file.filename} ({resource_type}) to Cloudinary")
        return url if file.is_pdf else optimize_image_url(url)

    def upload_remote(self, url: str) -> str:
        """
        Import a remote image by URL

        Already-hosted Cloudinary URLs are kept; on any failure the source
        URL is returned so the product still points at the original image.
        """
        if not url:
            return ""
        if "res.cloudinary.com" in url:
            return url

        source = transform_drive_url(url.strip())
        try:
            return self._send(source, "image", None)
        except StorageUploadException as e:
            logger.warning(f"Remote image upload failed for {source}: {e.message}")
            return source


_storage: Optional[CloudinaryStorage] = None


def get_storage() -> CloudinaryStorage:
    """FastAPI dependency for the storage uploader"""
    global _storage
    if _storage is None:
        _storage = CloudinaryStorage()
    return _storage
