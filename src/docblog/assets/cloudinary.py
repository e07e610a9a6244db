"""Cloudinary image host."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader

from ..errors import UploadError

logger = logging.getLogger(__name__)


class CloudinaryUploader:
    """
    Uploads remote images to Cloudinary by URL.

    Cloudinary pulls the source URL itself, so image bytes never pass
    through this process. Credentials are passed with every call rather
    than through ``cloudinary.config()``, so several uploaders can coexist.

    Example:
        uploader = CloudinaryUploader("my-cloud", api_key, api_secret, folder="blog")
        durable_url = await uploader.upload("https://lh3.googleusercontent.com/...")
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._options: dict[str, Any] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }
        if folder:
            self._options["folder"] = folder
        if timeout is not None:
            self._options["timeout"] = timeout

    async def upload(self, image_url: str) -> str:
        """
        Upload ``image_url`` and return the hosted ``secure_url``.

        The SDK call is blocking and runs in a worker thread.

        Raises:
            UploadError: On any SDK error or a response without a secure_url
        """
        try:
            result = await asyncio.to_thread(cloudinary.uploader.upload, image_url, **self._options)
        except cloudinary.exceptions.Error as e:
            raise UploadError(image_url, str(e)) from e

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            raise UploadError(image_url, "response has no secure_url")

        logger.debug(f"Uploaded {image_url} as {result.get('public_id')}")
        return str(secure_url)
