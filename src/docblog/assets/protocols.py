"""Protocol definitions for image hosting."""

from typing import Protocol


class ImageHost(Protocol):
    """
    Protocol for copying an image to a durable host.

    Implementations raise UploadError when the upload does not succeed.
    """

    async def upload(self, image_url: str) -> str:
        """
        Upload the image found at ``image_url``.

        Args:
            image_url: Source URL of the image

        Returns:
            Durable URL of the hosted copy
        """
        ...
