"""Image relocation for docblog."""

from .cloudinary import CloudinaryUploader
from .protocols import ImageHost
from .relocator import AssetRelocator, DisabledImageHost, ImageRelocation, RelocationResult

__all__ = [
    "AssetRelocator",
    "CloudinaryUploader",
    "DisabledImageHost",
    "ImageHost",
    "ImageRelocation",
    "RelocationResult",
]
