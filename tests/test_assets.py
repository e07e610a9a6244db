"""Tests for image relocation and the Cloudinary uploader."""

from unittest.mock import AsyncMock, patch

import cloudinary.exceptions
import pytest
from bs4 import BeautifulSoup
from docblog.assets import AssetRelocator, CloudinaryUploader, DisabledImageHost
from docblog.errors import UploadError

DEFAULT_IMAGE = "/default-thumbnail.jpg"


class TestAssetRelocator:
    """Tests for AssetRelocator."""

    @pytest.fixture
    def image_host(self):
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_replaces_every_occurrence(self, image_host):
        """Test that all occurrences of the URL are rewritten and the cover is set."""
        image_host.upload.return_value = "https://res.cloudinary.com/demo/a.png"
        soup = BeautifulSoup('<p><img src="https://lh3.example/a"></p>', "html.parser")
        markdown = "![](https://lh3.example/a)\n\nSource: https://lh3.example/a\n"

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, markdown)

        assert "https://lh3.example/a" not in result.markdown
        assert result.markdown.count("https://res.cloudinary.com/demo/a.png") == 2
        assert result.cover_image == "https://res.cloudinary.com/demo/a.png"
        image_host.upload.assert_awaited_once_with("https://lh3.example/a")

    @pytest.mark.asyncio
    async def test_failed_upload_keeps_url_and_uses_default(self, image_host):
        """Test that a failed upload leaves the URL and falls back to the placeholder."""
        image_host.upload.side_effect = UploadError("https://lh3.example/a", "HTTP 500")
        soup = BeautifulSoup('<img src="https://lh3.example/a">', "html.parser")
        markdown = "![](https://lh3.example/a)\n"

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, markdown)

        assert result.markdown == markdown
        assert result.cover_image == DEFAULT_IMAGE
        assert result.failed_count == 1
        assert result.images[0].error is not None

    @pytest.mark.asyncio
    async def test_first_successful_upload_is_cover(self, image_host):
        """Test cover selection skips failed images."""
        image_host.upload.side_effect = [
            UploadError("https://lh3.example/1", "boom"),
            "https://res.cloudinary.com/demo/2.png",
            "https://res.cloudinary.com/demo/3.png",
        ]
        soup = BeautifulSoup(
            '<img src="https://lh3.example/1"><img src="https://lh3.example/2"><img src="https://lh3.example/3">',
            "html.parser",
        )
        markdown = "![](https://lh3.example/1) ![](https://lh3.example/2) ![](https://lh3.example/3)"

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, markdown)

        assert result.cover_image == "https://res.cloudinary.com/demo/2.png"
        assert result.uploaded_count == 2
        assert "https://lh3.example/1" in result.markdown
        assert [call.args[0] for call in image_host.upload.await_args_list] == [
            "https://lh3.example/1",
            "https://lh3.example/2",
            "https://lh3.example/3",
        ]

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_abort(self, image_host):
        """Test that any host error is treated as a per-image failure."""
        image_host.upload.side_effect = [RuntimeError("socket closed"), "https://res.cloudinary.com/demo/b.png"]
        soup = BeautifulSoup('<img src="https://lh3.example/a"><img src="https://lh3.example/b">', "html.parser")

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, "![](https://lh3.example/b)")

        assert result.markdown == "![](https://res.cloudinary.com/demo/b.png)"

    @pytest.mark.asyncio
    async def test_duplicate_sources_uploaded_once(self, image_host):
        """Test that repeated images are uploaded a single time."""
        image_host.upload.return_value = "https://res.cloudinary.com/demo/a.png"
        soup = BeautifulSoup('<img src="https://lh3.example/a"><img src="https://lh3.example/a">', "html.parser")

        await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, "")

        image_host.upload.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_data_uris_and_missing_src_skipped(self, image_host):
        """Test that inline data URIs and empty sources are ignored."""
        soup = BeautifulSoup('<img src="data:image/png;base64,AAAA"><img alt="no src">', "html.parser")

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, "text")

        image_host.upload.assert_not_awaited()
        assert result.cover_image == DEFAULT_IMAGE

    @pytest.mark.asyncio
    async def test_escaped_url_spelling_replaced(self, image_host):
        """Test that Markdown-escaped parentheses in URLs are rewritten too."""
        image_host.upload.return_value = "https://res.cloudinary.com/demo/a.png"
        soup = BeautifulSoup('<img src="https://lh3.example/a(1).png">', "html.parser")
        markdown = "![](https://lh3.example/a\\(1\\).png)"

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, markdown)

        assert result.markdown == "![](https://res.cloudinary.com/demo/a.png)"

    @pytest.mark.asyncio
    async def test_disabled_host_keeps_everything(self):
        """Test that an unconfigured host leaves URLs and uses the placeholder."""
        soup = BeautifulSoup('<img src="https://lh3.example/a">', "html.parser")

        result = await AssetRelocator(DisabledImageHost(), DEFAULT_IMAGE).relocate(soup, "![](https://lh3.example/a)")

        assert result.markdown == "![](https://lh3.example/a)"
        assert result.cover_image == DEFAULT_IMAGE

    @pytest.mark.asyncio
    async def test_url_that_prefixes_another_is_not_spliced(self, image_host):
        """Test that a short URL is not rewritten inside a longer one that starts with it."""
        image_host.upload.side_effect = ["https://cdn.example/A.png", "https://cdn.example/B.png"]
        soup = BeautifulSoup('<img src="https://g.example/img"><img src="https://g.example/img2">', "html.parser")
        markdown = "![](https://g.example/img) ![](https://g.example/img2)"

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, markdown)

        assert result.markdown == "![](https://cdn.example/A.png) ![](https://cdn.example/B.png)"

    @pytest.mark.asyncio
    async def test_failed_longer_url_left_intact(self, image_host):
        """Test that a failed longer URL survives when its shorter prefix uploads."""
        image_host.upload.side_effect = ["https://cdn.example/A.png", UploadError("https://g.example/img2", "boom")]
        soup = BeautifulSoup('<img src="https://g.example/img"><img src="https://g.example/img2">', "html.parser")
        markdown = "![](https://g.example/img) ![](https://g.example/img2)"

        result = await AssetRelocator(image_host, DEFAULT_IMAGE).relocate(soup, markdown)

        assert result.markdown == "![](https://cdn.example/A.png) ![](https://g.example/img2)"
        assert result.cover_image == "https://cdn.example/A.png"


class TestCloudinaryUploader:
    """Tests for CloudinaryUploader."""

    def _uploader(self, folder=None, timeout=None):
        return CloudinaryUploader("demo", "key123", "secret", folder=folder, timeout=timeout)

    @pytest.mark.asyncio
    async def test_upload_returns_secure_url(self):
        """Test a successful upload by URL with credentials passed per call."""
        with patch(
            "cloudinary.uploader.upload",
            return_value={"secure_url": "https://res.cloudinary.com/demo/x.png", "public_id": "blog/x"},
        ) as upload:
            result = await self._uploader(folder="blog", timeout=60).upload("https://lh3.example/x")

        assert result == "https://res.cloudinary.com/demo/x.png"
        upload.assert_called_once_with(
            "https://lh3.example/x",
            cloud_name="demo",
            api_key="key123",
            api_secret="secret",
            folder="blog",
            timeout=60,
        )

    @pytest.mark.asyncio
    async def test_optional_options_omitted(self):
        """Test that folder and timeout are not sent when unset."""
        with patch("cloudinary.uploader.upload", return_value={"secure_url": "https://res.cloudinary.com/demo/x.png"}) as upload:
            await self._uploader().upload("https://lh3.example/x")

        assert "folder" not in upload.call_args.kwargs
        assert "timeout" not in upload.call_args.kwargs

    @pytest.mark.asyncio
    async def test_sdk_error_raises_upload_error(self):
        """Test that Cloudinary SDK errors become UploadError."""
        with patch("cloudinary.uploader.upload", side_effect=cloudinary.exceptions.Error("Invalid Signature")):
            with pytest.raises(UploadError, match="Invalid Signature") as exc_info:
                await self._uploader().upload("https://lh3.example/x")

        assert exc_info.value.image_url == "https://lh3.example/x"

    @pytest.mark.asyncio
    async def test_missing_secure_url_raises_upload_error(self):
        """Test that a response without secure_url raises UploadError."""
        with patch("cloudinary.uploader.upload", return_value={"public_id": "x"}):
            with pytest.raises(UploadError, match="secure_url"):
                await self._uploader().upload("https://lh3.example/x")
