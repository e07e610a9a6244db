"""Google Docs HTML export source."""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import quote

import aiohttp

from ..errors import EmptyDocumentError, FetchError
from ..http.protocols import HttpClient
from ..models.config import DEFAULT_EXPORT_URL

logger = logging.getLogger(__name__)


class GoogleDocsExporter:
    """
    Fetches a document through the editor's public HTML export endpoint.

    Example:
        async with AsyncHttpClient() as client:
            exporter = GoogleDocsExporter(client)
            html = await exporter.fetch("1AbC...")
    """

    def __init__(
        self,
        http_client: HttpClient,
        export_url: str = DEFAULT_EXPORT_URL,
        min_length: int = 100,
    ) -> None:
        """
        Initialize the exporter.

        Args:
            http_client: HTTP client implementing HttpClient protocol
            export_url: URL template with a {doc_id} placeholder
            min_length: Exports shorter than this are rejected
        """
        self._client = http_client
        self._export_url = export_url
        self._min_length = min_length

    def export_url_for(self, doc_id: str) -> str:
        return self._export_url.format(doc_id=quote(doc_id, safe=""))

    async def fetch(self, doc_id: str) -> str:
        """
        Fetch the exported HTML for ``doc_id``.

        Raises:
            FetchError: On transport failure, an oversized export or a
                non-200 status
            EmptyDocumentError: If the export is shorter than min_length
        """
        url = self.export_url_for(doc_id)
        logger.info(f"Fetching export for {doc_id} from {url}")

        try:
            response = await self._client.get(url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(doc_id, reason=repr(e)) from e
        except ValueError as e:
            # Size limit exceeded
            raise FetchError(doc_id, reason=str(e)) from e

        if response.status_code != 200:
            raise FetchError(doc_id, status_code=response.status_code)

        html = self._client.decode_content(response)
        if len(html) < self._min_length:
            raise EmptyDocumentError(doc_id, len(html), self._min_length)

        logger.debug(f"Fetched {doc_id}: {len(html)} characters")
        return html
