"""Protocol definitions for raw document sources."""

from typing import Protocol


class DocumentSource(Protocol):
    """
    Protocol for fetching a document's raw markup by id.

    Implementations raise FetchError when the remote call does not succeed
    and EmptyDocumentError when the returned markup is implausibly short.
    """

    async def fetch(self, doc_id: str) -> str:
        """
        Fetch raw HTML for a document.

        Args:
            doc_id: Opaque document identifier

        Returns:
            Raw HTML text
        """
        ...
