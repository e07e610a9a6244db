"""Persisted pending/completed document id lists."""

import json
import logging
from pathlib import Path

from ..errors import StateFileError

logger = logging.getLogger(__name__)


class StateManager:
    """Track which document ids are still pending and which are converted.

    Both lists are JSON arrays of strings. They are read once per batch run
    and rewritten after every successful conversion:

    1. remove the id from pending, write pending
    2. append the id to completed, write completed

    A crash between the two writes drops the id from both lists. Failed
    conversions leave both lists untouched so the id is retried next run.
    """

    def __init__(self, pending_file: Path, completed_file: Path):
        """Initialize the state manager.

        Args:
            pending_file: JSON array of ids still to convert
            completed_file: JSON array of ids already converted
        """
        self.pending_file = Path(pending_file)
        self.completed_file = Path(completed_file)

        self._pending: list[str] = []
        self._completed: list[str] = []

    @staticmethod
    def _read_json(path: Path) -> object:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def _write_json(path: Path, ids: list[str]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(ids, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Could not save {path}: {e}")
            raise StateFileError(f"Could not save {path}: {e}") from e

    def load(self) -> list[str]:
        """Load both lists from disk.

        Returns:
            Pending ids in stored order

        Raises:
            StateFileError: If the pending file is missing, malformed, or empty
        """
        if not self.pending_file.exists():
            raise StateFileError(
                f"Pending list {self.pending_file} does not exist; create a JSON array of document ids"
            )

        try:
            pending = self._read_json(self.pending_file)
        except (OSError, ValueError) as e:
            raise StateFileError(f"Could not read pending list {self.pending_file}: {e}") from e

        if not isinstance(pending, list) or not all(isinstance(item, str) for item in pending):
            raise StateFileError(f"Pending list {self.pending_file} must be a JSON array of strings")
        if not pending:
            raise StateFileError(f"Pending list {self.pending_file} contains no document ids")

        self._pending = list(pending)
        self._completed = self._load_completed()
        logger.info(f"Loaded {len(self._pending)} pending and {len(self._completed)} completed ids")
        return list(self._pending)

    def _load_completed(self) -> list[str]:
        """Completed ids, or an empty list if the file is absent or malformed."""
        if not self.completed_file.exists():
            return []

        try:
            data = self._read_json(self.completed_file)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load {self.completed_file}, starting empty: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"{self.completed_file} is not a JSON array, starting empty")
            return []
        return [str(item) for item in data]

    def mark_completed(self, doc_id: str) -> None:
        """Move ``doc_id`` from pending to completed and persist both lists.

        Raises:
            StateFileError: If either list cannot be written
        """
        if doc_id in self._pending:
            self._pending.remove(doc_id)
        self._write_json(self.pending_file, self._pending)

        if doc_id not in self._completed:
            self._completed.append(doc_id)
        self._write_json(self.completed_file, self._completed)

    @property
    def pending(self) -> list[str]:
        """Pending ids (copy to prevent mutation)."""
        return list(self._pending)

    @property
    def completed(self) -> list[str]:
        """Completed ids (copy to prevent mutation)."""
        return list(self._completed)

