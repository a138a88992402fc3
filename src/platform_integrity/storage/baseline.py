"""
Baseline storage - persists a snapshot's text between boots.
"""

import logging
from pathlib import Path

from ..integrity.snapshot import IntegritySnapshot

logger = logging.getLogger("platform_integrity.storage")


class BaselineStore:
    """
    Flat-file store for the reference snapshot.

    The file holds exactly the text produced by ``IntegritySnapshot.to_string``
    in UTF-8. Hand-added ``#`` comments are tolerated when loading.
    """

    def __init__(self, path: Path):
        """
        Initialize store.

        Args:
            path: File to persist the baseline snapshot in
        """
        self.path = path

    def exists(self) -> bool:
        """Whether a baseline has been recorded."""
        return self.path.is_file()

    def save(self, snapshot: IntegritySnapshot) -> Path:
        """
        Persist a snapshot as the new baseline.

        Returns:
            Path of the written file
        """
        text = snapshot.to_string()
        if text is None:
            raise ValueError("Cannot save empty snapshot")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(text)

        logger.info(f"Recorded baseline of {len(snapshot)} entries to {self.path}")
        return self.path

    def load(self) -> IntegritySnapshot | None:
        """
        Load the baseline snapshot.

        Returns:
            The snapshot, or None if no baseline has been recorded

        Raises:
            MalformedInputError: If the file is not valid snapshot text
        """
        if not self.exists():
            return None

        with open(self.path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
        return IntegritySnapshot.from_string(text)

    def clear(self) -> None:
        """Delete the recorded baseline."""
        self.path.unlink(missing_ok=True)
