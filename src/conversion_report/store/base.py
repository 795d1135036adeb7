"""Abstract watermark store: a document per root, history under one child key."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from conversion_report.errors import StoreError
from conversion_report.models.watermark import WatermarkHistory

logger = logging.getLogger(__name__)


class BaseWatermarkStore(ABC):
    """
    Key-value document store holding run boundary timestamps.
    Writes replace the whole document; there is no compare-and-swap, so at
    most one run may be in flight per root.
    """

    @abstractmethod
    def read(self, root: str) -> Optional[dict[str, Any]]:
        """Document stored at root, or None when nothing is stored. Raises StoreError."""
        pass

    @abstractmethod
    def write(self, root: str, document: dict[str, Any]) -> None:
        """Replace the document at root. Raises StoreError."""
        pass

    def load_history(self, root: str, child_key: str) -> WatermarkHistory:
        """
        History stored at root/child_key.
        When absent, returns the seeded default without writing it back.
        """
        document = self.read(root)
        history = WatermarkHistory.from_document(document, child_key)
        if history is None:
            logger.warning("No watermark history at %s/%s; using seed %s", root, child_key, WatermarkHistory.seeded().last)
            return WatermarkHistory.seeded()
        logger.info("Loaded %d watermark(s) from %s/%s, last %s", len(history), root, child_key, history.last)
        return history

    def save_history(self, root: str, child_key: str, history: WatermarkHistory) -> None:
        self.write(root, history.to_document(child_key))
        logger.info("Saved %d watermark(s) to %s/%s, last %s", len(history), root, child_key, history.last)

    def close(self) -> None:
        pass


def store_error(operation: str, root: str, err: Exception, status_code: Optional[int] = None, body: Any = None) -> StoreError:
    """StoreError describing the failed operation and its inputs."""
    return StoreError(f"Watermark {operation} failed for {root}: {err}", status_code=status_code, body=body)
