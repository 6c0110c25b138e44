# src/collection_diff/connectivity/base.py

from abc import ABC, abstractmethod
import logging

from ..models import Snapshot

logger = logging.getLogger(__name__)


class RevisionSource(ABC):
    """
    Fetches one revision of a collection as a normalized snapshot.
    """

    @abstractmethod
    def fetch_revision(self, slug: str, revision: int) -> Snapshot:
        """
        Return the entities of ``slug`` at ``revision``.

        Raises:
            RemoteError: If the fetch fails or the API reports an error
        """
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
