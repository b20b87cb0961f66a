"""
Base storage interface for shortlink.

Purpose:
    Define a small, stable contract that multiple storage backends
    (in-memory, PostgreSQL, a KV store) can implement without requiring
    changes to the manager or the resolver.

Atomicity:
    Correctness under concurrency lives here, not in the callers.
    `insert_unique` must be a true unique-key insert (not check-then-write)
    and `increment_clicks_and_touch` must be a single atomic update.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..models import Link


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def insert_unique(self, link: Link) -> Link:
        """
        Insert a new link if its code is not taken.

        Returns:
            Link: The stored record.

        Raises:
            CodeConflict: The code already exists.
            StoreUnavailable: The store could not be reached.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_code(self, code: str) -> Optional[Link]:
        """
        Retrieve a link by its short code.

        Returns:
            Optional[Link]: The record or None.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def increment_clicks_and_touch(self, code: str, timestamp: datetime) -> Link:
        """
        Atomically add one click and set `last_clicked` to `timestamp`.

        Returns:
            Link: The updated record.

        Raises:
            LinkNotFound: The code does not exist (e.g. deleted meanwhile).
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def list_all(self) -> List[Link]:
        """Return every link, newest `created_at` first."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_by_code(self, code: str) -> None:
        """
        Remove a link.

        Raises:
            LinkNotFound: The code does not exist.
        """
        raise NotImplementedError
