"""
Storage module for shortlink (in-memory implementation).

Responsibilities:
    - Insert links under a unique code
    - Look links up by code
    - Count clicks and stamp the last click time atomically
    - List (newest first) and delete links

Design:
    - In-memory reference implementation of the BaseStorage contract, used by
      default and by the test suite.
    - A single lock guards the dict, so each primitive is atomic even when
      the app runs request handlers on a thread pool.
    - Links are frozen dataclasses; callers get snapshots and cannot mutate
      stored state behind the lock's back.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from ..errors import CodeConflict, LinkNotFound
from ..models import Link
from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.links = {code: Link}
        """
        self.links: Dict[str, Link] = {}
        self._lock = threading.Lock()

    def insert_unique(self, link: Link) -> Link:
        """
        Insert `link` unless its code is already present.

        The existence test and the write happen under one lock acquisition,
        which is what a unique index gives a SQL backend.

        Raises:
            CodeConflict: The code is taken; the existing record is untouched.
        """
        with self._lock:
            if link.code in self.links:
                raise CodeConflict(link.code)
            self.links[link.code] = link
            return link

    def find_by_code(self, code: str) -> Optional[Link]:
        with self._lock:
            return self.links.get(code)

    def increment_clicks_and_touch(self, code: str, timestamp: datetime) -> Link:
        """
        Add one click to `code` and set its last-click time.

        Raises:
            LinkNotFound: If the code does not exist.
        """
        with self._lock:
            current = self.links.get(code)
            if current is None:
                raise LinkNotFound(code)
            updated = current.clicked(timestamp)
            self.links[code] = updated
            return updated

    def list_all(self) -> List[Link]:
        with self._lock:
            snapshot = list(self.links.values())
        # Newest first; code as a tie-breaker keeps equal timestamps stable.
        return sorted(snapshot, key=lambda link: (link.created_at, link.code), reverse=True)

    def delete_by_code(self, code: str) -> None:
        with self._lock:
            if self.links.pop(code, None) is None:
                raise LinkNotFound(code)
