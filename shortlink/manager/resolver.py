"""
Redirect resolution for shortlink.

`resolve` decides where a visitor goes; `record_click` counts the visit.
They are separate calls so the HTTP layer can send the 302 first and record
the click afterwards (FastAPI background task). Click recording is
best-effort: whatever goes wrong is logged and swallowed, and the redirect
that was already decided stands.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..errors import LinkNotFound, ShortlinkError
from ..models import utcnow
from ..storage.base import BaseStorage
from .codegen import is_valid_code

log = logging.getLogger("shortlink.resolver")


@dataclass(frozen=True)
class RedirectTarget:
    """Where to send the visitor. Always a temporary (302) redirect."""

    code: str
    url: str
    status_code: int = 302


class RedirectResolver:
    def __init__(self, storage: BaseStorage, clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.clock = clock or utcnow

    def resolve(self, code: str) -> RedirectTarget:
        """
        Look `code` up (fresh, uncached) and return its redirect target.

        Raises:
            LinkNotFound: Unknown or malformed code. Not an error condition;
                the caller answers 404.
        """
        link = self.storage.find_by_code(code) if is_valid_code(code) else None
        if link is None:
            raise LinkNotFound(code)
        return RedirectTarget(code=link.code, url=link.url)

    def record_click(self, code: str, at: Optional[datetime] = None) -> bool:
        """
        Best-effort atomic increment of `code`'s clicks and last-click time.

        Returns:
            bool: True if the click was stored, False if it was dropped.
                Never raises.
        """
        timestamp = at or self.clock()
        try:
            self.storage.increment_clicks_and_touch(code, timestamp)
        except LinkNotFound:
            log.warning("Click for %s dropped: link no longer exists", code)
            return False
        except ShortlinkError as exc:
            log.warning("Click for %s dropped: %s", code, exc)
            return False
        except Exception:
            log.exception("Click for %s dropped: unexpected storage error", code)
            return False
        return True

    def visit(self, code: str) -> RedirectTarget:
        """Resolve and record the click inline, for callers without a task runner."""
        target = self.resolve(code)
        self.record_click(target.code)
        return target
