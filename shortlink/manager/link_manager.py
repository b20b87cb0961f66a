"""
LinkManager module for shortlink.

Responsibilities:
    - Validate target URLs (absolute, http/https only)
    - Validate custom codes (6-8 alphanumeric chars, case-sensitive)
    - Allocate random codes with a bounded collision-retry budget
    - Persist new links through the injected storage backend

Design notes:
    - A pre-check (`find_by_code`) keeps retries cheap under normal load, but
      the store's unique insert is what actually guarantees uniqueness. A
      race that slips past the pre-check shows up as `CodeConflict` on insert.
    - Custom codes are never retried: a conflict is `CodeAlreadyExists`.
    - Generated codes: pre-check hits and insert conflicts both spend one
      attempt; when the budget is gone the caller gets
      `CodeAllocationExhausted`.
    - The manager keeps no mutable state of its own, so one instance can serve
      any number of concurrent requests.
"""

import logging
from typing import List, Optional
from urllib.parse import urlsplit

from ..config import settings
from ..errors import (
    CodeAllocationExhausted,
    CodeAlreadyExists,
    CodeConflict,
    InvalidCodeFormat,
    InvalidURL,
    LinkNotFound,
)
from ..models import Link, utcnow
from ..storage.base import BaseStorage
from .codegen import CodeGenerator, is_valid_code

log = logging.getLogger("shortlink.manager")

ALLOWED_SCHEMES = {"http", "https"}


def validate_url(url) -> str:
    """
    Check that `url` is an absolute http(s) URL and return it stripped.

    Raises:
        InvalidURL: Not a string, unparsable, relative, hostless, or a
            scheme other than http/https.
    """
    if not isinstance(url, str):
        raise InvalidURL()
    url = url.strip()
    try:
        parsed = urlsplit(url)
        # Accessing .port validates the port component.
        parsed.port
    except ValueError as exc:
        raise InvalidURL() from exc
    if not parsed.scheme:
        raise InvalidURL()
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURL("URL must use http or https")
    if not parsed.netloc or not parsed.hostname:
        raise InvalidURL()
    if any(ch.isspace() for ch in parsed.netloc):
        raise InvalidURL()
    return url


def validate_code(code) -> str:
    """
    Check a custom code against ^[A-Za-z0-9]{6,8}$ and return it unchanged.

    Raises:
        InvalidCodeFormat: If the code does not match.
    """
    if not is_valid_code(code):
        raise InvalidCodeFormat()
    return code


class LinkManager:
    """Coordinates validation and code allocation for new links."""

    def __init__(
        self,
        storage: BaseStorage,
        generator: Optional[CodeGenerator] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Args:
            storage (BaseStorage): Backend storage instance.
            generator (Optional[CodeGenerator]): Random code source (optional).
            max_attempts (Optional[int]): Generated-code attempts before giving up;
                defaults to settings.CODE_MAX_ATTEMPTS.
        """
        self.storage = storage
        self.generator = generator or CodeGenerator()
        self.max_attempts = max_attempts if max_attempts is not None else settings.CODE_MAX_ATTEMPTS
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create_link(self, url: str, code: Optional[str] = None) -> Link:
        """
        Create a link for `url`, using `code` when given or a random one otherwise.

        Rules:
            - URL must be absolute with scheme http/https.
            - A custom code (blank counts as absent) must match
              ^[A-Za-z0-9]{6,8}$ and is stored exactly as given.
            - Custom code already taken -> CodeAlreadyExists (no retry).
            - Generated code: up to `max_attempts` candidates; each is
              pre-checked, then inserted; collisions spend an attempt.

        Returns:
            Link: The stored record (0 clicks, never clicked).

        Raises:
            InvalidURL, InvalidCodeFormat, CodeAlreadyExists,
            CodeAllocationExhausted, StoreUnavailable.
        """
        url = validate_url(url)

        if isinstance(code, str):
            code = code.strip()
        if code:
            return self._create_custom(url, validate_code(code))
        if code is not None and not isinstance(code, str):
            raise InvalidCodeFormat()
        return self._create_generated(url)

    def get_link(self, code: str) -> Link:
        """Return the link for `code` or raise LinkNotFound."""
        link = self.storage.find_by_code(code) if is_valid_code(code) else None
        if link is None:
            raise LinkNotFound(code)
        return link

    def list_links(self) -> List[Link]:
        """All links, newest first."""
        return self.storage.list_all()

    def delete_link(self, code: str) -> None:
        """Delete the link for `code`; LinkNotFound if there is none."""
        if not is_valid_code(code):
            raise LinkNotFound(code)
        self.storage.delete_by_code(code)
        log.info("Deleted link %s", code)

    # ---------------------------------------------------------------------
    # Allocation paths
    # ---------------------------------------------------------------------
    def _create_custom(self, url: str, code: str) -> Link:
        try:
            link = self.storage.insert_unique(Link(code=code, url=url, created_at=utcnow()))
        except CodeConflict as exc:
            log.info("Custom code %s already taken", code)
            raise CodeAlreadyExists() from exc
        log.info("Created link %s (custom) -> %s", link.code, link.url)
        return link

    def _create_generated(self, url: str) -> Link:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generator.candidate()
            if self.storage.find_by_code(candidate) is not None:
                log.debug("Attempt %d: code %s exists", attempt, candidate)
                continue
            try:
                link = self.storage.insert_unique(Link(code=candidate, url=url, created_at=utcnow()))
            except CodeConflict:
                # Lost a race against a concurrent insert.
                log.debug("Attempt %d: code %s conflicted on insert", attempt, candidate)
                continue
            log.info("Created link %s (generated, attempt %d) -> %s", link.code, attempt, link.url)
            return link

        log.warning("Code allocation exhausted after %d attempts", self.max_attempts)
        raise CodeAllocationExhausted()
