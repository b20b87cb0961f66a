"""
Random short-code generation for shortlink.

Codes are drawn uniformly from the 62-character alphanumeric alphabet. The
length of each auto-generated candidate is itself random in
[CODE_MIN_LENGTH, CODE_MAX_LENGTH] (6..8 by default), so generated codes
cover the same space that custom codes are allowed to use.

Common helpers:
- ALPHABET: A-Z, a-z, 0-9
- CODE_PATTERN / is_valid_code: the one code format accepted everywhere

Notes:
- Generators hold no shared mutable state apart from their RNG; uniqueness is
  the store's job (unique key + bounded retry in the manager).
- Pass a seeded `random.Random` as `rng` for reproducible tests.
"""

import random
import re
import string
from dataclasses import dataclass, field
from typing import Optional

from ..config import settings

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
CODE_PATTERN = re.compile(r"^[A-Za-z0-9]{6,8}$")


def is_valid_code(code) -> bool:
    """True if `code` is a string of 6-8 ASCII letters or digits."""
    return isinstance(code, str) and CODE_PATTERN.fullmatch(code) is not None


@dataclass
class CodeGenerator:
    """Produces random candidate codes of bounded, per-attempt random length."""

    min_length: int = field(default_factory=lambda: settings.CODE_MIN_LENGTH)
    max_length: int = field(default_factory=lambda: settings.CODE_MAX_LENGTH)
    rng: Optional[random.Random] = None

    def __post_init__(self):
        if self.min_length < 1:
            raise ValueError("min_length must be >= 1")
        if self.max_length < self.min_length:
            raise ValueError("max_length must be >= min_length")
        if self.rng is None:
            self.rng = random.SystemRandom()

    def generate(self, length: int) -> str:
        """Return exactly `length` characters drawn uniformly from ALPHABET."""
        if length < 1:
            raise ValueError("length must be >= 1")
        return "".join(self.rng.choice(ALPHABET) for _ in range(length))

    def random_length(self) -> int:
        return self.rng.randint(self.min_length, self.max_length)

    def candidate(self) -> str:
        """One auto-generated code; the length is re-drawn on every call."""
        return self.generate(self.random_length())
