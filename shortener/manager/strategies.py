"""
Alias generation strategies for the shortener service.

Provided strategies:
- RandomStrategy: fixed-length alias, each symbol drawn independently and
  uniformly from ALIAS_ALPHABET (a-z, A-Z, 0-9; 62 symbols)

Notes:
- Generators only propose candidates. Uniqueness is enforced by the store's
  atomic insert, and the allocator retries on conflict.
- The random source is a plain `random.Random`. Pass a seeded instance to get
  a reproducible candidate sequence in tests.
- With the default length of 6 there are 62**6 (about 5.7e10) aliases, so a
  repeated collision is negligible until the table holds billions of rows.
"""

import random
import string
from abc import ABC, abstractmethod
from typing import Optional

ALIAS_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
DEFAULT_ALIAS_LENGTH = 6


def new_random_string(length: int, rng: Optional[random.Random] = None) -> str:
    """Return `length` symbols drawn uniformly from ALIAS_ALPHABET."""
    if length <= 0:
        raise ValueError("length must be positive")
    rng = rng or random.Random()
    return "".join(rng.choice(ALIAS_ALPHABET) for _ in range(length))


class BaseStrategy(ABC):
    """Abstract base for alias candidate generators."""

    @abstractmethod
    def generate(self) -> str:
        """Return the next candidate alias."""
        raise NotImplementedError


class RandomStrategy(BaseStrategy):
    """Random aliases over ALIAS_ALPHABET; rely on storage-level uniqueness + retry."""

    def __init__(self, length: int = DEFAULT_ALIAS_LENGTH, rng: Optional[random.Random] = None):
        if length <= 0:
            raise ValueError("length must be positive")
        self.length = length
        self.rng = rng or random.Random()

    def generate(self) -> str:
        return new_random_string(self.length, self.rng)
