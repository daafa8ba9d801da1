"""Search for primes over inclusive ranges of integers."""

from __future__ import annotations

from dataclasses import dataclass, field
from math import isqrt


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    return all(n % d for d in range(2, isqrt(n) + 1))


def find_primes(low: int, high: int) -> list[int]:
    """Return the primes in the inclusive range ``low..high`` in ascending order."""
    return [n for n in range(low, high + 1) if _is_prime(n)]


@dataclass
class PrimeSearch:
    """A worker that searches a range and holds the primes found until taken."""

    search_range: tuple[int, int] | None = None
    primes: list[int] = field(default_factory=list)
    in_progress: bool = False
    primes_to_send: bool = False

    def new_range(self, search_range: tuple[int, int]) -> None:
        """Set the inclusive range that the next search covers."""
        low, high = search_range
        self.search_range = (low, high)

    def search(self) -> None:
        """Search the current range, adding its primes to those held."""
        if self.search_range is None:
            raise ValueError("no search range has been set")
        self.in_progress = True
        try:
            self.primes.extend(find_primes(*self.search_range))
        finally:
            self.in_progress = False
        self.primes_to_send = True

    def take_primes(self) -> list[int]:
        """Return the primes held and forget them."""
        taken, self.primes = self.primes, []
        self.primes_to_send = False
        return taken