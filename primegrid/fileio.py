"""Persistence of searched ranges and found primes as plain text files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

RANGE_FILE = "../Ranges_Searched.txt"
PRIME_FILE = "../Primes_Found.txt"


def read_ranges(ranges_path: str | Path) -> list[tuple[int, int]]:
    """Read the ranges already searched, creating the file if it is missing.

    The file holds whitespace-separated pairs of integers. Reading stops at
    the first token that is not an unsigned integer; an incomplete final pair
    is ignored.  An empty result becomes ``[(1, 1)]``.
    """
    path = Path(ranges_path)
    if not path.exists():
        path.touch()
    tokens = path.read_text(encoding="utf-8").split()

    numbers: list[int] = []
    for token in tokens:
        if not token.isdigit():
            break
        numbers.append(int(token))

    ranges = list(zip(numbers[0::2], numbers[1::2]))
    return ranges or [(1, 1)]


def write_primes(primes_path: str | Path, primes: Iterable[int]) -> None:
    """Append primes to the primes file, one per line."""
    with open(primes_path, "a", encoding="utf-8") as stream:
        stream.writelines(f"{prime} \n" for prime in primes)


def write_ranges(ranges_path: str | Path, ranges: Iterable[tuple[int, int]]) -> None:
    """Replace the ranges file with the given ranges, one pair per line."""
    with open(ranges_path, "w", encoding="utf-8") as stream:
        stream.writelines(f"{low} {high}\n" for low, high in ranges)