"""Work bookkeeping for the prime search server."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections import deque
from pathlib import Path
from typing import Iterable

from .fileio import PRIME_FILE, RANGE_FILE, read_ranges, write_primes, write_ranges

Range = tuple[int, int]

SEARCH_SIZE = 100


class ServerInterface(ABC):
    """What the networking side needs from the server."""

    @abstractmethod
    def request_work(self) -> Range:
        """Hand out the next range to search."""

    @abstractmethod
    def work_failed(self, search_range: Range) -> None:
        """Take back a range whose search did not complete."""

    @abstractmethod
    def primes_received(self, primes: list[int], search_range: Range | None) -> None:
        """Record the primes found in a searched range."""


def merge_ranges(ranges: Iterable[Range]) -> list[Range]:
    """Merge overlapping or adjacent inclusive ranges into a sorted list."""
    merged: list[list[int]] = []
    for low, high in sorted(ranges):
        if merged and low <= merged[-1][1] + 1:
            merged[-1][1] = max(merged[-1][1], high)
        else:
            merged.append([low, high])
    return [(low, high) for low, high in merged]


def normalize_ranges(ranges: Iterable[Range]) -> tuple[list[Range], list[Range]]:
    """Merge searched ranges and list the gaps between them.

    Returns the merged ranges and the unsearched gaps, both ascending.
    """
    merged = merge_ranges(ranges)
    gaps = [(prev[1] + 1, cur[0] - 1) for prev, cur in zip(merged, merged[1:])]
    return merged, gaps


class ServerLogic(ServerInterface):
    """Hands out ranges to search and keeps track of results.

    Ranges waiting to be handed out sit in ``work_queue`` (the next one at
    the right end), ranges handed out but not returned sit in
    ``in_progress``, and finished ranges in ``searched``.
    """

    def __init__(
        self,
        ranges_path: str | Path = RANGE_FILE,
        primes_path: str | Path = PRIME_FILE,
        search_size: int = SEARCH_SIZE,
    ) -> None:
        self.ranges_path = Path(ranges_path)
        self.primes_path = Path(primes_path)
        self.search_size = search_size
        self.work_queue: deque[Range] = deque()
        self.in_progress: deque[Range] = deque()
        self.searched: deque[Range] = deque()
        self.primes: list[int] = []
        self.largest_searched = 0
        self._lock = threading.RLock()

    def start(self) -> bool:
        """Load saved progress and fill the work queue."""
        with open(self.primes_path, "a", encoding="utf-8"):
            pass
        with self._lock:
            merged, gaps = normalize_ranges(read_ranges(self.ranges_path))
            self.searched = deque(merged)
            for gap in gaps:
                self.work_queue.appendleft(gap)
            self.largest_searched = merged[-1][1]
            self._populate_work_queue()
        return True

    def stop(self) -> None:
        """Save searched ranges and found primes."""
        with self._lock:
            self.searched = deque(merge_ranges(self.searched))
            write_ranges(self.ranges_path, self.searched)
            write_primes(self.primes_path, self.primes)
            self.primes = []

    def _populate_work_queue(self) -> None:
        size = len(self.work_queue)
        new_size = 10 if size < 5 else size * 2
        for _ in range(size, new_size):
            low = self.largest_searched + 1
            self.largest_searched += self.search_size
            self.work_queue.appendleft((low, self.largest_searched))

    def request_work(self) -> Range:
        with self._lock:
            if not self.work_queue:
                raise RuntimeError("work queue is empty; call start() first")
            search_range = self.work_queue.pop()
            self.in_progress.appendleft(search_range)
            if len(self.work_queue) < 10:
                self._populate_work_queue()
            return search_range

    def work_failed(self, search_range: Range) -> None:
        with self._lock:
            search_range = tuple(search_range)
            if search_range in self.in_progress:
                self.in_progress.remove(search_range)
                self.work_queue.append(search_range)

    def primes_received(self, primes: list[int], search_range: Range | None) -> None:
        with self._lock:
            if search_range is not None:
                search_range = tuple(search_range)
                if search_range in self.in_progress:
                    self.in_progress.remove(search_range)
                    self.searched.appendleft(search_range)
            self.primes.extend(primes)