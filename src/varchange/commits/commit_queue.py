"""Blocking, closable commit queue between an extractor and the analyzer."""

from __future__ import annotations

import threading
from collections import deque
from typing import Iterable, Optional

from ..logging_config import get_logger
from .models import Commit

logger = get_logger(__name__)


class CommitQueue:
    """Bounded FIFO of commits with an explicit end-of-stream.

    The producer calls :meth:`put` for every commit and :meth:`close` when
    done. The consumer calls :meth:`get`, which blocks while the queue is
    empty but open and returns ``None`` once it is closed and drained.
    """

    def __init__(self, maxsize: int = 100) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._maxsize = maxsize
        self._items: deque[Commit] = deque()
        self._closed = False
        self._cond = threading.Condition()

    @property
    def is_open(self) -> bool:
        with self._cond:
            return not self._closed

    def put(self, commit: Commit) -> None:
        """Append a commit, blocking while the queue is full."""
        with self._cond:
            if self._closed:
                raise RuntimeError("cannot put into a closed CommitQueue")
            while len(self._items) >= self._maxsize:
                self._cond.wait()
            self._items.append(commit)
            self._cond.notify_all()

    def close(self) -> None:
        """Mark end of stream; wakes any waiting consumer."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def get(self) -> Optional[Commit]:
        """Next commit, or None once the queue is closed and empty."""
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if not self._items:
                return None
            commit = self._items.popleft()
            self._cond.notify_all()
            return commit

    def __iter__(self):
        while True:
            commit = self.get()
            if commit is None:
                return
            yield commit

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)


def feed_queue(commits: Iterable[Commit], queue: CommitQueue) -> int:
    """Put every commit into ``queue`` and close it, even on failure.

    Returns the number of commits queued.
    """
    count = 0
    try:
        for commit in commits:
            queue.put(commit)
            count += 1
    finally:
        logger.debug("Queued %d commits", count)
        queue.close()
    return count
