# turf_api/repository.py
from __future__ import annotations

import threading
from contextlib import ExitStack
from typing import Callable, Dict, List

from turf_api.models import Match


class MatchNotFoundError(KeyError):
    """Raised when a match id is not in the repository."""
    pass


class MatchRepository:
    """
    In-memory match store (single-instance deploys).

    Writers for the same match id are serialized: update() holds that match's
    lock across read -> compute -> store, so two balls can never be computed
    from the same stale snapshot. Stored Match objects are never mutated;
    every write replaces the snapshot.
    """

    def __init__(self) -> None:
        self._matches: Dict[str, Match] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, match_id: str) -> threading.Lock:
        with self._guard:
            if match_id not in self._matches:
                raise MatchNotFoundError(match_id)
            return self._locks.setdefault(match_id, threading.Lock())

    def add(self, match: Match) -> Match:
        with self._guard:
            if match.match_id in self._matches:
                raise ValueError(f"Match {match.match_id} already exists")
            self._matches[match.match_id] = match
            self._locks[match.match_id] = threading.Lock()
        return match

    def get(self, match_id: str) -> Match:
        with self._guard:
            match = self._matches.get(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        return match

    def list(self) -> List[Match]:
        """Newest first."""
        with self._guard:
            matches = list(self._matches.values())
        return sorted(matches, key=lambda m: m.created_at, reverse=True)

    def delete(self, match_id: str) -> Match:
        lock = self._lock_for(match_id)
        with lock:
            with self._guard:
                match = self._matches.pop(match_id, None)
                self._locks.pop(match_id, None)
        if match is None:
            raise MatchNotFoundError(match_id)
        return match

    def update(self, match_id: str, fn: Callable[[Match], Match]) -> Match:
        """
        Replace the stored match with fn(current). If fn raises, nothing is stored.
        """
        lock = self._lock_for(match_id)
        with lock:
            current = self.get(match_id)
            updated = fn(current)
            with self._guard:
                if match_id not in self._matches:
                    raise MatchNotFoundError(match_id)
                self._matches[match_id] = updated
        return updated

    def rewrite_all(self, fn: Callable[[List[Match]], List[Match]]) -> List[Match]:
        """
        Batch rewrite over every stored match, holding all match locks
        (acquired in id order) so live scoring cannot interleave.
        fn must return the matches in the order it received them.
        """
        with self._guard:
            ids = sorted(self._matches)
            locks = [self._locks.setdefault(i, threading.Lock()) for i in ids]

        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)

            with self._guard:
                # a match deleted before we got its lock drops out here
                current = [self._matches[i] for i in ids if i in self._matches]
            rewritten = fn(current)
            if len(rewritten) != len(current):
                raise ValueError("Rewrite must return one match per input match")

            with self._guard:
                for old, new in zip(current, rewritten):
                    if old.match_id in self._matches:
                        self._matches[old.match_id] = new
        return rewritten

    def clear(self) -> None:
        with self._guard:
            self._matches.clear()
            self._locks.clear()
