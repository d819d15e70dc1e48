"""Tag-addressable query cache with explicit invalidation.

Keys are tuples such as `("quizzes", "detail", "<id>")`. Invalidation
and removal take a key prefix and apply to every entry whose key starts
with it, so `("quizzes",)` addresses the whole quiz key space while
`("quizzes", "list")` addresses only list entries.

Reads go through `QueryCache.fetch`, which returns a `QueryState`
snapshot describing the entry (`idle`, `loading`, `success` or `error`).
Writes go through `Mutation`, whose `on_success` callback is where
callers invalidate the keys the write made stale.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger("quizweb.cache")

Key = Tuple[Any, ...]


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class QueryState:
    """Snapshot of one cache entry."""
    key: Key
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Optional[BaseException] = None
    updated_at: float = 0.0
    stale: bool = False

    @property
    def is_idle(self) -> bool:
        return self.status is QueryStatus.IDLE

    @property
    def is_loading(self) -> bool:
        return self.status is QueryStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "message", None) or str(self.error)


def _matches(key: Key, prefix: Key) -> bool:
    return key[:len(prefix)] == prefix


class QueryCache:
    """Read-through cache keyed by tuples.

    `ttl_seconds` bounds how long a successful entry is reused; `None`
    keeps entries until they are invalidated, `0` refetches every time.
    At most `max_entries` entries are kept: each write first drops error
    and expired entries, then the least recently updated ones. Entries
    still loading are never dropped.

    Every fetch, `set_data` and `remove` gives the key a new generation
    token; a fetch whose token was replaced or dropped meanwhile does not
    store its result. A fetch that finishes after its key was invalidated
    stores the result still marked stale.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 500,
    ):
        self._entries: Dict[Key, QueryState] = {}
        self._generations: Dict[Key, int] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, state: QueryState) -> bool:
        if self._ttl_seconds is None:
            return False
        return (self._clock() - state.updated_at) >= self._ttl_seconds

    def _is_fresh(self, state: QueryState) -> bool:
        if state.status is not QueryStatus.SUCCESS or state.stale:
            return False
        return not self._is_expired(state)

    def _drop(self, key: Key) -> None:
        del self._entries[key]
        self._generations.pop(key, None)

    def _cleanup(self, keep: Key) -> None:
        """Trim the store under the lock; `keep` is the key being written."""
        for key, state in list(self._entries.items()):
            if key == keep or state.status is QueryStatus.LOADING:
                continue
            if state.status is QueryStatus.ERROR or (state.status is QueryStatus.SUCCESS and self._is_expired(state)):
                self._drop(key)
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return
        # oldest finished entries go first
        candidates = sorted(
            (s for k, s in self._entries.items() if k != keep and s.status is not QueryStatus.LOADING),
            key=lambda s: s.updated_at,
        )
        for state in candidates[:overflow]:
            self._drop(state.key)
            logger.debug("cache_evicted key=%s", state.key)

    def get(self, key) -> Optional[QueryState]:
        with self._lock:
            state = self._entries.get(tuple(key))
            return replace(state) if state else None

    def fetch(self, key, fn: Callable[[], Any], *, enabled: bool = True, retry: int = 0) -> QueryState:
        """Return the cached entry for `key`, calling `fn` when it is missing or stale.

        A disabled query returns an idle state and never calls `fn`.
        Exceptions raised by `fn` are recorded on the returned state after
        `retry` extra attempts.
        """
        key = tuple(key)
        if not enabled:
            return QueryState(key=key)
        with self._lock:
            current = self._entries.get(key)
            if current and self._is_fresh(current):
                return replace(current)
            generation = next(self._tokens)
            self._generations[key] = generation
            self._entries[key] = QueryState(
                key=key,
                status=QueryStatus.LOADING,
                data=current.data if current else None,
                updated_at=current.updated_at if current else 0.0,
            )
            self._cleanup(keep=key)

        attempts = 0
        while True:
            try:
                state = QueryState(key=key, status=QueryStatus.SUCCESS, data=fn(), updated_at=self._clock())
                break
            except Exception as exc:
                attempts += 1
                if attempts > retry:
                    logger.debug("query_failed key=%s attempts=%d error=%s", key, attempts, exc)
                    state = QueryState(key=key, status=QueryStatus.ERROR, error=exc, updated_at=self._clock())
                    break

        with self._lock:
            current = self._entries.get(key)
            if self._generations.get(key) == generation and current is not None:
                state.stale = current.stale
                self._entries[key] = state
                self._cleanup(keep=key)
            else:
                logger.debug("query_superseded key=%s generation=%d", key, generation)
        return replace(state)

    def set_data(self, key, data: Any) -> None:
        """Store `data` for `key` as a fresh successful entry."""
        key = tuple(key)
        with self._lock:
            self._generations[key] = next(self._tokens)
            self._entries[key] = QueryState(key=key, status=QueryStatus.SUCCESS, data=data, updated_at=self._clock())
            self._cleanup(keep=key)

    def invalidate(self, prefix) -> int:
        """Mark every entry under `prefix` stale so the next fetch reloads it.

        Entries still loading keep the mark once their fetch lands.
        Returns the number of entries marked.
        """
        prefix = tuple(prefix)
        count = 0
        with self._lock:
            for key, state in self._entries.items():
                if _matches(key, prefix):
                    state.stale = True
                    count += 1
        return count

    def remove(self, prefix) -> int:
        """Drop every entry under `prefix`; returns how many were dropped."""
        prefix = tuple(prefix)
        with self._lock:
            doomed = [key for key in self._entries if _matches(key, prefix)]
            for key in doomed:
                self._drop(key)
        return len(doomed)

    def clear(self) -> None:
        self.remove(())


@dataclass
class MutationState:
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "message", None) or str(self.error)


class Mutation:
    """A write with its own status and a success hook.

    `on_success(data, *args, **kwargs)` runs only after `fn` returned.
    Failures are recorded on `state` and re-raised to the caller.
    """

    def __init__(self, fn: Callable[..., Any], on_success: Optional[Callable[..., Any]] = None):
        self._fn = fn
        self._on_success = on_success
        self.state = MutationState()

    def mutate(self, *args, **kwargs) -> Any:
        self.state = MutationState(status=QueryStatus.LOADING)
        try:
            data = self._fn(*args, **kwargs)
        except Exception as exc:
            self.state = MutationState(status=QueryStatus.ERROR, error=exc)
            raise
        if self._on_success is not None:
            self._on_success(data, *args, **kwargs)
        self.state = MutationState(status=QueryStatus.SUCCESS, data=data)
        return data

    def reset(self) -> None:
        self.state = MutationState()
