import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

DEFAULT_TTL_SECONDS = 15 * 60


@dataclass
class CacheResult:
    value: Optional[str]
    hit: bool
    age_seconds: Optional[int]
    stale: bool


@dataclass(frozen=True)
class CacheEntry:
    value: str
    created_at: float


class ResponseCache:
    """
    Process-lifetime store for generated text:
      key -> CacheEntry(value, created_at)

    Expiry is lazy: an entry older than the TTL is purged by the read that
    observes it. There is no background sweep and no size bound.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def lookup(self, key: str) -> CacheResult:
        entry = self._entries.get(key)
        if entry is None:
            return CacheResult(value=None, hit=False, age_seconds=None, stale=False)

        age = self.clock() - entry.created_at
        if age > self.ttl_seconds:
            self._entries.pop(key, None)
            return CacheResult(value=None, hit=False, age_seconds=None, stale=False)
        return CacheResult(value=entry.value, hit=True, age_seconds=max(0, int(age)), stale=False)

    def get(self, key: str) -> Optional[str]:
        return self.lookup(key).value

    def set(self, key: str, value: str) -> None:
        self._entries[key] = CacheEntry(value=value, created_at=self.clock())

    def __contains__(self, key: str) -> bool:
        # Raw presence; does not apply expiry.
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def advice_key(city: str) -> str:
    return f"travel_{city.lower()}"


def verdict_key(city_a: str, city_b: str) -> str:
    # Order sensitive: (A, B) and (B, A) are separate entries.
    return f"compare_{city_a.lower()}_{city_b.lower()}"
