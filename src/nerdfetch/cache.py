"""
Listing cache for nerdfetch.

Keeps the last fetched font listing in a single JSON file so repeated runs
within the TTL window skip the GitHub API round-trip.
"""

import json
import os
import tempfile
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests

from nerdfetch.constants import CACHE_FILE_NAME, CACHE_TTL_SECONDS
from nerdfetch.exceptions import ListingFetchError
from nerdfetch.listing import FontAsset, fetch_font_assets
from nerdfetch.log_utils import logger


@dataclass
class CacheRecord:
    """A persisted listing and the UNIX time (seconds) it was fetched at."""

    timestamp: float
    entries: List[FontAsset] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CacheRecord"]:
        """Build a record from decoded JSON, or return None when the shape is wrong."""
        if not isinstance(data, dict):
            return None
        timestamp = data.get("timestamp")
        entries = data.get("entries")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            return None
        if not isinstance(entries, list):
            return None
        fonts = []
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
                return None
            fonts.append(FontAsset(name=entry["name"]))
        return cls(timestamp=float(timestamp), entries=fonts)


@dataclass
class ListingResult:
    """
    Outcome of a listing request.

    `error` is set when the remote fetch failed and the entries fell back to an
    empty list; `from_cache` tells whether the entries came from a fresh record.
    """

    entries: List[FontAsset]
    from_cache: bool = False
    error: Optional[str] = None


def default_cache_path() -> str:
    return os.path.join(tempfile.gettempdir(), CACHE_FILE_NAME)


class ListingCache:
    """
    Single-slot store for the font listing.

    The record is written in full on every successful fetch and considered absent
    once it is older than `ttl` seconds. There is no locking: concurrent writers
    simply overwrite each other.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.path = path or default_cache_path()
        self.ttl = ttl
        self.clock = clock

    def read(self) -> Optional[CacheRecord]:
        """
        Load the persisted record.

        Returns:
            CacheRecord | None: The record, or None if the file is missing, empty,
            unreadable, or not shaped like a cache record.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read listing cache {self.path}: {e}")
            return None

        if not content.strip():
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.debug(f"Ignoring malformed listing cache {self.path}: {e}")
            return None
        return CacheRecord.from_dict(data)

    def write(self, record: CacheRecord) -> bool:
        """
        Replace the cache file with `record`.

        The JSON is written to a temporary file in the same directory and moved over
        the target, so readers never see a half-written file.

        Returns:
            bool: True if the record was persisted, False on any I/O error.
        """
        directory = os.path.dirname(self.path) or "."
        try:
            os.makedirs(directory, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=directory, prefix="tmp-", suffix=".json"
            )
        except OSError as e:
            logger.error(f"Could not create temporary file for {self.path}: {e}")
            return False

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as temp_f:
                json.dump(record.to_dict(), temp_f)
            os.replace(temp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Could not write listing cache {self.path}: {e}")
            return False
        finally:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
        return True

    def is_fresh(self, timestamp: float) -> bool:
        """Return True while `now - timestamp` is within the TTL (inclusive)."""
        return self.clock() - timestamp <= self.ttl


def get_listing(
    cache: Optional[ListingCache] = None,
    fetcher: Optional[Callable[[], List[FontAsset]]] = None,
) -> ListingResult:
    """
    Return the font listing, served from the cache when it is fresh.

    On a miss or stale record the fetcher is called and its result persisted with
    the current time. A failed fetch is logged and yields an empty listing with
    `error` set; callers treat it the same as an empty release.

    Parameters:
        cache (ListingCache | None): Store to use; the default temp-file cache when omitted.
        fetcher (Callable | None): Zero-argument callable returning the remote listing;
            defaults to `fetch_font_assets`.
    """
    cache = cache or ListingCache()
    fetcher = fetcher or fetch_font_assets

    record = cache.read()
    if record is not None and cache.is_fresh(record.timestamp):
        age = cache.clock() - record.timestamp
        logger.debug(
            "Using cached font listing (%d entries, cached %.0fs ago)",
            len(record.entries),
            age,
        )
        return ListingResult(entries=list(record.entries), from_cache=True)

    if record is not None:
        logger.debug("Cached font listing is stale; refreshing")

    try:
        entries = list(fetcher())
    except (ListingFetchError, requests.RequestException) as e:
        logger.error(f"Error fetching available fonts: {e}")
        return ListingResult(entries=[], error=str(e))

    if not cache.write(CacheRecord(timestamp=cache.clock(), entries=entries)):
        logger.warning(
            "Font listing could not be cached; it will be fetched again next run"
        )
    return ListingResult(entries=entries)
