"""
Feed cache service.

Stores the latest feed of each account together with the moment it was
written, so the refresh workflow can render from cache immediately and
decide on its own whether the feed is due for a network refresh.

Keys per account:
    <feed_cache_key>            {"videos": [<video>, ...]}   (at most `limit`)
    <feed_cache_key>-feedTime   {"date": "<ISO-8601>"}

The two keys are written one after the other, timestamp first. Concurrent
writers for the same account can leave a newer timestamp next to an older
payload (or the reverse) until the next write; readers must tolerate that.
"""

import logging
from datetime import datetime, timedelta, timezone
from itertools import islice
from typing import Callable, Iterable, List, Optional

from feedcache.cache.storage import Storage
from feedcache.codec import VideoCodec, default_codec
from feedcache.document import Document
from feedcache.models import FeedAccount, Video
from feedcache.utils.dates import format_iso8601, parse_iso8601, utc_now
from feedcache.utils.formatting import format_size

logger = logging.getLogger(__name__)

FEED_TIME_SUFFIX = "-feedTime"
DEFAULT_FEED_LIMIT = 30


def feed_time_cache_key(feed_cache_key: str) -> str:
    """Key of the timestamp entry that accompanies a feed."""
    return f"{feed_cache_key}{FEED_TIME_SUFFIX}"


class FeedCacheService:
    """
    Account feed cache.

    Holds no state of its own beyond the storage handle it is given. Every
    operation succeeds from the caller's point of view: reads degrade to
    "no data" and writes that fail are dropped.
    """

    def __init__(
        self,
        storage: Storage,
        limit: int = DEFAULT_FEED_LIMIT,
        codec: Optional[VideoCodec] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.storage = storage
        self.limit = limit
        self.codec = codec if codec is not None else default_codec
        self._clock = clock

    def store_feed(self, account: FeedAccount, videos: Iterable[Video]) -> None:
        key = account.feed_cache_key
        date = format_iso8601(self._clock())
        logger.info(f"caching feed {key} -- {date}")

        try:
            feed = Document({"videos": [self.codec.encode(video) for video in islice(videos, self.limit)]})
        except (ValueError, TypeError) as e:
            logger.warning(f"Not caching feed {key}: cannot encode videos: {e}")
            return

        # Write results are discarded on purpose: a lost write is a later cache miss.
        self.storage.set(feed_time_cache_key(key), Document({"date": date}))
        self.storage.set(key, feed)

    def retrieve_feed(self, account: FeedAccount) -> List[Video]:
        key = account.feed_cache_key
        logger.info(f"retrieving cache for {key}")

        document = self.storage.get(key)
        if document is None:
            return []

        items = document["videos"].array()
        if items is None:
            logger.debug(f"Cached feed {key} has no video list")
            return []

        videos = []
        for item in items:
            video = self.codec.decode(item)
            if video is not None:
                videos.append(video)
        return videos

    def get_feed_time(self, account: FeedAccount) -> Optional[datetime]:
        document = self.storage.get(feed_time_cache_key(account.feed_cache_key))
        if document is None:
            return None

        date = document["date"].string()
        if date is None:
            return None
        return parse_iso8601(date)

    def is_feed_stale(self, account: FeedAccount, max_age: timedelta) -> bool:
        """True when the feed was never cached or was cached more than max_age ago."""
        feed_time = self.get_feed_time(account)
        if feed_time is None:
            return True
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now - feed_time > max_age

    def clear_feed(self, account: FeedAccount) -> None:
        key = account.feed_cache_key
        self.storage.remove(key)
        self.storage.remove(feed_time_cache_key(key))

    def clear(self) -> None:
        self.storage.remove_all()

    def total_size(self) -> int:
        return self.storage.total_size()

    @property
    def total_size_formatted(self) -> str:
        return format_size(self.total_size())
