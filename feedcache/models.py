"""
Domain models referenced by the feed cache.

Videos arrive from the instance API layer and accounts from the account
provider; both are external to the cache, which only needs to round-trip
videos and read an account's feed cache key.
"""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CacheModel(BaseModel):
    """Shared settings: camelCase on the wire, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Thumbnail(_CacheModel):
    """A single thumbnail rendition."""
    url: str
    quality: str = "default"


class ChannelRef(_CacheModel):
    """Channel a video belongs to."""
    id: str = ""
    name: str = ""
    thumbnail_url: Optional[str] = None
    subscriptions_count: Optional[int] = None


class Video(_CacheModel):
    """A feed item."""
    video_id: str
    title: str = ""
    author: str = ""
    length: float = 0.0  # seconds
    published: str = ""  # display string from the instance, e.g. "2 days ago"
    views: int = 0
    description: Optional[str] = None
    genre: Optional[str] = None
    channel: ChannelRef = Field(default_factory=ChannelRef)
    thumbnails: List[Thumbnail] = Field(default_factory=list)
    live: bool = False
    upcoming: bool = False
    short: bool = False
    published_at: Optional[datetime] = None
    likes: Optional[int] = None
    dislikes: Optional[int] = None
    keywords: List[str] = Field(default_factory=list)
    app: Optional[str] = None
    instance_url: Optional[str] = None


@runtime_checkable
class FeedAccount(Protocol):
    """Anything that can partition the feed cache."""

    @property
    def feed_cache_key(self) -> str:
        ...


class Account(BaseModel):
    """An account on a video instance."""
    id: str
    instance_url: str = ""
    name: str = ""

    @property
    def feed_cache_key(self) -> str:
        # Never ends in "-feedTime" as long as ids don't
        return f"feed-{self.instance_url}-{self.id}"
