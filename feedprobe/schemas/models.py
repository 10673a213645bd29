from typing import Any, Optional

from pydantic import BaseModel, Field

NO_RSS_FEED = "NO_RSS_FEED"


class Site(BaseModel):
    """One record of the site list; ``feed`` is stored under the ``rss`` key."""

    url: str
    feed: Optional[str] = Field(default=None, alias="rss")

    class Config:
        extra = "allow"

    def needs_probe(self) -> bool:
        return not self.feed or self.feed == NO_RSS_FEED

    def to_record(self) -> dict[str, Any]:
        record = self.model_dump(by_alias=True)
        if not record.get("rss"):
            record.pop("rss", None)
        return record
