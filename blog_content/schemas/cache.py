"""Cache entry schema persisted by the content cache stores."""

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Cached markdown body with its write time in epoch milliseconds."""

    content: str
    timestamp: int = Field(..., ge=0)

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp
