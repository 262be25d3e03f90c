"""
Paste domain record, timestamp encoding and the availability predicate.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def to_epoch_ms(moment: datetime) -> int:
    """Convert an aware datetime to integer epoch milliseconds."""
    return (moment - EPOCH) // _ONE_MS


def from_epoch_ms(value: int) -> datetime:
    """Convert integer epoch milliseconds to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=int(value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: Optional[datetime]) -> Optional[str]:
    """
    Format a timestamp as ISO 8601 UTC with millisecond precision.

    Returns:
        e.g. "2026-01-01T00:01:00.000Z", or None if moment is None
    """
    if moment is None:
        return None
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


@dataclass(frozen=True)
class Paste:
    """A stored paste as read from the backend."""

    id: str
    content: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    max_views: Optional[int] = None
    view_count: int = 0

    @property
    def remaining_views(self) -> Optional[int]:
        if self.max_views is None:
            return None
        return max(0, self.max_views - self.view_count)

    def to_record(self) -> Dict[str, str]:
        """Encode as a flat hash of strings; absent limits are omitted."""
        record = {
            "content": self.content,
            "created_at": str(to_epoch_ms(self.created_at)),
            "view_count": str(self.view_count),
        }
        if self.expires_at is not None:
            record["expires_at"] = str(to_epoch_ms(self.expires_at))
        if self.max_views is not None:
            record["max_views"] = str(self.max_views)
        return record

    @classmethod
    def from_record(cls, paste_id: str, record: Dict[str, str]) -> "Paste":
        """Decode a hash produced by to_record(). Empty strings mean absent."""
        expires_at = record.get("expires_at")
        max_views = record.get("max_views")
        return cls(
            id=paste_id,
            content=record["content"],
            created_at=from_epoch_ms(int(record["created_at"])),
            expires_at=from_epoch_ms(int(expires_at)) if expires_at else None,
            max_views=int(max_views) if max_views else None,
            view_count=int(record.get("view_count") or 0),
        )


def is_available(paste: Paste, now: datetime) -> bool:
    """
    Decide whether a paste may still be served at `now`.

    Expiry is inclusive: at now == expires_at the paste is gone. The
    max_views-th view is the last one served.
    """
    if paste.expires_at is not None and now >= paste.expires_at:
        return False
    if paste.max_views is not None and paste.view_count >= paste.max_views:
        return False
    return True
