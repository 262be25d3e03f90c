"""
Paste store: creation, availability gating and view accounting.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from app.database import ConsumeStatus
from app.exceptions import (
    PasteNotAvailableError,
    PasteNotFoundError,
    StorageError,
    ValidationError,
)
from app.paste import Paste, from_epoch_ms, to_epoch_ms, utcnow

logger = logging.getLogger(__name__)

# Attempts at finding an unused id before giving up
MAX_ID_ATTEMPTS = 3


@dataclass(frozen=True)
class CreatedPaste:
    id: str
    created_at: datetime
    expires_at: Optional[datetime]


@dataclass(frozen=True)
class ConsumedPaste:
    """Result of a successful consuming read."""

    id: str
    content: str
    remaining_views: Optional[int]
    expires_at: Optional[datetime]
    view_count: int


def _validate_positive_int(field: str, value: Any) -> None:
    if value is None:
        return
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"{field} must be an integer >= 1")
    if value < 1:
        raise ValidationError(field, f"{field} must be an integer >= 1")


def validate_create_input(content: Any, ttl_seconds: Any, max_views: Any) -> None:
    """
    Check creation input.

    Raises:
        ValidationError: naming the first invalid field
    """
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("content", "content is required and must be a non-empty string")
    _validate_positive_int("ttl_seconds", ttl_seconds)
    _validate_positive_int("max_views", max_views)


def _is_handle(paste_id: str) -> bool:
    try:
        uuid.UUID(paste_id)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


class PasteStore:
    """Creates pastes and serves them while they remain available."""

    def __init__(self, backend):
        self.backend = backend

    def create(
        self,
        content: str,
        ttl_seconds: Optional[int] = None,
        max_views: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> CreatedPaste:
        """
        Create a new paste.

        Args:
            content: Text content, non-empty after trimming
            ttl_seconds: Optional time-to-live in seconds (>= 1)
            max_views: Optional maximum view count (>= 1)
            now: Creation instant; defaults to the system clock

        Returns:
            The new paste's id and timestamps

        Raises:
            ValidationError: If input is invalid
            StorageError: If the backend fails
        """
        validate_create_input(content, ttl_seconds, max_views)

        # Stored with millisecond precision; keep created_at equal to what is stored
        created_at = from_epoch_ms(to_epoch_ms(now or utcnow()))
        expires_at = None
        if ttl_seconds is not None:
            try:
                expires_at = created_at + timedelta(seconds=ttl_seconds)
            except OverflowError:
                raise ValidationError("ttl_seconds", "ttl_seconds is too large")

        for _ in range(MAX_ID_ATTEMPTS):
            paste = Paste(
                id=str(uuid.uuid4()),
                content=content,
                created_at=created_at,
                expires_at=expires_at,
                max_views=max_views,
            )
            if self.backend.insert(paste):
                logger.info(
                    f"Paste {paste.id} created (ttl_seconds={ttl_seconds}, max_views={max_views})"
                )
                return CreatedPaste(id=paste.id, created_at=created_at, expires_at=expires_at)
            logger.warning(f"Paste id collision on {paste.id}, retrying")

        raise StorageError("Could not allocate a unique paste id")

    def fetch_and_consume(self, paste_id: str, now: Optional[datetime] = None) -> ConsumedPaste:
        """
        Fetch a paste and count one view, if it is still available.

        Args:
            paste_id: Paste handle
            now: Instant the availability gates are evaluated at

        Returns:
            Content with remaining views and expiry

        Raises:
            PasteNotFoundError: If no paste has this handle
            PasteNotAvailableError: If the paste expired or used up its views
            StorageError: If the backend fails
        """
        if not _is_handle(paste_id):
            logger.info(f"Paste {paste_id!r} not found (malformed handle)")
            raise PasteNotFoundError(paste_id)

        status, paste = self.backend.consume(paste_id, to_epoch_ms(now or utcnow()))

        if status is ConsumeStatus.MISSING:
            logger.info(f"Paste {paste_id} not found")
            raise PasteNotFoundError(paste_id)
        if status is ConsumeStatus.UNAVAILABLE:
            logger.info(f"Paste {paste_id} not available (expired or view limit reached)")
            raise PasteNotAvailableError(paste_id)

        logger.info(f"Paste {paste_id} served, view {paste.view_count}")
        return ConsumedPaste(
            id=paste.id,
            content=paste.content,
            remaining_views=paste.remaining_views,
            expires_at=paste.expires_at,
            view_count=paste.view_count,
        )

    def ping(self) -> bool:
        """Check if the storage backend is reachable."""
        try:
            return self.backend.ping()
        except StorageError as e:
            logger.error(f"Health check failed: {e}")
        return False
