"""
FastAPI dependencies shared by the routes.
"""
import logging
import threading
from datetime import datetime
from typing import Optional

from fastapi import Depends, Header

from app.config import Settings, get_settings
from app.database import connect_backend
from app.paste import from_epoch_ms, utcnow
from app.store import PasteStore

logger = logging.getLogger(__name__)

_store: Optional[PasteStore] = None
_store_lock = threading.Lock()


def get_store() -> PasteStore:
    """Return the process-wide paste store, connecting on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = PasteStore(connect_backend(get_settings()))
    return _store


def get_now(
    x_test_now_ms: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> datetime:
    """
    Get current time, respecting TEST_MODE for deterministic testing.

    Args:
        x_test_now_ms: Test timestamp header (milliseconds since epoch)
        settings: Application settings

    Returns:
        Current datetime in UTC
    """
    if settings.TEST_MODE and x_test_now_ms:
        try:
            return from_epoch_ms(int(x_test_now_ms))
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Invalid x-test-now-ms header: {e}")

    return utcnow()
