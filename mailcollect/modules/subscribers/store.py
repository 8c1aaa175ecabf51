"""
Subscriber Store
================

In-process subscriber table keyed by lowercased email. One instance is
created per app by create_app() and shared by every request; it is the
only source of truth for dedup and counts. Nothing here survives a
restart.
"""

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from mailcollect.core.errors import DuplicateSubscriberError

STATUS_ACTIVE = 'active'
STATUS_UNSUBSCRIBED = 'unsubscribed'

DEFAULT_NAME = 'Anonymous'


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SubscriberRecord:
    """A single newsletter subscription."""

    __slots__ = ('email', 'name', 'subscribed_at', 'status')

    def __init__(self, email: str, name: Optional[str] = None,
                 subscribed_at: Optional[datetime] = None, status: str = STATUS_ACTIVE):
        self.email = normalize_email(email)
        self.name = name or DEFAULT_NAME
        self.subscribed_at = subscribed_at or datetime.now(timezone.utc)
        self.status = status

    def to_dict(self) -> Dict[str, str]:
        return {
            'email': self.email,
            'name': self.name,
            'subscribedAt': self.subscribed_at.isoformat(),
            'status': self.status,
        }

    def __repr__(self):
        return f"<SubscriberRecord {self.email} ({self.status})>"


class SubscriberStore:
    """Thread-safe in-memory subscriber table. Insert-only."""

    def __init__(self):
        self._lock = threading.Lock()
        # dicts keep insertion order, so listings are stable
        self._records: Dict[str, SubscriberRecord] = {}

    def has(self, email: str) -> bool:
        with self._lock:
            return normalize_email(email) in self._records

    def insert(self, record: SubscriberRecord) -> int:
        """Insert record unless its email is already present.

        Returns the subscriber count after the insert. Raises
        DuplicateSubscriberError instead of overwriting.
        """
        with self._lock:
            if record.email in self._records:
                raise DuplicateSubscriberError()
            self._records[record.email] = record
            return len(self._records)

    def get(self, email: str) -> Optional[SubscriberRecord]:
        with self._lock:
            return self._records.get(normalize_email(email))

    def all(self) -> List[SubscriberRecord]:
        """Snapshot of every record in insertion order"""
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def __len__(self):
        return self.count()
