"""
Read access to the dated configuration snapshots of every host.

The archive wraps a store exposing ``names()``, ``dates(host)`` and
``get(host, timestamp)`` (see ``db.SqlStore`` and ``filestore.FileStore``).
It never trusts the store's ordering and never substitutes one snapshot for
another: every miss surfaces as its own ``ArchiveError``.

An unknown host raises ``HostNotFound`` from every per-host call. A host the
store knows about but holds no snapshots for lists as ``[]``, has no latest
timestamp, and fails nearest-date lookups with ``NoSnapshotBeforeDate``.
"""

import bisect
import logging
import time
from datetime import datetime
from typing import List, Optional

from analyzer import DiffOp, diff_texts
from errors import ArchiveError, DeadlineExceeded, NoSnapshotBeforeDate, StorageUnavailable
from models import Snapshot
from timestamps import format_timestamp, normalize

logger = logging.getLogger(__name__)


class Archive:
    def __init__(self, store):
        self.store = store

    def _call(self, fn, *args):
        try:
            return fn(*args)
        except ArchiveError:
            raise
        except Exception as e:
            raise StorageUnavailable(f"store failure: {e}") from e

    def list_hosts(self) -> List[str]:
        return sorted(self._call(self.store.names))

    def list_timestamps(self, host: str) -> List[datetime]:
        """All snapshot timestamps for ``host``, newest first."""
        stamps = self._call(self.store.dates, host)
        return sorted((normalize(t) for t in stamps), reverse=True)

    def latest_timestamp(self, host: str) -> Optional[datetime]:
        stamps = self.list_timestamps(host)
        return stamps[0] if stamps else None

    def get_exact(self, host: str, stamp: datetime) -> Snapshot:
        stamp = normalize(stamp)
        content = self._call(self.store.get, host, stamp)
        return Snapshot(host=host, timestamp=stamp, content=content)

    def get_nearest(self, host: str, stamp: datetime, deadline: Optional[float] = None) -> Snapshot:
        """
        The newest snapshot taken at or before ``stamp``.

        Args:
            host: Host name
            stamp: Reference time; an exact match returns that snapshot
            deadline: Optional ``time.monotonic()`` value, checked before the
                content is fetched

        Raises:
            NoSnapshotBeforeDate: if ``stamp`` predates every snapshot
        """
        stamp = normalize(stamp)
        ascending = self.list_timestamps(host)[::-1]
        idx = bisect.bisect_right(ascending, stamp) - 1
        if idx < 0:
            raise NoSnapshotBeforeDate(host, format_timestamp(stamp))
        if deadline is not None and time.monotonic() > deadline:
            raise DeadlineExceeded(f"deadline passed looking up {host} on {format_timestamp(stamp)}")
        found = ascending[idx]
        logger.debug("Nearest to %s for %s is %s", stamp, host, found)
        return self.get_exact(host, found)

    def diff(self, host: str, stamp_a: datetime, stamp_b: datetime) -> List[DiffOp]:
        a = self.get_exact(host, stamp_a)
        b = self.get_exact(host, stamp_b)
        return diff_texts(a.content, b.content)
