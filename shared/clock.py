"""Wall-clock time source for elapsed-time checks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from shared.datetime_utils import ensure_utc


class SystemClock:
    """Measures elapsed time against the current UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def since(self, moment: datetime) -> timedelta:
        return self.now() - ensure_utc(moment)
