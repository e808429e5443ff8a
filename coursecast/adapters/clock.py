from datetime import UTC, datetime, timedelta


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def is_future(self, utc_dt: datetime, grace_seconds: int = 0) -> bool:
        return utc_dt > (self.now_utc() - timedelta(seconds=grace_seconds))
