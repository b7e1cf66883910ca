from abc import ABC, abstractmethod
import datetime


class Clock(ABC):
    """Reference clock: supplies "now" and the zone used for local dates."""

    def __init__(self, tz: datetime.tzinfo | None = None):
        self.tz = tz or datetime.timezone.utc

    @abstractmethod
    def now(self) -> datetime.datetime:
        pass

    def today(self) -> datetime.date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime.datetime:
        return datetime.datetime.now(self.tz)


class FixedClock(Clock):
    def __init__(self, instant: datetime.datetime, tz: datetime.tzinfo | None = None):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=datetime.timezone.utc)
        super().__init__(tz or instant.tzinfo)
        self._instant = instant.astimezone(self.tz)

    def now(self) -> datetime.datetime:
        return self._instant
