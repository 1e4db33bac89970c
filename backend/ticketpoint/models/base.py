from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    # Columns are naive DateTime holding UTC
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)
