from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """sqlite drops tzinfo on the way out; values are always stored as UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def timestamp_field() -> datetime:
    return Field(
        default_factory=utc_now,
        sa_type=UTCDateTime(),
        sa_column_kwargs={"nullable": False},
    )


class TimestampModel(SQLModel):
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()
