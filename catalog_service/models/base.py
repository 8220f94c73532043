import uuid
from datetime import datetime, timezone
from typing import Annotated

from sqlalchemy import TIMESTAMP, Uuid
from sqlalchemy.orm import DeclarativeBase, mapped_column


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


uuidpk = Annotated[
    uuid.UUID,
    mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
]

created_ts = Annotated[
    datetime,
    mapped_column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)
]

updated_ts = Annotated[
    datetime,
    mapped_column(TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
]
