from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Guild(Base):
    __tablename__ = "guilds"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    prefix: Mapped[str] = mapped_column(String(10), default="!")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class CommandState(Base):
    """Persisted per-command state: cooldown timestamps and disabled scopes."""

    __tablename__ = "command_states"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    # user id (as string) -> ISO-8601 timestamp of the last use
    last_uses: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    globally_disabled: Mapped[bool] = mapped_column(Boolean, default=False)
    disabled_guilds: Mapped[list[int]] = mapped_column(JSON, default=list)
