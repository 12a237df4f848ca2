from __future__ import annotations

import datetime as dt
import enum

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class Member(Base):
    """Registered account; email is the identity key for every login path."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    gender: Mapped[Gender] = mapped_column(Enum(Gender, name="gender"), nullable=False)
    birth: Mapped[dt.date] = mapped_column(Date, nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    # Set once the account has been linked to Kakao; withdrawal leaves it set.
    is_kakao_email: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    def link_kakao(self) -> None:
        self.is_kakao_email = True
        self.touch()

    def touch(self) -> None:
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, email={self.email}, kakao={self.is_kakao_email})>"


class Venue(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    seats: Mapped[list["Seat"]] = relationship(back_populates="venue")


class Seat(Base):
    """A single seat position inside a venue."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    row_num: Mapped[int] = mapped_column(Integer, nullable=False)
    column_num: Mapped[int] = mapped_column(Integer, nullable=False)
    venue_id: Mapped[int] = mapped_column(ForeignKey("venues.id"), index=True, nullable=False)

    venue: Mapped[Venue] = relationship(back_populates="seats", lazy="select")

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, venue_id={self.venue_id}, row={self.row_num}, col={self.column_num})>"
