"""Member lookups and writes backed by the relational store."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.models import Member

logger = logging.getLogger(__name__)


class MemberDirectory:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Member | None:
        return self.db.scalar(select(Member).where(Member.email == email))

    def save(self, member: Member) -> Member:
        """Insert or update ``member`` and commit.

        The unique index on ``email`` rejects a second record for the same
        address; the resulting ``IntegrityError`` is left to the caller.
        """
        self.db.add(member)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(member)
        return member
