"""SQLAlchemy model for one-time confirmation and password reset codes.

A row exists only until the code is consumed; consuming a code deletes it.
"""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from uptask.infrastructure.persistence.database import Base


class TokenModel(Base):
    """SQLAlchemy model for the tokens table.

    Attributes:
        id: Primary key (UUID string).
        token: The short code sent by email.
        user_id: Foreign key to the owning user.
        created_at: Timestamp when the code was issued.
    """

    __tablename__ = "tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Token ID (UUID)",
    )
    token: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        index=True,
        comment="Code sent to the user",
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to users table",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    user: Mapped["UserModel"] = relationship(  # noqa: F821
        "UserModel",
        back_populates="tokens",
    )

    def is_expired(self, minutes: int, now: datetime | None = None) -> bool:
        """Check whether the code is older than ``minutes``.

        SQLite returns naive datetimes; those are read as UTC.
        """
        now = now or datetime.now(timezone.utc)
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at + timedelta(minutes=minutes) <= now

    def __repr__(self) -> str:
        return f"<Token(id={self.id}, user_id={self.user_id})>"
