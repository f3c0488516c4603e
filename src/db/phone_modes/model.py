"""
SQLAlchemy model for phone mode records.

Maps each phone number to the mode its calls are handled with.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.database import Base
from src.db.phone_modes.constants import DEFAULT_MODE, PhoneMode


class PhoneModeRecord(Base):
    """
    Phone number to mode mapping.

    ``number`` is unique and immutable after creation; only ``mode`` changes.
    """

    __tablename__ = "phone_modes"

    # Primary key, opaque to clients
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Store-assigned record ID",
    )

    number: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        comment="Phone number, trimmed",
    )
    mode: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default=DEFAULT_MODE.value,
        index=True,
        comment="Handling mode (CALL or OTP)",
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        comment="Record creation timestamp",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        comment="Record last update timestamp",
    )

    __table_args__ = (
        CheckConstraint(
            "mode IN ({})".format(", ".join(f"'{m.value}'" for m in PhoneMode)),
            name="ck_phone_modes_mode",
        ),
        # Newest-first listing
        Index("idx_phone_modes_created", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<PhoneModeRecord(id={self.id}, number={self.number}, "
            f"mode={self.mode})>"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model to its JSON representation.

        Returns:
            dict: Record data with camelCase timestamp keys
        """
        return {
            "id": self.id,
            "number": self.number,
            "mode": self.mode,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
