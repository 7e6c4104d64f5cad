from sqlalchemy import Boolean, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Card(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "cards"

    # Physical token value read off the NFC card
    card_uid: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    student = relationship("Student", back_populates="cards")

    # Deactivated cards keep their uid; only one active card per uid.
    __table_args__ = (
        Index(
            "uq_cards_active_uid",
            "card_uid",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    def __repr__(self):
        return f"<Card(card_uid='{self.card_uid}', active={self.is_active})>"
