from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_attendance.core.exceptions import CardNotFound
from campus_attendance.models.card import Card


class CardResolver:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, card_uid: str) -> Card:
        """
        Return the active card carrying card_uid, with its student loaded.

        A deactivated card and an unknown uid raise the same CardNotFound.
        """
        query = (
            select(Card)
            .options(selectinload(Card.student))
            .where(Card.card_uid == card_uid, Card.is_active.is_(True))
        )
        result = await self.db.execute(query)
        card = result.scalars().first()
        if card is None or card.student is None:
            raise CardNotFound(f"no active card for uid {card_uid!r}")
        return card
